import json

from nextup import cli


def test_positions_lists_every_code(capsys):
    cli.main(["positions"])
    out = capsys.readouterr().out
    assert "QB   Quarterback [Quarterback]" in out
    assert "DE   Defensive End [Defensive End, EDGE]" in out
    assert "fieldGoalMade" in out


def test_positions_describes_alias(capsys):
    cli.main(["positions", "Sam Linebacker"])
    out = capsys.readouterr().out
    assert "Sam Linebacker -> SLB (Sam Linebacker)" in out
    assert "tacklesForLoss" in out


def test_positions_unknown(capsys):
    cli.main(["positions", "Mystery"])
    out = capsys.readouterr().out
    assert "Mystery -> Mystery" in out
    assert "unrecognized position" in out


def test_resolve_settings_layers(tmp_path, monkeypatch):
    config = tmp_path / "nextup.json"
    config.write_text(json.dumps({"api_base_url": "http://from-file:1", "app_title": "From File"}), encoding="utf-8")
    monkeypatch.setenv("NEXTUP_APP_TITLE", "From Env")
    monkeypatch.delenv("NEXTUP_API_URL", raising=False)

    settings = cli.resolve_settings(config, "http://from-flag:2")

    assert settings.api_base_url == "http://from-flag:2"
    assert settings.app_title == "From Env"


def test_serve_runs_uvicorn(monkeypatch):
    calls = {}

    def fake_run(app, host, port, log_level):
        calls.update(app=app, host=host, port=port, log_level=log_level)

    monkeypatch.setattr("uvicorn.run", fake_run)
    monkeypatch.delenv("NEXTUP_API_URL", raising=False)

    cli.main(["serve", "--port", "9000", "--api-url", "http://backend.test"])

    assert calls["port"] == 9000
    assert calls["host"] == "127.0.0.1"
    assert calls["app"].state.settings.api_base_url == "http://backend.test"
