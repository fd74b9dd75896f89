"""HTML renderers for the NextUp pages."""

from __future__ import annotations

from html import escape
from typing import Any, Iterable, Mapping, Optional, Sequence

from nextup.config.positions import display_name
from nextup.config.routes import LOGIN_ROUTE, REGISTER_ROUTE, navigation_for
from nextup.models import Game, Player, PlayerGoal, Team, TeamRef, User
from nextup.roster import CategorizedPositions, PositionGroups, depth_label, depth_slots
from nextup.schedule import SeasonSummary
from nextup.stats import PlayerCard, StatCell

UNIT_TABS = (
    ("offense", "Offense"),
    ("defense", "Defense"),
    ("special_teams", "Special Teams"),
    ("other", "Other"),
)


def render_page(body: str, *, title: str = "NextUp", user: Optional[User] = None) -> str:
    links = "".join(
        f'<a href="{escape(route)}">{escape(label)}</a>'
        for label, route in navigation_for(user.role if user else None)
    )
    account = ""
    if user is not None:
        account = (
            f'<span class="who">{escape(user.name or "")}</span>'
            '<form method="post" action="/logout" class="inline"><button class="secondary">Log out</button></form>'
        )
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    <title>{escape(title)}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 0; background: #0f172a; color: #e2e8f0; }}
        nav {{ display: flex; gap: 1rem; align-items: center; padding: 1rem 2rem; background: #111827; border-bottom: 1px solid #334155; }}
        nav a {{ color: #94a3b8; text-decoration: none; }}
        nav a.brand {{ color: #22d3ee; font-weight: 700; font-size: 1.3rem; margin-right: auto; }}
        nav .who {{ color: #cbd5e1; }}
        main {{ max-width: 1100px; margin: 2rem auto; padding: 0 1.5rem; }}
        form {{ display: grid; gap: 0.75rem; margin-bottom: 1.5rem; max-width: 480px; }}
        form.inline {{ display: inline; margin: 0; }}
        input, select, textarea {{ padding: 0.5rem; border-radius: 6px; border: 1px solid #475569; background: #1e293b; color: #e2e8f0; }}
        button {{ padding: 0.5rem 1rem; border-radius: 6px; border: none; background: #22d3ee; color: #0f172a; cursor: pointer; font-weight: 600; }}
        button.secondary {{ background: #475569; color: #fff; }}
        table {{ border-collapse: collapse; width: 100%; margin-top: 1rem; }}
        th, td {{ padding: 0.5rem; border: 1px solid #334155; text-align: left; }}
        .tabs a {{ margin-right: 1rem; color: #94a3b8; text-decoration: none; }}
        .tabs a.active {{ color: #22d3ee; border-bottom: 2px solid #22d3ee; }}
        .grid {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); gap: 1rem; }}
        .card {{ background: #1e293b; border-radius: 10px; padding: 1rem; }}
        .stat {{ text-align: center; }}
        .stat .value {{ font-size: 1.4rem; font-weight: 700; color: #22d3ee; }}
        .stat .label {{ font-size: 0.75rem; color: #94a3b8; }}
        .depth {{ font-size: 0.7rem; padding: 0 0.3rem; border-radius: 4px; background: #16a34a; margin-right: 0.3rem; }}
        .notice {{ margin: 0.5rem 0; padding: 0.75rem 1rem; border-radius: 6px; }}
        .notice.success {{ background: #064e3b; color: #a7f3d0; }}
        .notice.error {{ background: #450a0a; color: #fecaca; }}
        .muted {{ color: #64748b; }}
    </style>
</head>
<body>
    <nav><a class=\"brand\" href=\"/\">NextUp</a>{links}{account}</nav>
    <main>{body}</main>
</body>
</html>"""


def render_notice(message: Optional[str], kind: str = "error") -> str:
    if not message:
        return ""
    return f'<div class="notice {escape(kind)}">{escape(message)}</div>'


def render_loading() -> str:
    return '<p class="muted">Loading...</p>'


def _value(value: Any, placeholder: str = "--") -> str:
    if value is None or value == "":
        return placeholder
    return escape(str(value))


def _team_name(team: Optional[TeamRef], fallback: str) -> str:
    if team is None or not team.name:
        return fallback
    return team.name


def render_landing(user: Optional[User]) -> str:
    if user is not None:
        return (
            f"<h1>Welcome back, {escape(user.first_name or 'coach')}</h1>"
            '<p>Pick up where you left off from the navigation bar.</p>'
        )
    return (
        "<h1>NextUp</h1>"
        "<p>Team, schedule and player tracking for athletic directors, coaches and players.</p>"
        f'<p><a href="{LOGIN_ROUTE}">Log in</a> or <a href="{REGISTER_ROUTE}">create an account</a>.</p>'
    )


def render_login(*, error: Optional[str] = None, email: str = "") -> str:
    return f"""
<h1>Log in</h1>
<form method=\"post\" action=\"{LOGIN_ROUTE}\">
    <label for=\"email\">Email</label>
    <input id=\"email\" name=\"email\" type=\"email\" value=\"{escape(email)}\" required>
    <label for=\"password\">Password</label>
    <input id=\"password\" name=\"password\" type=\"password\" required>
    <button type=\"submit\">Log in</button>
</form>
{render_notice(error)}
<p>Don't have an account? <a href=\"{REGISTER_ROUTE}\">Create one</a></p>
"""


def render_register(teams: Sequence[Team], *, user_type: str = "player", error: Optional[str] = None) -> str:
    team_options = "".join(
        f'<option value="{team.team_id}">{escape(team.name)}</option>' for team in teams if team.team_id is not None
    )
    player_checked = " checked" if user_type != "coach" else ""
    coach_checked = " checked" if user_type == "coach" else ""
    return f"""
<h1>Create an account</h1>
{render_notice(error)}
<form method=\"post\" action=\"{REGISTER_ROUTE}\">
    <fieldset>
        <legend>I want to register as a:</legend>
        <label><input type=\"radio\" name=\"user_type\" value=\"player\"{player_checked}> Player</label>
        <label><input type=\"radio\" name=\"user_type\" value=\"coach\"{coach_checked}> Coach</label>
    </fieldset>
    <input name=\"first_name\" placeholder=\"First name\" required>
    <input name=\"last_name\" placeholder=\"Last name\" required>
    <input name=\"email\" type=\"email\" placeholder=\"Email\" required>
    <input name=\"password\" type=\"password\" placeholder=\"Password\" required>
    <h3>Players</h3>
    <select name=\"team_id\"><option value=\"\">Select a team</option>{team_options}</select>
    <input name=\"position\" placeholder=\"Position\">
    <input name=\"age\" type=\"number\" placeholder=\"Age\">
    <input name=\"height\" placeholder=\"Height\">
    <input name=\"weight\" type=\"number\" placeholder=\"Weight\">
    <input name=\"jersey_number\" type=\"number\" placeholder=\"Jersey number\">
    <h3>Coaches</h3>
    <input name=\"experience_years\" type=\"number\" placeholder=\"Years of experience\">
    <input name=\"specialty\" placeholder=\"Specialty\">
    <input name=\"certification\" placeholder=\"Certification\">
    <textarea name=\"bio\" placeholder=\"Bio\"></textarea>
    <button type=\"submit\">Create account</button>
</form>
"""


def render_generic_dashboard(user: User) -> str:
    return (
        "<h1>Dashboard</h1>"
        f"<p>Welcome to your NextUp dashboard, {escape(user.name or 'friend')}!</p>"
    )


def render_stat_cells(cells: Iterable[StatCell], css_class: str = "grid") -> str:
    items = "".join(
        f'<div class="card stat"><div class="value">{escape(cell.display)}</div>'
        f'<div class="label">{escape(cell.label)}</div></div>'
        for cell in cells
    )
    return f'<div class="{css_class}">{items}</div>'


def render_player_card(card: PlayerCard) -> str:
    team = f"{escape(card.team_name)} &bull; " if card.team_name else ""
    body = f"""
<section class=\"card\">
    <h2>{escape(card.name)}</h2>
    <p class=\"muted\">{team}#{escape(card.jersey_number)} &bull; {escape(card.position)}</p>
    <p>HT/WT {escape(card.height)} / {escape(card.weight)} &bull; AGE {escape(card.age)}</p>
    {render_stat_cells(card.summary)}
</section>
"""
    if card.stats:
        body += f"<h3>Season stats</h3>{render_stat_cells(card.stats)}"
    else:
        body += '<p class="muted">No stats are tracked for this position.</p>'
    return body


def render_game_rows(games: Sequence[Game], *, show_actions: bool = False) -> str:
    if not games:
        return '<p class="muted">No games scheduled.</p>'
    rows = []
    for game in games:
        actions = ""
        if show_actions and game.game_id is not None:
            actions = (
                f'<td><a href="/athletic-director/games/{game.game_id}/edit">Edit</a> '
                f'<form method="post" action="/athletic-director/games/{game.game_id}/delete" class="inline">'
                '<button class="secondary">Delete</button></form></td>'
            )
        status = game.status or ("Completed" if game.is_completed else "Scheduled")
        rows.append(
            "<tr>"
            f"<td>{_value(game.week)}</td>"
            f"<td>{escape(_team_name(game.away_team, 'Away Team'))} @ {escape(_team_name(game.home_team, 'Home Team'))}</td>"
            f"<td>{_value(game.game_date)}</td>"
            f"<td>{_value(game.location)}</td>"
            f"<td>{escape(status)}</td>"
            f"{actions}"
            "</tr>"
        )
    action_header = "<th></th>" if show_actions else ""
    return (
        "<table><thead><tr><th>Week</th><th>Matchup</th><th>Date</th><th>Location</th><th>Status</th>"
        f"{action_header}</tr></thead><tbody>{''.join(rows)}</tbody></table>"
    )


def _render_group(code: str, players: Sequence[Player], *, link_players: bool) -> str:
    entries = []
    for index, player in enumerate(players):
        label = depth_label(index)
        badge = f'<span class="depth">{label}</span>' if label else ""
        name = escape(player.name)
        if link_players and player.player_id is not None:
            name = f'<a href="/coach/player/{player.player_id}">{name}</a>'
        extras = "".join(
            part
            for part in (
                f" &bull; {escape(player.height)}" if player.height else "",
                f" &bull; {player.weight}lbs" if player.weight is not None else "",
            )
        )
        entries.append(
            f"<li>#{_value(player.jersey_number)} {name}<br>"
            f'<small>{badge}Age: {_value(player.age)}{extras}</small></li>'
        )
    listing = "".join(entries) or '<li class="muted">No players assigned</li>'
    return (
        f'<div class="card"><h3 title="{escape(display_name(code))}">{escape(code)}</h3>'
        f"<ul>{listing}</ul></div>"
    )


def render_depth_chart(
    categorized: CategorizedPositions,
    *,
    active: str,
    base_url: str,
    link_players: bool = True,
) -> str:
    tabs = "".join(
        f'<a href="{escape(base_url)}?unit={key}" class="{"active" if key == active else ""}">{label}</a>'
        for key, label in UNIT_TABS
    )
    groups: PositionGroups = categorized.bucket(active)
    if groups:
        content = "".join(_render_group(code, players, link_players=link_players) for code, players in groups.items())
    else:
        label = dict(UNIT_TABS)[active].lower()
        content = f'<p class="muted">No {escape(label)} players on the roster yet.</p>'
    return f'<div class="tabs">{tabs}</div><div class="grid">{content}</div>'


def render_depth_table(categorized: CategorizedPositions) -> str:
    rows = []
    for key, _label in UNIT_TABS:
        for code, players in categorized.bucket(key).items():
            cells = "".join(
                f"<td>{escape(player.name) if player else '--'}</td>" for player in depth_slots(players)
            )
            rows.append(f'<tr><td title="{escape(display_name(code))}">{escape(code)}</td>{cells}</tr>')
    if not rows:
        return '<p class="muted">No depth chart data available.</p>'
    return (
        "<table><thead><tr><th>POS</th><th>STARTER</th><th>2ND</th><th>3RD</th><th>4TH</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def render_team_list(teams: Sequence[Team], *, link_prefix: Optional[str] = None, manage: bool = False) -> str:
    if not teams:
        return '<p class="muted">No teams yet.</p>'
    items = []
    for team in teams:
        name = escape(team.name or "Unnamed team")
        if link_prefix and team.team_id is not None:
            name = f'<a href="{escape(link_prefix)}{team.team_id}">{name}</a>'
        actions = ""
        if manage and team.team_id is not None:
            actions = (
                f'<a href="/athletic-director/teams/{team.team_id}/edit">Edit</a> '
                f'<form method="post" action="/athletic-director/teams/{team.team_id}/delete" class="inline">'
                '<button class="secondary">Delete</button></form>'
            )
        where = team.location or ", ".join(part for part in (team.city, team.state) if part)
        items.append(
            f'<div class="card"><h3>{name}</h3><p class="muted">{_value(where)}</p>'
            f"<p>{_value(team.division)} &bull; {_value(team.conference)}</p>{actions}</div>"
        )
    return f'<div class="grid">{"".join(items)}</div>'


def render_goals(goals: Sequence[PlayerGoal]) -> str:
    if not goals:
        return '<p class="muted">No goals yet. Add one below.</p>'
    rows = "".join(
        "<tr>"
        f"<td>{escape(goal.goal_type)}</td>"
        f"<td>{goal.current_value} / {goal.target_value}</td>"
        f"<td>{goal.progress * 100:.0f}%</td>"
        f"<td>{_value(goal.season)}</td>"
        f'<td><a href="/player/my-goals/{goal.player_goal_id}/edit">Edit</a> '
        f'<form method="post" action="/player/my-goals/{goal.player_goal_id}/delete" class="inline">'
        '<button class="secondary">Delete</button></form></td>'
        "</tr>"
        for goal in goals
    )
    return (
        "<table><thead><tr><th>Goal</th><th>Progress</th><th></th><th>Season</th><th></th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
    )


def _field(value: Any) -> str:
    return "" if value is None else escape(str(value))


def _split_kickoff(game_date: Optional[str]) -> tuple[str, str]:
    if not game_date:
        return "", ""
    day, _, clock = game_date.partition("T")
    return day[:10], clock[:5]


def render_goal_form(goal: Optional[PlayerGoal] = None) -> str:
    action = "/player/my-goals" if goal is None else f"/player/my-goals/{goal.player_goal_id}"
    cancel = '<a href="/player/my-goals">Cancel</a>' if goal is not None else ""
    label = "Add goal" if goal is None else "Update goal"
    return f"""
<form method=\"post\" action=\"{action}\">
    <input name=\"goal_type\" placeholder=\"Goal (e.g. Rushing Yards)\" value=\"{_field(goal and goal.goal_type)}\" required>
    <input name=\"target_value\" type=\"number\" min=\"0\" placeholder=\"Target\" value=\"{_field(goal and goal.target_value)}\">
    <input name=\"current_value\" type=\"number\" min=\"0\" placeholder=\"Current\" value=\"{_field(goal and goal.current_value)}\">
    <input name=\"season\" placeholder=\"Season\" value=\"{_field(goal and goal.season)}\">
    <button type=\"submit\">{label}</button>
    {cancel}
</form>
"""


def render_team_form(team: Optional[Team] = None) -> str:
    action = "/athletic-director/teams" if team is None else f"/athletic-director/teams/{team.team_id}"
    inputs = "".join(
        f'<input name="{name}" placeholder="{placeholder}" value="{_field(getattr(team, name, None))}"{" required" if name == "name" else ""}>'
        for name, placeholder in (
            ("name", "Team name"),
            ("school", "School"),
            ("mascot", "Mascot"),
            ("city", "City"),
            ("state", "State"),
            ("division", "Division"),
            ("conference", "Conference"),
        )
    )
    checked = " checked" if team is not None and team.is_public else ""
    cancel = '<a href="/athletic-director/teams">Cancel</a>' if team is not None else ""
    label = "Create team" if team is None else "Update team"
    return f"""
<form method=\"post\" action=\"{action}\">
    {inputs}
    <label><input type=\"checkbox\" name=\"is_public\"{checked}> Public team</label>
    <button type=\"submit\">{label}</button>
    {cancel}
</form>
"""


def render_game_form(teams: Sequence[Team], season: int, game: Optional[Game] = None) -> str:
    if len(teams) < 2:
        return '<p class="muted">Create at least two teams before scheduling games.</p>'

    def options(selected: Optional[int]) -> str:
        return "".join(
            f'<option value="{team.team_id}"{" selected" if team.team_id == selected else ""}>{escape(team.name)}</option>'
            for team in teams
            if team.team_id is not None
        )

    day, clock = _split_kickoff(game.game_date if game else None)
    current_status = (game.status if game else None) or "Scheduled"
    statuses = "".join(
        f'<option{" selected" if status == current_status else ""}>{status}</option>'
        for status in ("Scheduled", "InProgress", "Completed", "Cancelled")
    )
    action = "/athletic-director/games" if game is None else f"/athletic-director/games/{game.game_id}"
    cancel = '<a href="/athletic-director/games">Cancel</a>' if game is not None else ""
    label = "Schedule game" if game is None else "Update game"
    return f"""
<form method=\"post\" action=\"{action}\">
    <select name=\"home_team_id\" required><option value=\"\">Home team</option>{options(game.home_team_id if game else None)}</select>
    <select name=\"away_team_id\" required><option value=\"\">Away team</option>{options(game.away_team_id if game else None)}</select>
    <input name=\"game_date\" type=\"date\" value=\"{escape(day)}\" required>
    <input name=\"game_time\" type=\"time\" value=\"{escape(clock)}\" required>
    <input name=\"location\" placeholder=\"Location\" value=\"{_field(game and game.location)}\">
    <input name=\"week\" type=\"number\" min=\"0\" placeholder=\"Week\" value=\"{_field(game and game.week)}\">
    <input name=\"season\" type=\"number\" value=\"{season}\" required>
    <select name=\"status\">{statuses}</select>
    <button type=\"submit\">{label}</button>
    {cancel}
</form>
"""


def render_ad_counts(data: Mapping[str, Any]) -> str:
    cards = (
        ("Total Teams", data.get("totalTeams", 0)),
        ("Total Games", data.get("totalGames", 0)),
        ("Completed Games", data.get("completedGames", 0)),
        ("Upcoming Games", data.get("upcomingGames", 0)),
    )
    return render_stat_cells(StatCell(field=label, label=label, value=value) for label, value in cards)


def render_season_overview(summary: SeasonSummary, options: Sequence[int]) -> str:
    choices = "".join(
        f'<option value="{year}"{" selected" if year == summary.season else ""}>{year}</option>' for year in options
    )
    counts = render_ad_counts(
        {
            "totalTeams": summary.total_teams,
            "totalGames": summary.total_games,
            "completedGames": summary.completed_games,
            "upcomingGames": summary.upcoming_games,
        }
    )
    standings = "".join(
        f"<tr><td>{escape(team.name)}</td><td>{escape(team.record)}</td></tr>" for team in summary.teams
    )
    return f"""
<h1>Season Overview</h1>
<form method=\"get\" action=\"/athletic-director/season-overview\" class=\"inline\">
    <select name=\"season\">{choices}</select> <button type=\"submit\">Show</button>
</form>
{counts}
<h2>Teams</h2>
<table><thead><tr><th>Team</th><th>Record</th></tr></thead><tbody>{standings}</tbody></table>
<h2>Games</h2>
{render_game_rows(list(summary.games))}
"""
