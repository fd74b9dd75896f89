"""Lightweight client for the NextUp backend.

Logs in, prints the resolved identity and, for players, the stat card the
front end would render.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
from dataclasses import asdict

from nextup.gateway import DEFAULT_BASE_URL, BackendClient, BackendError, NetworkError
from nextup.stats import aggregate_stats, build_player_card


async def run(base_url: str, email: str, password: str, player_id: int | None) -> None:
    async with BackendClient(base_url) as client:
        confirmation = await client.submit_credentials(email, password)
        print("Login:", json.dumps(confirmation.payload, indent=2))
        identity = await client.get_current_identity()
        print("Identity:", identity.model_dump_json(indent=2))

        if player_id is None and identity.role != "Player":
            return
        player = await client.fetch_player_by_id(player_id) if player_id is not None else await client.get_current_player()
        games = await client.fetch_player_stats(player.player_id) if player.player_id is not None else []
        card = build_player_card(player, aggregate_stats(games) if games else None)
        print("Player card:", json.dumps(asdict(card), indent=2, default=str))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the NextUp backend API")
    parser.add_argument("email", help="Account email")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Backend base URL")
    parser.add_argument("--password", default=None, help="Password (prompted when omitted)")
    parser.add_argument("--player", type=int, default=None, metavar="PLAYER_ID", help="Player card to print")
    args = parser.parse_args()

    password = args.password or getpass.getpass()
    try:
        asyncio.run(run(args.base_url, args.email, password, args.player))
    except (BackendError, NetworkError) as exc:
        raise SystemExit(f"request failed: {exc}") from exc


if __name__ == "__main__":
    main()
