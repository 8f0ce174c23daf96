from __future__ import annotations

import argparse
import logging

from lootcal.api import LootboxClient
from lootcal.claims import ClaimSession
from lootcal.config import load_settings
from lootcal.workflows import load_game


def _flags(view) -> str:
    status = view.status
    names = [
        name
        for name, on in (
            ("active", status.active),
            ("locked", status.locked),
            ("missed", status.missed),
            ("claimed", status.claimed),
            ("acknowledged", status.acknowledged),
            ("out-of-stock", status.out_of_stock),
        )
        if on
    ]
    return ", ".join(names) or "-"


def _print_calendar(session) -> None:
    active_id = session.active_slot_id()
    print(f"{session.game.name or 'Game'} #{session.template_id}")
    for view in session.views():
        marker = "*" if view.prize.id == active_id else " "
        print(
            f"{marker} {str(view.display_date or ''):<10} slot={view.key:<14} "
            f"prize={view.prize.id:<6} {view.prize.name or '':<24} {_flags(view)}"
        )


def _claim_today(session, client, settings) -> None:
    def resolved(slot_key, prize):
        print(f"Won {prize.name or prize.id} in slot {slot_key}")

    def failed(slot_key, code, notice):
        print(f"{notice.title}: {notice.message} (code {code})")

    with ClaimSession.from_settings(
        session,
        client,
        settings,
        on_claim_resolved=resolved,
        on_claim_failed=failed,
    ) as claims:
        today = next(
            (view for view in claims.views() if view.is_today and view.status.claimable),
            None,
        )
        if today is None:
            print("Nothing to claim today")
            return
        claims.begin_claim(today.key)
        _print_calendar(claims.game)


def main() -> None:
    """Load a lootbox calendar from the configured service and print its slots."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("template_id", type=int)
    parser.add_argument("--lang", default=None)
    parser.add_argument("--claim", action="store_true", help="claim today's slot")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    settings = load_settings()
    client = LootboxClient(settings)
    session = load_game(
        client,
        args.template_id,
        args.lang or settings.language,
        history_limit=settings.history_limit,
    )

    _print_calendar(session)
    if args.claim:
        _claim_today(session, client, settings)


if __name__ == "__main__":
    main()
