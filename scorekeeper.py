#!/usr/bin/env python3
"""
SFL Scorekeeper CLI

Records episode events and eliminations, runs roster transactions, and
publishes league standings. League data lives in a JSON document store
(data/store by default).

Usage:
    python scorekeeper.py week
    python scorekeeper.py --league my-league draft alice castaway-1 castaway-2 ...
    python scorekeeper.py --league my-league add-drop alice --add castaway-7 --drop castaway-2
    python scorekeeper.py --league my-league record-episode --episode 3 --events ep3.json
    python scorekeeper.py --league my-league eliminate castaway-4 --episode 3
    python scorekeeper.py --league my-league standings
    python scorekeeper.py --league my-league export --output league.xlsx
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path

from sfl import (
    ConcurrentModificationError,
    JsonFileStore,
    LeagueManager,
    RosterChangeError,
    export_league_workbook,
    get_config,
    setup_logging,
)


def load_events_file(path: Path) -> dict[str, list]:
    """Events file: {castaway_id: [event, ...]}, optionally wrapped in {"events": ...}."""
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict) and isinstance(data.get('events'), dict):
        return data['events']
    return data


def print_roster(roster) -> None:
    for entry in roster:
        line = f"  {entry.castaway_id:<16} {entry.status:<10} {entry.accumulated_points:>5} pts"
        if entry.dropped_week is not None:
            line += f"  (dropped week {entry.dropped_week})"
        if entry.eliminated_week is not None:
            line += f"  (out episode {entry.eliminated_week})"
        print(line)


def print_results(results) -> int:
    """Print recompute results; returns a process exit code."""
    code = 0
    for result in results:
        print(f"League {result.league_id}: recomputed {len(result.totals)} rosters")
        for user_id, error in result.failures.items():
            print(f"  ❌ {user_id}: {error}")
            code = 1
    return code


def cmd_week(manager: LeagueManager, args) -> int:
    now = datetime.fromisoformat(args.at) if args.at else None
    print(f"Week {manager.current_week(now)}")
    return 0


def cmd_draft(manager: LeagueManager, args) -> int:
    roster = manager.draft(args.user, args.castaways)
    print(f"✓ {args.user} drafted {len(roster)} castaways")
    return 0


def cmd_add_drop(manager: LeagueManager, args) -> int:
    roster = manager.submit_add_drop(args.user, add_id=args.add, drop_id=args.drop)
    print(f"✓ Roster updated for {args.user}")
    print_roster(roster)
    return 0


def cmd_reset(manager: LeagueManager, args) -> int:
    roster = manager.reset_to_prior_week(args.user)
    print(f"✓ {args.user} reset to last week's roster")
    print_roster(roster)
    return 0


def cmd_record_episode(manager: LeagueManager, args) -> int:
    events_path = Path(args.events)
    if not events_path.exists():
        print(f"❌ Events file not found: {events_path}")
        return 1
    air_date = date.fromisoformat(args.air_date) if args.air_date else None
    results = manager.record_episode(args.episode, load_events_file(events_path), air_date)
    print(f"✓ Episode {args.episode} recorded")
    return print_results(results)


def cmd_eliminate(manager: LeagueManager, args) -> int:
    if args.undo:
        results = manager.unmark_eliminated(args.castaway)
        if not results:
            print(f"{args.castaway} was not marked eliminated")
            return 0
        print(f"✓ {args.castaway} restored")
    else:
        results = manager.mark_eliminated(args.castaway, args.episode)
        print(f"✓ {args.castaway} eliminated")
    return print_results(results)


def cmd_recompute(manager: LeagueManager, args) -> int:
    return print_results([manager.recompute()])


def cmd_standings(manager: LeagueManager, args) -> int:
    standings = manager.standings()
    if not standings:
        print("No rosters yet")
        return 0
    print(f"{'Rank':<6}{'User':<20}{'Points':>8}")
    for rank, (user_id, points) in enumerate(standings.items(), start=1):
        print(f"{rank:<6}{user_id:<20}{points:>8}")
    return 0


def cmd_export(manager: LeagueManager, args) -> int:
    rosters = {u: manager.timeline.current_roster(u) for u in manager.timeline.list_users()}
    names = {c.id: c.name for c in manager.config.castaways}
    path = export_league_workbook(
        args.output, manager.standings(), rosters, names, manager.config.roster_size
    )
    print(f"✓ Exported to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Survivor Fantasy League scorekeeper")
    parser.add_argument(
        "--league", "-l",
        default="default",
        help="League ID",
    )
    parser.add_argument(
        "--data-dir", "-d",
        default="data/store",
        help="Root directory of the JSON document store",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also write a log file under logs/",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("week", help="Show the current season week")
    p.add_argument("--at", help="Evaluate at this ISO timestamp instead of now")
    p.set_defaults(func=cmd_week)

    p = sub.add_parser("draft", help="Draft a user's initial roster")
    p.add_argument("user")
    p.add_argument("castaways", nargs="+")
    p.set_defaults(func=cmd_draft)

    p = sub.add_parser("add-drop", help="Add and/or drop a castaway this week")
    p.add_argument("user")
    p.add_argument("--add")
    p.add_argument("--drop")
    p.set_defaults(func=cmd_add_drop)

    p = sub.add_parser("reset", help="Undo this week's roster changes")
    p.add_argument("user")
    p.set_defaults(func=cmd_reset)

    p = sub.add_parser("record-episode", help="Save an episode's scoring events")
    p.add_argument("--episode", "-e", type=int, required=True)
    p.add_argument("--events", required=True, help="JSON file of events by castaway")
    p.add_argument("--air-date", help="Air date (YYYY-MM-DD)")
    p.set_defaults(func=cmd_record_episode)

    p = sub.add_parser("eliminate", help="Mark a castaway as voted out")
    p.add_argument("castaway")
    p.add_argument("--episode", "-e", type=int, default=None)
    p.add_argument("--undo", action="store_true", help="Remove the elimination")
    p.set_defaults(func=cmd_eliminate)

    p = sub.add_parser("recompute", help="Recompute every roster in the league")
    p.set_defaults(func=cmd_recompute)

    p = sub.add_parser("standings", help="Show league standings")
    p.set_defaults(func=cmd_standings)

    p = sub.add_parser("export", help="Export standings and rosters to Excel")
    p.add_argument("--output", "-o", default="league.xlsx")
    p.set_defaults(func=cmd_export)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=args.log_file,
    )

    manager = LeagueManager(JsonFileStore(args.data_dir), args.league, get_config())
    try:
        return args.func(manager, args)
    except RosterChangeError as e:
        print(f"❌ {e}")
        return 1
    except ConcurrentModificationError as e:
        print(f"❌ {e} - try again")
        return 1
    except ValueError as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
