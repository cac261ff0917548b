#!/usr/bin/env python3
"""Report how the team generator splits a roster.

Reads a JSON list of player records (the same shape the API accepts) or
falls back to the bundled sample roster, then prints per-team stats and
the distinct compositions seen across repeated runs.

Usage:
    python backend/scripts/analyze_team_generation.py
    python backend/scripts/analyze_team_generation.py roster.json --group tue
    python backend/scripts/analyze_team_generation.py roster.json -n 50 -o report.json
"""

import argparse
import json
from pathlib import Path

from roster_balancer.models.player import Player
from roster_balancer.services.team_analysis import SAMPLE_ROSTER, run_bulk_analysis


def load_roster(path: Path) -> list[Player]:
    """Load player records from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("players", [])
    return [Player.from_dict(record) for record in data]


def print_report(report: dict) -> None:
    bulk = report["bulk_analysis"]
    single = report["single_run_analysis"]

    print(f"Runs: {bulk['iterations']}")
    print("Compositions:")
    for composition in bulk["unique_compositions"]:
        print(f"  {composition}")

    print(f"\nTop players: {', '.join(single['top_skilled_players'])}")
    for side, stats in single["team_stats"].items():
        print(
            f"{side:>5}: {stats['count']} players "
            f"({stats['forwards']}F/{stats['defensemen']}D), "
            f"avg {stats['avg_skill']:.2f} "
            f"(F {stats['avg_forward_skill']:.2f}, D {stats['avg_defense_skill']:.2f})"
        )
    print(f"\nRed: {single['red_team_players']}")


def main():
    parser = argparse.ArgumentParser(description="Analyze team generation for a roster")
    parser.add_argument("roster", nargs="?", type=Path,
                        help="JSON roster file (defaults to the sample roster)")
    parser.add_argument("--group", type=str, default=None,
                        help="Only use players with this group code")
    parser.add_argument("-n", "--iterations", type=int, default=100,
                        help="Number of generation runs")
    parser.add_argument("--json-out", "-o", type=Path,
                        help="Also write the report as JSON")
    args = parser.parse_args()

    players = load_roster(args.roster) if args.roster else SAMPLE_ROSTER
    report = run_bulk_analysis(players, args.iterations, group_code=args.group)
    print_report(report)

    if args.json_out:
        args.json_out.write_text(json.dumps(report, indent=2))
        print(f"\nWrote {args.json_out}")


if __name__ == "__main__":
    main()
