"""Command line interface for Kendo Taikai.

Run a simulated taikai, seed groups from a team file or build a bracket from
seeded teams. Without arguments an interactive prompt with command
completion is started.
"""

# Kendo Taikai
# Copyright (C) 2025  Kendo Taikai developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import json
import sys
from pathlib import Path
from typing import List

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from kendotaikai import __version__
from kendotaikai.constants import DEFAULT_GROUP_COUNT, DEFAULT_QUALIFIERS_PER_GROUP
from kendotaikai.controllers.bracket import generate_bracket, get_bracket_rounds
from kendotaikai.controllers.seeding import generate_seed_groups
from kendotaikai.controllers.tournament import TournamentManager, load_teams
from kendotaikai.exceptions import KendoTaikaiException
from kendotaikai.models.bracket import Bracket
from kendotaikai.models.group import Group
from kendotaikai.models.team import Team
from kendotaikai.simulation.rtg import (
    RandomTournamentGenerator,
    ResultPattern,
    SimulationConfig,
)
from kendotaikai.utils import setup_logger

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Command definitions with their options
COMMANDS = {
    "simulate": {
        "description": "Play a random tournament end to end",
        "options": {
            "--teams": "Number of teams (default: 12)",
            "--dojos": "Number of dojos (default: 3)",
            "--groups": "Requested seed groups (default: 4)",
            "--qualifiers": "Teams per group entering the bracket (default: 2)",
            "--pattern": "Duel result pattern (realistic/random)",
            "--seed": "Random seed for reproducibility",
            "--output": "Write the played tournament to a JSON file",
        },
    },
    "groups": {
        "description": "Seed teams from a JSON file into groups",
        "options": {
            "--file": "Team file (JSON list of teams)",
            "--groups": "Requested seed groups (default: 4)",
            "--output": "Write the groups to a JSON file",
        },
    },
    "bracket": {
        "description": "Build a double-elimination bracket from seeded teams",
        "options": {
            "--file": "Team file (JSON list of teams with seed_ranking)",
            "--output": "Write the bracket to a JSON file",
        },
    },
    "help": {
        "description": "Show help for specific command",
        "options": {
            "<command>": "Command name to get help for",
        },
    },
    "exit": {"description": "Exit the interactive mode", "options": {}},
}


def print_banner():
    """Print the application banner."""
    banner = f"""
{Colors.OKBLUE}+-------------------------------------------------+
|                                                 |
|               KENDO TAIKAI - CLI                |
|                                                 |
+-------------------------------------------------+{Colors.ENDC}

Type {Colors.BOLD}/help{Colors.ENDC} to see all available commands
Type {Colors.BOLD}exit{Colors.ENDC} or {Colors.BOLD}quit{Colors.ENDC} to leave interactive mode
"""
    print(banner)


def print_commands_list():
    """Print list of all available commands."""
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, info in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:15}{Colors.ENDC} - {info['description']}")
    print()


def print_command_help(command: str):
    """Print detailed help for a specific command."""
    if command not in COMMANDS:
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print_commands_list()
        return

    cmd_info = COMMANDS[command]
    print(f"\n{Colors.BOLD}{Colors.OKBLUE}Command: {command}{Colors.ENDC}")
    print(f"{Colors.BOLD}Description:{Colors.ENDC} {cmd_info['description']}\n")

    if cmd_info["options"]:
        print(f"{Colors.BOLD}Options:{Colors.ENDC}")
        for option, description in cmd_info["options"].items():
            print(f"  {Colors.OKCYAN}{option:20}{Colors.ENDC} {description}")
    print()


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    # Support both "/command" and "command" formats
    completions = {}
    for cmd, info in COMMANDS.items():
        options_completer = (
            WordCompleter(list(info["options"].keys())) if info["options"] else None
        )
        completions[cmd] = options_completer
        completions[f"/{cmd}"] = options_completer

    completions["/help"] = None
    completions["/list"] = None

    return NestedCompleter.from_nested_dict(completions)


# ========== Output ==========


def print_groups(groups: List[Group]):
    for group in groups:
        print(f"\n{Colors.BOLD}{group.name}{Colors.ENDC} ({len(group.matches)} matches)")
        names = {t.id: t.name for t in group.teams}
        for standing in group.standings:
            team = group.get_team(standing.team_id)
            print(
                f"  {standing.ranking}. {names[standing.team_id]:24} "
                f"{team.dojo_id:14} W{standing.wins} L{standing.losses} "
                f"P{standing.points}"
            )


def print_bracket(bracket: Bracket):
    names = {t.id: t.name for t in bracket.teams}

    def label(team_id):
        return names.get(team_id, "TBD") if team_id else "TBD"

    view = get_bracket_rounds(bracket)
    for bracket_round in view.winners_rounds + view.losers_rounds:
        side = bracket_round.side.value.capitalize()
        print(f"\n{Colors.BOLD}{side} round {bracket_round.round}{Colors.ENDC}")
        if not bracket_round.matches:
            print("  (no matches)")
        for match in bracket_round.matches:
            if match.is_bye:
                print(f"  [{match.index:2}] {label(match.team1_id)} - bye")
                continue
            winner = f" -> {label(match.winner_id)}" if match.winner_id else ""
            print(
                f"  [{match.index:2}] {label(match.team1_id)} vs "
                f"{label(match.team2_id)} ({match.status.value}){winner}"
            )
    final = view.grand_final
    if final is not None:
        print(f"\n{Colors.BOLD}Grand final{Colors.ENDC}")
        print(f"  [{final.index:2}] {label(final.team1_id)} vs {label(final.team2_id)}")
    print(f"\nTeams remaining: {view.teams_remaining}")


def print_final_standings(teams: List[Team]):
    print(f"\n{Colors.BOLD}Final standings:{Colors.ENDC}")
    for team in teams:
        print(f"  {team.final_ranking:3}. {team.name} ({team.dojo_id})")


def write_json(path: str, payload) -> None:
    output_path = Path(path)
    output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"{Colors.OKGREEN}Saved to: {output_path}{Colors.ENDC}")


# ========== Commands ==========


def run_simulate_command(args: argparse.Namespace) -> int:
    """Run the simulate (RTG) command."""
    print(f"\n{Colors.BOLD}Simulating tournament...{Colors.ENDC}")

    config = SimulationConfig(
        num_teams=args.teams,
        num_dojos=args.dojos,
        requested_groups=args.groups,
        qualifiers_per_group=args.qualifiers,
        result_pattern=ResultPattern[args.pattern.upper()],
        seed=args.seed,
    )
    rtg = RandomTournamentGenerator(config)
    try:
        tournament = rtg.generate_complete_tournament()
    except KendoTaikaiException as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        return 1

    print_groups(tournament.seed_groups)
    print_bracket(tournament.bracket)
    print_final_standings(TournamentManager().get_final_standings(tournament))
    print(f"\n  Team matches played: {len(rtg.played_matches)}")

    if args.output:
        Path(args.output).write_text(rtg.export_json_format(tournament), encoding="utf-8")
        print(f"{Colors.OKGREEN}Tournament saved to: {args.output}{Colors.ENDC}")
    return 0


def run_groups_command(args: argparse.Namespace) -> int:
    """Seed a team file into groups."""
    try:
        teams = load_teams(args.file)
        groups = generate_seed_groups(teams, requested_groups=args.groups)
    except KendoTaikaiException as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        return 1

    print_groups(groups)
    if args.output:
        write_json(args.output, [g.to_dict() for g in groups])
    return 0


def run_bracket_command(args: argparse.Namespace) -> int:
    """Build a bracket from a seeded team file."""
    try:
        teams = load_teams(args.file)
        bracket = generate_bracket(teams)
    except KendoTaikaiException as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        return 1

    print_bracket(bracket)
    if args.output:
        write_json(args.output, bracket.to_dict())
    return 0


# ========== Parsers ==========


def add_simulate_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--teams", type=int, default=12, help="Number of teams")
    parser.add_argument("--dojos", type=int, default=3, help="Number of dojos")
    parser.add_argument("--groups", type=int, default=DEFAULT_GROUP_COUNT)
    parser.add_argument(
        "--qualifiers", type=int, default=DEFAULT_QUALIFIERS_PER_GROUP
    )
    parser.add_argument(
        "--pattern", choices=[p.value for p in ResultPattern], default="realistic"
    )
    parser.add_argument("--seed", type=int)
    parser.add_argument("--output")


def add_groups_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--file", required=True, help="Team file (JSON)")
    parser.add_argument("--groups", type=int, default=DEFAULT_GROUP_COUNT)
    parser.add_argument("--output")


def add_bracket_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--file", required=True, help="Seeded team file (JSON)")
    parser.add_argument("--output")


PARSER_BUILDERS = {
    "simulate": (add_simulate_arguments, run_simulate_command),
    "groups": (add_groups_arguments, run_groups_command),
    "bracket": (add_bracket_arguments, run_bracket_command),
}


def create_command_parser(command: str) -> argparse.ArgumentParser:
    """Create parser for one subcommand (used by interactive mode)."""
    add_arguments, _ = PARSER_BUILDERS[command]
    parser = argparse.ArgumentParser(
        prog=command, description=COMMANDS[command]["description"]
    )
    add_arguments(parser)
    return parser


def create_main_parser() -> argparse.ArgumentParser:
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="kendo-taikai",
        description="Team kendo tournament engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  kendo-taikai

  # Simulate a tournament
  kendo-taikai simulate --teams 9 --dojos 3 --seed 42

  # Seed groups from a team file
  kendo-taikai groups --file teams.json --groups 4

  # Build a bracket from seeded teams
  kendo-taikai bracket --file qualified.json
        """,
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    for command, (add_arguments, func) in PARSER_BUILDERS.items():
        sub_parser = subparsers.add_parser(
            command, help=COMMANDS[command]["description"]
        )
        add_arguments(sub_parser)
        sub_parser.set_defaults(func=func)

    return parser


# ========== Modes ==========


def run_interactive_mode():
    """Run in interactive mode with autocomplete."""
    print_banner()

    style = Style.from_dict(
        {
            "prompt": "#00aa00 bold",
        }
    )
    session = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=style,
    )

    while True:
        try:
            user_input = session.prompt("kendo-taikai> ").strip()

            if not user_input:
                continue

            if user_input in ["exit", "quit", "q", "/exit"]:
                print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
                break

            if user_input in ["/help", "help", "?", "/list"]:
                print_commands_list()
                continue

            if user_input.startswith("/help ") or user_input.startswith("help "):
                print_command_help(user_input.split()[1].lstrip("/"))
                continue

            parts = user_input.split()
            command = parts[0].lstrip("/")

            if command not in PARSER_BUILDERS:
                print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
                print(f"Type {Colors.BOLD}/help{Colors.ENDC} to see available commands")
                continue

            try:
                args = create_command_parser(command).parse_args(parts[1:])
                PARSER_BUILDERS[command][1](args)
            except SystemExit:
                # argparse calls sys.exit on error, catch it
                continue
            except (KendoTaikaiException, OSError) as e:
                print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
                logger.exception("Command execution failed")

        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
        except EOFError:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            break
    return 0


def run_standard_mode(argv=None):
    """Run in standard CLI mode (non-interactive)."""
    parser = create_main_parser()
    args = parser.parse_args(argv)

    if args.interactive:
        return run_interactive_mode()

    if hasattr(args, "func"):
        return args.func(args)
    parser.print_help()
    return 0


def main() -> int:
    """Main entry point for the kendo-taikai CLI."""
    # If no arguments, start interactive mode
    if len(sys.argv) == 1:
        return run_interactive_mode()
    return run_standard_mode()


if __name__ == "__main__":
    sys.exit(main())
