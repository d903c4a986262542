import json

from kendotaikai.console.__main__ import (
    COMMANDS,
    create_completer,
    create_main_parser,
    print_command_help,
    run_standard_mode,
)
from kendotaikai.models.team import Team


def _write_teams(path, seeded=False):
    teams = [
        Team(
            name=f"Team {i}",
            dojo_id=f"dojo{i % 2}",
            id=f"t{i}",
            seed_ranking=i if seeded else None,
        )
        for i in range(1, 6)
    ]
    path.write_text(json.dumps([t.to_dict() for t in teams]), encoding="utf-8")
    return path


def test_completer_supports_both_command_styles():
    options = create_completer().options
    for command in COMMANDS:
        assert command in options
        assert f"/{command}" in options


def test_main_parser_subcommands():
    args = create_main_parser().parse_args(["simulate", "--teams", "6", "--seed", "1"])
    assert args.teams == 6
    assert args.seed == 1
    assert args.pattern == "realistic"
    assert callable(args.func)


def test_simulate_command(tmp_path, capsys):
    output = tmp_path / "run.json"
    code = run_standard_mode(
        ["simulate", "--teams", "6", "--dojos", "2", "--seed", "4"]
        + ["--output", str(output)]
    )
    assert code == 0
    assert "Final standings" in capsys.readouterr().out
    exported = json.loads(output.read_text(encoding="utf-8"))
    assert exported["tournament"]["status"] == "completed"


def test_groups_command(tmp_path, capsys):
    teams_file = _write_teams(tmp_path / "teams.json")
    output = tmp_path / "groups.json"
    code = run_standard_mode(
        ["groups", "--file", str(teams_file), "--groups", "2"]
        + ["--output", str(output)]
    )
    assert code == 0
    assert "Group A" in capsys.readouterr().out
    groups = json.loads(output.read_text(encoding="utf-8"))
    assert sum(len(g["teams"]) for g in groups) == 5


def test_bracket_command(tmp_path, capsys):
    teams_file = _write_teams(tmp_path / "teams.json", seeded=True)
    code = run_standard_mode(["bracket", "--file", str(teams_file)])
    assert code == 0
    out = capsys.readouterr().out
    assert "Winners round 1" in out
    assert "Grand final" in out


def test_missing_team_file_fails(tmp_path, capsys):
    code = run_standard_mode(["groups", "--file", str(tmp_path / "none.json")])
    assert code == 1
    assert "Error" in capsys.readouterr().out


def test_help_for_unknown_command(capsys):
    print_command_help("nope")
    assert "Unknown command: nope" in capsys.readouterr().out
