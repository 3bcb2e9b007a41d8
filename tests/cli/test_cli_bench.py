# tests/cli/test_cli_bench.py
import re
from pathlib import Path
from typer.testing import CliRunner
from forkwalk.cli.app import app

runner = CliRunner()

SUMMARY = re.compile(
    r"^Hashing: (true|false), parallelism: (\d{2,}), files: (\d+), elapsed: \d+ ms$"
)


def make_tree(root: Path) -> None:
    (root / "nested").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / "a.txt").write_text("hello world\n")
    (root / "nested" / "b.txt").write_text("something else\n")
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")


def test_missing_path_prints_usage_and_succeeds():
    r = runner.invoke(app, ["bench"])
    assert r.exit_code == 0, r.output
    assert "Choose a directory where to go" in r.output


def test_bench_sweeps_both_modes(tmp_path: Path):
    root = tmp_path / "data"
    make_tree(root)

    r = runner.invoke(app, ["bench", str(root), "-p", "1", "-p", "2"])
    assert r.exit_code == 0, r.output

    lines = r.output.splitlines()
    assert lines[0] == f"Walking on {root.resolve()}"
    matches = [SUMMARY.match(line) for line in lines[1:]]
    assert all(matches), r.output
    assert [(m.group(1), m.group(2), m.group(3)) for m in matches] == [
        ("false", "01", "2"),
        ("false", "02", "2"),
        ("true", "01", "2"),
        ("true", "02", "2"),
    ]


def test_print_hex_from_environment(tmp_path: Path):
    root = tmp_path / "data"
    make_tree(root)

    r = runner.invoke(
        app, ["bench", str(root), "-p", "1"], env={"FORKWALK_PRINT_HEX": "true"}
    )
    assert r.exit_code == 0, r.output
    # md5("hello world\n")
    assert f"6f5902ac237024bdd0c176cb93063dc4 {root.resolve() / 'a.txt'}" in r.output


def test_print_dir_flag(tmp_path: Path):
    root = tmp_path / "data"
    make_tree(root)

    r = runner.invoke(app, ["bench", str(root), "-p", "1", "--print-dir"])
    assert r.exit_code == 0, r.output
    assert str(root.resolve() / "nested") in r.output.splitlines()


def test_custom_exclude_replaces_defaults(tmp_path: Path):
    root = tmp_path / "data"
    make_tree(root)

    r = runner.invoke(app, ["bench", str(root), "-p", "1", "--exclude", "nested"])
    assert r.exit_code == 0, r.output
    assert "files: 2," in r.output  # a.txt + .git/HEAD


def test_bad_parallelism_fails_cleanly(tmp_path: Path):
    r = runner.invoke(app, ["bench", str(tmp_path), "-p", "0"])
    assert r.exit_code != 0
    assert "Parallelism must be at least 1" in r.output


def test_bad_threshold_fails_cleanly(tmp_path: Path):
    r = runner.invoke(app, ["bench", str(tmp_path), "--small-file-threshold", "0"])
    assert r.exit_code != 0
    assert "small_file_threshold" in r.output


def test_nonexistent_path_rejected(tmp_path: Path):
    r = runner.invoke(app, ["bench", str(tmp_path / "missing")])
    assert r.exit_code != 0
