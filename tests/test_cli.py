import json
import re
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from exertrack import cli
from exertrack.exercise import Exercise, Mode

COMP_SUCCESS = "fn main() {\n}\n"
COMP_FAILURE = "fn main() {\n    let\n}\n"
TEST_SUCCESS = (
    "#[test]\nfn passing() {\n"
    '    println!("THIS TEST TOO SHALL PASS");\n'
    "    assert!(true);\n}\n"
)
TEST_FAILURE = "#[test]\nfn passing() {\n    asset!(true);\n}\n"
TEST_NOT_PASSED = "#[test]\nfn not_passing() {\n    assert!(false);\n}\n"
FINISHED = "// fake_exercise\n\nfn main() {\n\n}\n"
PENDING = "// fake_exercise\n\n// I AM NOT DONE\n\nfn main() {\n\n}\n"
PENDING_TEST = "// I AM NOT DONE\n\n#[test]\nfn it_works() {}\n"


class FakeToolchain:
    """Stands in for rustc and the binaries it produces."""

    def __init__(self):
        self.compiled = {}

    def __call__(self, args, **kwargs):
        args = [str(a) for a in args]
        if args[0] == "rustc":
            if "--version" in args:
                return subprocess.CompletedProcess(args, 0, b"rustc 1.70.0\n", b"")
            source = next(a for a in args if a.endswith(".rs"))
            text = Path(source).read_text()
            if "asset!" in text or re.search(r"^\s*let\s*$", text, re.MULTILINE):
                return subprocess.CompletedProcess(args, 1, b"", b"error: syntax\n")
            self.compiled[args[args.index("-o") + 1]] = text
            return subprocess.CompletedProcess(args, 0, b"", b"")
        if args[0] in self.compiled:
            text = self.compiled[args[0]]
            printed = "\n".join(re.findall(r'println!\("([^"]*)"\)', text))
            code = 101 if "assert!(false)" in text else 0
            return subprocess.CompletedProcess(args, code, printed.encode(), b"")
        raise FileNotFoundError(args[0])


def write_fixture(root, entries):
    blocks = []
    for name, filename, mode, hint, source in entries:
        path = root / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
        blocks.append(
            "[[exercises]]\n"
            f'name = "{name}"\n'
            f'path = "{filename}"\n'
            f'mode = "{mode}"\n'
            f'hint = "{hint}"\n'
        )
    (root / "info.toml").write_text("\n".join(blocks))


@pytest.fixture
def fake_toolchain(monkeypatch):
    fake = FakeToolchain()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def success_dir(tmp_path, monkeypatch, fake_toolchain):
    write_fixture(
        tmp_path,
        [
            ("compSuccess", "compSuccess.rs", "compile", "", COMP_SUCCESS),
            ("testSuccess", "testSuccess.rs", "test", "", TEST_SUCCESS),
        ],
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def failure_dir(tmp_path, monkeypatch, fake_toolchain):
    write_fixture(
        tmp_path,
        [
            ("compFailure", "compFailure.rs", "compile", "", COMP_FAILURE),
            ("testFailure", "testFailure.rs", "test", "Hello!", TEST_FAILURE),
            ("testNotPassed", "testNotPassed.rs", "test", "", TEST_NOT_PASSED),
        ],
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def state_dir(tmp_path, monkeypatch, fake_toolchain):
    write_fixture(
        tmp_path,
        [
            ("pending_exercise", "pending_exercise.rs", "compile", "", PENDING),
            ("finished_exercise", "finished_exercise.rs", "compile", "", FINISHED),
            ("pending_test_exercise", "pending_test_exercise.rs", "test", "", PENDING_TEST),
        ],
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_runs_without_arguments(success_dir, capsys):
    assert cli.main([]) == 0
    assert "Thanks for installing exertrack!" in capsys.readouterr().out


def test_fails_when_in_wrong_dir(tmp_path, monkeypatch, fake_toolchain, capsys):
    monkeypatch.chdir(tmp_path)
    assert cli.main([]) == 1
    assert "must be run from the exercises directory" in capsys.readouterr().out


def test_fails_without_rustc(success_dir, monkeypatch, capsys):
    def missing(args, **kwargs):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(subprocess, "run", missing)
    assert cli.main(["list"]) == 1
    assert "We cannot find `rustc`." in capsys.readouterr().out


def test_version(capsys):
    assert cli.main(["--version"]) == 0
    assert capsys.readouterr().out == f"v{cli.VERSION}\n"


def test_verify_all_success(success_dir):
    assert cli.main(["verify"]) == 0


def test_verify_fails_if_some_fails(failure_dir):
    assert cli.main(["verify"]) == 1


def test_run_single_compile_success(success_dir):
    assert cli.main(["run", "compSuccess"]) == 0


def test_run_single_compile_failure(failure_dir):
    assert cli.main(["run", "compFailure"]) == 1


def test_run_single_test_success(success_dir):
    assert cli.main(["run", "testSuccess"]) == 0


def test_run_single_test_failure(failure_dir):
    assert cli.main(["run", "testFailure"]) == 1


def test_run_single_test_not_passed(failure_dir, capsys):
    assert cli.main(["run", "testNotPassed.rs"]) == 1
    assert "No exercise found for 'testNotPassed.rs'!" in capsys.readouterr().out


def test_run_single_test_no_filename(success_dir, capsys):
    assert cli.main(["run"]) == 1
    assert "positional arguments not provided" in capsys.readouterr().err


def test_run_single_test_no_exercise(failure_dir):
    assert cli.main(["run", "compNoExercise.rs"]) == 1


def test_reset_single_exercise(success_dir):
    with mock.patch("subprocess.Popen") as popen:
        assert cli.main(["reset", "compSuccess"]) == 0
    popen.assert_called_once_with(["git", "stash", "--", "compSuccess.rs"])


def test_reset_no_exercise(success_dir, capsys):
    assert cli.main(["reset"]) == 1
    assert "positional arguments not provided" in capsys.readouterr().err


def test_get_hint_for_single_test(failure_dir, capsys):
    assert cli.main(["hint", "testFailure"]) == 0
    assert capsys.readouterr().out == "Hello!\n"


def test_run_compile_exercise_does_not_prompt(state_dir, capsys):
    assert cli.main(["run", "pending_exercise"]) == 0
    assert "I AM NOT DONE" not in capsys.readouterr().out


def test_run_test_exercise_does_not_prompt(state_dir, capsys):
    assert cli.main(["run", "pending_test_exercise"]) == 0
    assert "I AM NOT DONE" not in capsys.readouterr().out


def test_run_single_test_success_with_output(success_dir, capsys):
    assert cli.main(["--nocapture", "run", "testSuccess"]) == 0
    assert "THIS TEST TOO SHALL PASS" in capsys.readouterr().out


def test_run_single_test_success_without_output(success_dir, capsys):
    assert cli.main(["run", "testSuccess"]) == 0
    assert "THIS TEST TOO SHALL PASS" not in capsys.readouterr().out


def test_list_no_pending(success_dir, capsys):
    assert cli.main(["list"]) == 0
    assert "Pending" not in capsys.readouterr().out


def test_list_both_done_and_pending(state_dir, capsys):
    assert cli.main(["list"]) == 0
    out = capsys.readouterr().out
    assert "Done" in out
    assert "Pending" in out


def test_list_without_pending(state_dir, capsys):
    assert cli.main(["list", "--solved"]) == 0
    assert "Pending" not in capsys.readouterr().out


def test_list_without_done(state_dir, capsys):
    assert cli.main(["list", "--unsolved"]) == 0
    assert "Done" not in capsys.readouterr().out


def test_list_exercises_paths_and_count(state_dir, capsys):
    exercises = [
        Exercise("pending_exercise", Path("pending_exercise.rs"), Mode.COMPILE),
        Exercise("finished_exercise", Path("finished_exercise.rs"), Mode.COMPILE),
    ]
    done = cli.list_exercises(exercises, paths=True)
    out = capsys.readouterr().out
    assert done == 1
    assert out == (
        "pending_exercise.rs\nfinished_exercise.rs\n"
        "Progress: You completed 1 / 2 exercises (50.0 %).\n"
    )


def test_list_exercises_filter(state_dir, capsys):
    exercises = [
        Exercise("pending_exercise", Path("pending_exercise.rs"), Mode.COMPILE),
        Exercise("finished_exercise", Path("finished_exercise.rs"), Mode.COMPILE),
    ]
    cli.list_exercises(exercises, names=True, filter="FINISHED, nothing")
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "finished_exercise"
    assert len(lines) == 2


def test_find_exercise_next_returns_first_pending(state_dir):
    exercises = [
        Exercise("finished_exercise", Path("finished_exercise.rs"), Mode.COMPILE),
        Exercise("pending_exercise", Path("pending_exercise.rs"), Mode.COMPILE),
    ]
    assert cli.find_exercise("next", exercises).name == "pending_exercise"


def test_find_exercise_next_when_all_done(state_dir):
    exercises = [Exercise("finished_exercise", Path("finished_exercise.rs"), Mode.COMPILE)]
    with pytest.raises(LookupError, match="no more exercises"):
        cli.find_exercise("next", exercises)


def test_find_exercise_unknown_name():
    with pytest.raises(LookupError, match="No exercise found for 'missing'!"):
        cli.find_exercise("missing", [])


def test_build_parser_list_options():
    args = cli.build_parser().parse_args(["list", "-f", "intro", "-u"])
    assert (args.command, args.filter, args.unsolved, args.solved) == (
        "list",
        "intro",
        True,
        False,
    )


def test_rustc_exists_with_fake(fake_toolchain):
    assert cli.rustc_exists() is True


def test_watch_without_exercises_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        cli.watch([], False, False)


def test_watch_finishes_when_everything_passes(tmp_path, monkeypatch, fake_toolchain):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "exercises").mkdir()
    (tmp_path / "exercises" / "done.rs").write_text(COMP_SUCCESS)
    exercises = [Exercise("done", Path("exercises/done.rs"), Mode.COMPILE)]
    assert cli.watch(exercises, False, False) is cli.WatchStatus.FINISHED


def test_lsp_writes_project(tmp_path, monkeypatch, fake_toolchain, capsys):
    write_fixture(tmp_path, [("a", "exercises/a.rs", "compile", "", COMP_SUCCESS)])
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RUST_SRC_PATH", "/opt/rust/library")
    assert cli.main(["lsp"]) == 0
    project = json.loads((tmp_path / "rust-project.json").read_text())
    assert project["sysroot_src"] == "/opt/rust/library"
    assert [c["root_module"] for c in project["crates"]] == ["exercises/a.rs"]
    assert "Successfully generated rust-project.json" in capsys.readouterr().out


def test_cicvverify_writes_report(success_dir):
    (success_dir / ".github" / "result").mkdir(parents=True)
    assert cli.main(["--nocapture", "cicvverify"]) == 0
    report = json.loads((success_dir / ".github/result/check_result.json").read_text())
    assert report["statistics"]["total_exercations"] == 2
    assert report["statistics"]["total_succeeds"] == 2
    assert report["statistics"]["total_failures"] == 0
    assert sorted(e["name"] for e in report["exercises"]) == ["compSuccess", "testSuccess"]