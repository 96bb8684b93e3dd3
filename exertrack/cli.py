"""Command-line interface: listing, running, verifying and watching exercises."""

from __future__ import annotations

import argparse
import itertools
import os
import queue
import subprocess
import sys
import threading
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from exertrack.checklist import cicv_verify
from exertrack.exercise import Exercise, load_exercises
from exertrack.project import RustAnalyzerProject
from exertrack.run import reset, run
from exertrack.verify import VerificationError, verify

VERSION = "5.5.1"
INFO_FILE = "info.toml"
_WATCH_ROOT = "./exercises"
_POLL_SECONDS = 1.0
_DEBOUNCE_SECONDS = 0.2

WELCOME = """       welcome to...
                 _                  _
   _____  _____ _ __| |_ _ __ __ _  ___| | __
  / _ \\ \\/ / _ \\ '__| __| '__/ _` |/ __| |/ /
 |  __/>  <  __/ |  | |_| | | (_| | (__|   <
  \\___/_/\\_\\___|_|   \\__|_|  \\__,_|\\___|_|\\_\\"""

DEFAULT_OUT = """Thanks for installing exertrack!

Is this your first time? Don't worry, these exercises were made for beginners!
We are going to teach you a lot of things about Rust, but before we can get
started, here's a couple of notes about how this tool operates:

1. The central concept is that you solve exercises. These exercises usually
   have some sort of syntax error in them, which will cause them to fail
   compilation or testing. Sometimes there's a logic error instead of a syntax
   error. No matter what error, it's your job to find it and fix it!
   You'll know when you fixed it because then, the exercise will compile and
   the tool will be able to move on to the next exercise.
2. If you run in watch mode (which we recommend), it'll automatically start
   with the first exercise. Don't get confused by an error message popping up
   as soon as you start! This is part of the exercise that you're supposed to
   solve, so open the exercise file in an editor and start your detective work!
3. If you're stuck on an exercise, there is a helpful hint you can view by
   typing 'hint' (in watch mode), or running `exertrack hint exercise_name`.
4. If an exercise doesn't make sense to you, feel free to open an issue!
   We look at every issue, and sometimes, other learners do too so you can
   help each other out!
5. If you want to use `rust-analyzer` with exercises, which provides features
   like autocompletion, run the command `exertrack lsp`.

Got all that? Great! To get started, run `exertrack watch` in order to get the
first exercise. Make sure to have your editor open!"""

FINISH_LINE = """+----------------------------------------------------+
|          You made it to the Fe-nish line!          |
+--------------------------  ------------------------+
                          \\\\/
     ▒▒          ▒▒▒▒▒▒▒▒      ▒▒▒▒▒▒▒▒          ▒▒
   ▒▒▒▒  ▒▒    ▒▒        ▒▒  ▒▒        ▒▒    ▒▒  ▒▒▒▒
   ▒▒▒▒  ▒▒  ▒▒            ▒▒            ▒▒  ▒▒  ▒▒▒▒
 ░░▒▒▒▒░░▒▒  ▒▒            ▒▒            ▒▒  ▒▒░░▒▒▒▒
   ▓▓▓▓▓▓▓▓  ▓▓      ▓▓██  ▓▓  ▓▓██      ▓▓  ▓▓▓▓▓▓▓▓
     ▒▒▒▒    ▒▒      ████  ▒▒  ████      ▒▒░░  ▒▒▒▒
       ▒▒  ▒▒▒▒▒▒        ▒▒▒▒▒▒        ▒▒▒▒▒▒  ▒▒
         ▒▒▒▒▒▒▒▒▒▒▓▓▓▓▓▓▒▒▒▒▒▒▒▒▓▓▒▒▓▓▒▒▒▒▒▒▒▒
           ▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒
             ▒▒▒▒▒▒▒▒▒▒██▒▒▒▒▒▒██▒▒▒▒▒▒▒▒▒▒
           ▒▒  ▒▒▒▒▒▒▒▒▒▒██████▒▒▒▒▒▒▒▒▒▒  ▒▒
         ▒▒    ▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒    ▒▒
       ▒▒    ▒▒    ▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒▒    ▒▒    ▒▒
       ▒▒  ▒▒    ▒▒                  ▒▒    ▒▒  ▒▒
           ▒▒  ▒▒                      ▒▒  ▒▒

We hope you enjoyed learning about the various aspects of Rust!
If you noticed any issues, please don't hesitate to report them.
You can also contribute your own exercises to help the greater community!"""

_WATCH_HELP = """Commands available to you in watch mode:
  hint   - prints the current exercise's hint
  clear  - clears the screen
  quit   - quits watch mode
  !<cmd> - executes a command, like `!rustc --explain E0381`
  help   - displays this help message

Watch mode automatically re-evaluates the current exercise
when you edit a file's contents."""


class WatchStatus(Enum):
    """How watch mode ended."""

    FINISHED = "finished"
    UNFINISHED = "unfinished"


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        if message.startswith("the following arguments are required"):
            missing = message.partition(":")[2].strip()
            message = f"Required positional arguments not provided:\n    {missing}"
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser with all subcommands."""
    parser = _ArgumentParser(
        prog="exertrack",
        description=(
            "A collection of small exercises to get you used to writing "
            "and reading Rust code"
        ),
    )
    parser.add_argument(
        "--nocapture", action="store_true", help="show outputs from the test exercises"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="show the executable version"
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>")

    commands.add_parser(
        "verify", help="Verifies all exercises according to the recommended order"
    )
    watch_parser = commands.add_parser(
        "watch", help="Reruns `verify` when files were edited"
    )
    watch_parser.add_argument(
        "--success-hints", action="store_true", help="show hints on success"
    )
    for name, description in (
        ("run", "Runs/Tests a single exercise"),
        ("reset", 'Resets a single exercise using "git stash -- <filename>"'),
        ("hint", "Returns a hint for the given exercise"),
    ):
        sub = commands.add_parser(name, help=description)
        sub.add_argument("name", help="the name of the exercise")

    list_parser = commands.add_parser("list", help="Lists the available exercises")
    list_parser.add_argument(
        "-p", "--paths", action="store_true", help="show only the paths of the exercises"
    )
    list_parser.add_argument(
        "-n", "--names", action="store_true", help="show only the names of the exercises"
    )
    list_parser.add_argument(
        "-f",
        "--filter",
        default=None,
        help="provide a string to match exercise names; comma separated patterns are acceptable",
    )
    list_parser.add_argument(
        "-u", "--unsolved", action="store_true", help="display only exercises not yet solved"
    )
    list_parser.add_argument(
        "-s", "--solved", action="store_true", help="display only exercises that have been solved"
    )

    commands.add_parser("lsp", help="Enable rust-analyzer for exercises")
    commands.add_parser(
        "cicvverify", help="Verify every exercise and write a JSON report"
    )
    return parser


def find_exercise(name: str, exercises: Sequence[Exercise]) -> Exercise:
    """Return the exercise called ``name``, or the first pending one for "next"."""
    if name == "next":
        found = next((e for e in exercises if not e.looks_done()), None)
        if found is None:
            raise LookupError(
                "🎉 Congratulations! You have done all the exercises!\n"
                "🔚 There are no more exercises to do next!"
            )
        return found
    found = next((e for e in exercises if e.name == name), None)
    if found is None:
        raise LookupError(f"No exercise found for '{name}'!")
    return found


def list_exercises(
    exercises: Iterable[Exercise],
    paths: bool = False,
    names: bool = False,
    filter: str | None = None,
    unsolved: bool = False,
    solved: bool = False,
) -> int:
    """Print the exercises that match; return how many are done."""
    exercises = list(exercises)
    if not paths and not names:
        print(f"{'Name':<17}\t{'Path':<46}\t{'Status':<7}")
    patterns = [p for p in (filter or "").lower().split(",") if p.strip()]
    done = 0
    for exercise in exercises:
        fname = str(exercise.path)
        is_done = exercise.looks_done()
        if is_done:
            done += 1
        status = "Done" if is_done else "Pending"
        solve_cond = (
            (is_done and solved)
            or (not is_done and unsolved)
            or (not solved and not unsolved)
        )
        filter_cond = any(p in exercise.name or p in fname for p in patterns)
        if solve_cond and (filter is None or filter_cond):
            if paths:
                line = fname
            elif names:
                line = exercise.name
            else:
                line = f"{exercise.name:<17}\t{fname:<46}\t{status:<7}"
            sys.stdout.write(f"{line}\n")
    if exercises:
        percentage = f"{done / len(exercises) * 100.0:.1f}"
    else:
        percentage = "NaN"
    print(f"Progress: You completed {done} / {len(exercises)} exercises ({percentage} %).")
    return done


def rustc_exists() -> bool:
    """Whether ``rustc --version`` runs successfully."""
    try:
        result = subprocess.run(
            ["rustc", "--version"], stdout=subprocess.DEVNULL, check=False
        )
    except OSError:
        return False
    return result.returncode == 0


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, changes: queue.Queue[Path]) -> None:
        super().__init__()
        self._changes = changes

    def on_created(self, event: FileSystemEvent) -> None:
        self._push(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._push(event)

    def _push(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        source = event.src_path
        if isinstance(source, bytes):
            source = os.fsdecode(source)
        self._changes.put(Path(source))


class _WatchShell:
    """Reads commands from standard input while watch mode runs."""

    def __init__(self, hint: str | None) -> None:
        self.hint = hint
        self.should_quit = threading.Event()

    def handle(self, line: str) -> None:
        command = line.strip()
        if command == "hint":
            if self.hint is not None:
                print(self.hint)
        elif command == "clear":
            print("\x1b[2J\x1b[1;1H")
        elif command == "quit":
            self.should_quit.set()
            print("Bye!")
        elif command == "help":
            print(_WATCH_HELP)
        elif command.startswith("!"):
            cmd = command[1:]
            parts = cmd.split()
            if not parts:
                print("no command provided")
            else:
                try:
                    subprocess.run(parts, check=False)
                except OSError as exc:
                    print(f"failed to execute command `{cmd}`: {exc}")
        else:
            print(f"unknown command: {command}")

    def serve(self) -> None:
        while True:
            try:
                line = sys.stdin.readline()
            except (OSError, ValueError) as exc:
                print(f"error reading command: {exc}")
                return
            if not line:
                return
            self.handle(line)


def _clear_screen() -> None:
    print("\x1bc")


def _is_source(path: Path) -> bool:
    return path.suffix == ".rs" and path.exists()


def _ends_with(path: Path, suffix: Path) -> bool:
    parts = suffix.parts
    return 0 < len(parts) <= len(path.parts) and path.parts[-len(parts):] == parts


def _next_change(changes: queue.Queue[Path]) -> Path | None:
    try:
        path = changes.get(timeout=_POLL_SECONDS)
    except queue.Empty:
        return None
    latest = path if _is_source(path) else None
    while True:
        try:
            path = changes.get(timeout=_DEBOUNCE_SECONDS)
        except queue.Empty:
            return latest
        if _is_source(path):
            latest = path


def watch(
    exercises: Iterable[Exercise], verbose: bool = False, success_hints: bool = False
) -> WatchStatus:
    """Verify the exercises, then re-verify whenever an exercise file changes."""
    exercises = list(exercises)
    root = Path(_WATCH_ROOT)
    if not root.is_dir():
        raise FileNotFoundError(f"cannot watch {root}: no such directory")

    changes: queue.Queue[Path] = queue.Queue()
    observer = Observer()
    observer.schedule(_ChangeHandler(changes), str(root), recursive=True)
    observer.start()
    try:
        _clear_screen()
        try:
            verify(exercises, (0, len(exercises)), verbose, success_hints)
        except VerificationError as exc:
            shell = _WatchShell(exc.exercise.hint)
        else:
            return WatchStatus.FINISHED

        print(
            "Welcome to watch mode! You can type 'help' to get an overview "
            "of the commands you can use here."
        )
        threading.Thread(target=shell.serve, daemon=True).start()

        while not shell.should_quit.is_set():
            changed = _next_change(changes)
            if changed is None:
                continue
            filepath = changed.resolve()
            current = next((e for e in exercises if _ends_with(filepath, e.path)), None)
            pending = itertools.chain(
                [current] if current is not None else [],
                (
                    e
                    for e in exercises
                    if not e.looks_done() and not _ends_with(filepath, e.path)
                ),
            )
            num_done = sum(1 for e in exercises if e.looks_done())
            _clear_screen()
            try:
                verify(pending, (num_done, len(exercises)), verbose, success_hints)
            except VerificationError as exc:
                shell.hint = exc.exercise.hint
            else:
                return WatchStatus.FINISHED
        return WatchStatus.UNFINISHED
    finally:
        observer.stop()
        observer.join()


def _lsp() -> int:
    project = RustAnalyzerProject()
    try:
        project.get_sysroot_src()
    except OSError:
        print("Couldn't find toolchain path, do you have `rustc` installed?")
        return 1
    try:
        project.exercises_to_json()
    except OSError:
        print("Couldn't parse exercise files")
        return 1

    if not project.crates:
        print("Failed find any exercises, make sure you're in the exercises folder")
        return 0
    try:
        project.write_to_disk()
    except OSError:
        print("Failed to write rust-project.json to disk for rust-analyzer")
        return 0
    print("Successfully generated rust-project.json")
    print("rust-analyzer will now parse exercises, restart your language server or editor")
    return 0


def _watch(exercises: list[Exercise], verbose: bool, success_hints: bool) -> int:
    try:
        status = watch(exercises, verbose, success_hints)
    except OSError as exc:
        print(f"Error: Could not watch your progress. Error message was {exc!r}.")
        print(
            "Most likely you've run out of disk space or your 'inotify limit' "
            "has been reached."
        )
        return 1
    if status is WatchStatus.FINISHED:
        emoji = "★" if "NO_EMOJI" in os.environ else "🎉"
        print(f"{emoji} All exercises completed! {emoji}")
        print(f"\n{FINISH_LINE}\n")
    else:
        print("We hope you're enjoying learning about Rust!")
        print(
            "If you want to continue working on the exercises at a later point, "
            "you can simply run `exertrack watch` again"
        )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else (0 if exc.code is None else 1)

    if args.version:
        print(f"v{VERSION}")
        return 0

    if args.command is None:
        print(f"\n{WELCOME}\n")

    if not Path(INFO_FILE).exists():
        print(f"{parser.prog} must be run from the exercises directory")
        print("Try `cd` into the directory that holds info.toml!")
        return 1

    if not rustc_exists():
        print("We cannot find `rustc`.")
        print("Try running `rustc --version` to diagnose your problem.")
        print("For instructions on how to install Rust, check the README.")
        return 1

    exercises = load_exercises(INFO_FILE)
    verbose = args.nocapture

    try:
        match args.command:
            case None:
                print(f"{DEFAULT_OUT}\n")
                return 0
            case "list":
                try:
                    list_exercises(
                        exercises,
                        paths=args.paths,
                        names=args.names,
                        filter=args.filter,
                        unsolved=args.unsolved,
                        solved=args.solved,
                    )
                except BrokenPipeError:
                    return 0
                return 0
            case "run":
                try:
                    run(find_exercise(args.name, exercises), verbose)
                except VerificationError:
                    return 1
                return 0
            case "reset":
                try:
                    reset(find_exercise(args.name, exercises))
                except OSError:
                    return 1
                return 0
            case "hint":
                print(find_exercise(args.name, exercises).hint)
                return 0
            case "verify":
                try:
                    verify(exercises, (0, len(exercises)), verbose, False)
                except VerificationError:
                    return 1
                return 0
            case "cicvverify":
                cicv_verify(exercises)
                return 0
            case "lsp":
                return _lsp()
            case "watch":
                return _watch(exercises, verbose, args.success_hints)
    except LookupError as exc:
        print(exc)
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())