"""Exercise descriptions, their compilation and their completion state."""

from __future__ import annotations

import contextlib
import os
import re
import subprocess
import threading
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

RUSTC_COLOR_ARGS = ("--color", "always")
RUSTC_EDITION_ARGS = ("--edition", "2021")
I_AM_DONE_REGEX = re.compile(r"^\s*///?\s*I\s+AM\s+NOT\s+DONE", re.MULTILINE)
CONTEXT = 2
CLIPPY_CARGO_TOML_PATH = "./exercises/clippy/Cargo.toml"
BUILD_SCRIPT_CARGO_TOML_PATH = "./exercises/tests/Cargo.toml"


def temp_file() -> str:
    """Return a temporary file name unique to this process and thread."""
    return f"./temp_{os.getpid()}_ThreadId{threading.get_ident()}"


def clean() -> None:
    """Remove the temporary binary, ignoring a missing file."""
    with contextlib.suppress(OSError):
        os.remove(temp_file())


class Mode(Enum):
    """How an exercise is checked."""

    COMPILE = "compile"
    TEST = "test"
    CLIPPY = "clippy"
    BUILD_SCRIPT = "buildscript"


@dataclass
class ContextLine:
    """A source line shown around the pending marker."""

    line: str
    number: int
    important: bool


@dataclass
class ExerciseOutput:
    """Captured output of a finished command."""

    stdout: str
    stderr: str


class CompilationError(Exception):
    """Raised when an exercise fails to compile."""

    def __init__(self, output: ExerciseOutput) -> None:
        super().__init__("compilation failed")
        self.output = output


class ExerciseRunError(Exception):
    """Raised when a compiled exercise exits unsuccessfully."""

    def __init__(self, output: ExerciseOutput) -> None:
        super().__init__("exercise run failed")
        self.output = output


def _capture(args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(args, capture_output=True, check=False)


def _output(result: subprocess.CompletedProcess) -> ExerciseOutput:
    return ExerciseOutput(
        stdout=(result.stdout or b"").decode("utf-8", errors="replace"),
        stderr=(result.stderr or b"").decode("utf-8", errors="replace"),
    )


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


@dataclass
class Exercise:
    """An exercise as listed in info.toml."""

    name: str
    path: Path
    mode: Mode
    hint: str = ""

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    @classmethod
    def from_dict(cls, data: dict) -> Exercise:
        return cls(
            name=data["name"],
            path=Path(data["path"]),
            mode=Mode(data["mode"]),
            hint=data["hint"],
        )

    def __str__(self) -> str:
        return str(self.path)

    def _cargo_toml(self) -> str:
        return (
            "[package]\n"
            f'name = "{self.name}"\n'
            'version = "0.0.1"\n'
            'edition = "2021"\n'
            "[[bin]]\n"
            f'name = "{self.name}"\n'
            f'path = "{self.name}.rs"'
        )

    def _write_manifest(self, manifest: str) -> None:
        try:
            Path(manifest).write_text(self._cargo_toml(), encoding="utf-8")
        except OSError as exc:
            if "NO_EMOJI" in os.environ:
                message = "Failed to write Clippy Cargo.toml file."
            else:
                message = "Failed to write 📎 Clippy 📎 Cargo.toml file."
            raise RuntimeError(message) from exc

    def _rustc_args(self, *extra: str) -> list[str]:
        return [
            "rustc",
            *extra,
            str(self.path),
            "-o",
            temp_file(),
            *RUSTC_COLOR_ARGS,
            *RUSTC_EDITION_ARGS,
        ]

    def compile(self) -> CompiledExercise:
        """Build the exercise; raise CompilationError on failure."""
        if self.mode is Mode.COMPILE:
            result = _capture(self._rustc_args())
        elif self.mode is Mode.TEST:
            result = _capture(self._rustc_args("--test"))
        elif self.mode is Mode.CLIPPY:
            self._write_manifest(CLIPPY_CARGO_TOML_PATH)
            # Build a binary too so the exercise can be run afterwards.
            _capture(self._rustc_args())
            _capture(
                ["cargo", "clean", "--manifest-path", CLIPPY_CARGO_TOML_PATH, *RUSTC_COLOR_ARGS]
            )
            result = _capture(
                [
                    "cargo",
                    "clippy",
                    "--manifest-path",
                    CLIPPY_CARGO_TOML_PATH,
                    *RUSTC_COLOR_ARGS,
                    "--",
                    "-D",
                    "warnings",
                    "-D",
                    "clippy::float_cmp",
                ]
            )
        else:
            self._write_manifest(BUILD_SCRIPT_CARGO_TOML_PATH)
            result = _capture(
                ["cargo", "test", "--manifest-path", BUILD_SCRIPT_CARGO_TOML_PATH]
            )

        if result.returncode == 0:
            return CompiledExercise(self)
        clean()
        raise CompilationError(_output(result))

    def _run(self) -> ExerciseOutput:
        if self.mode is Mode.BUILD_SCRIPT:
            return ExerciseOutput(stdout="", stderr="")
        arg = "--show-output" if self.mode is Mode.TEST else ""
        result = _capture([temp_file(), arg])
        output = _output(result)
        if result.returncode != 0:
            raise ExerciseRunError(output)
        return output

    def state(self) -> list[ContextLine]:
        """Return the lines around the pending marker, or [] when done."""
        source = self.path.read_text(encoding="utf-8")
        if not I_AM_DONE_REGEX.search(source):
            return []
        lines = _lines(source)
        matched = next(
            (i for i, line in enumerate(lines) if I_AM_DONE_REGEX.search(line)),
            None,
        )
        if matched is None:
            raise RuntimeError(f"pending marker in {self.path} is not on a single line")
        low = max(matched - CONTEXT, 0)
        return [
            ContextLine(line=line, number=i + 1, important=i == matched)
            for i, line in enumerate(lines[low : matched + CONTEXT + 1], start=low)
        ]

    def looks_done(self) -> bool:
        """Whether the pending marker has been removed from the source."""
        return not self.state()


class CompiledExercise:
    """A successfully built exercise; closing it removes the binary."""

    def __init__(self, exercise: Exercise) -> None:
        self.exercise = exercise
        self._closed = False

    def run(self) -> ExerciseOutput:
        """Run the binary; raise ExerciseRunError on a failing exit."""
        return self.exercise._run()

    def close(self) -> None:
        if not self._closed:
            clean()
            self._closed = True

    def __enter__(self) -> CompiledExercise:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def load_exercises(path: str | os.PathLike = "info.toml") -> list[Exercise]:
    """Read the exercise list from an info.toml file."""
    with open(path, "rb") as handle:
        data = tomllib.load(handle)
    return [Exercise.from_dict(entry) for entry in data["exercises"]]