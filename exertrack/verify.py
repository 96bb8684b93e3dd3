"""Checking exercises one after another and prompting on completion."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable

from exertrack.exercise import (
    CompilationError,
    CompiledExercise,
    Exercise,
    ExerciseRunError,
    Mode,
)
from exertrack.ui import blue, bold, success, warn

_BAR_WIDTH = 60
_CLEAR_LINE = "\r\x1b[2K"


class VerificationError(Exception):
    """Raised when an exercise fails to build, to run or is still pending."""

    def __init__(self, exercise: Exercise) -> None:
        super().__init__(f"verification of {exercise} failed")
        self.exercise = exercise


class _Spinner:
    """A one-line status message on stderr, shown only on a terminal."""

    def __init__(self, message: str) -> None:
        self._active = sys.stderr.isatty()
        self._shown = False
        self.set_message(message)

    def set_message(self, message: str) -> None:
        if self._active:
            sys.stderr.write(f"{_CLEAR_LINE}{message}")
            sys.stderr.flush()
            self._shown = True

    def finish_and_clear(self) -> None:
        if self._shown:
            sys.stderr.write(_CLEAR_LINE)
            sys.stderr.flush()
            self._shown = False

    def __enter__(self) -> _Spinner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.finish_and_clear()


class _ProgressBar:
    """A progress bar on stderr, drawn only on a terminal."""

    def __init__(self, total: int) -> None:
        self._total = total
        self._active = sys.stderr.isatty()
        self._drawn = False

    def update(self, position: int, message: str) -> None:
        if not self._active:
            return
        if self._total:
            filled = min(_BAR_WIDTH, _BAR_WIDTH * position // self._total)
        else:
            filled = 0
        if filled >= _BAR_WIDTH:
            bar = "#" * _BAR_WIDTH
        else:
            bar = "#" * filled + ">" + "-" * (_BAR_WIDTH - filled - 1)
        sys.stderr.write(
            f"{_CLEAR_LINE}Progress: [{bar}] {position}/{self._total} {message}"
        )
        sys.stderr.flush()
        self._drawn = True

    def finish(self) -> None:
        if self._drawn:
            sys.stderr.write("\n")
            sys.stderr.flush()
            self._drawn = False


def _percentage(done: int, total: int) -> float:
    return done / total * 100.0 if total else float("nan")


def verify(
    exercises: Iterable[Exercise],
    progress: tuple[int, int],
    verbose: bool = False,
    success_hints: bool = False,
) -> None:
    """Check each exercise in turn; raise VerificationError at the first failure."""
    num_done, total = progress
    bar = _ProgressBar(total)
    position = num_done
    percentage = _percentage(num_done, total)
    bar.update(position, f"({percentage:.1f} %)")

    try:
        for exercise in exercises:
            if exercise.mode is Mode.COMPILE:
                passed = _compile_and_run_interactively(exercise, success_hints)
            elif exercise.mode is Mode.CLIPPY:
                passed = _compile_only(exercise, success_hints)
            else:
                passed = _compile_and_test(exercise, True, verbose, success_hints)
            if not passed:
                raise VerificationError(exercise)
            percentage += 100.0 / total
            position += 1
            bar.update(position, f"({percentage:.1f} %)")
    finally:
        bar.finish()


def test(exercise: Exercise, verbose: bool = False) -> None:
    """Build and run an exercise's tests without prompting."""
    _compile_and_test(exercise, False, verbose, False)


def _compile(exercise: Exercise, spinner: _Spinner) -> CompiledExercise:
    try:
        return exercise.compile()
    except CompilationError as exc:
        spinner.finish_and_clear()
        warn(f"Compiling of {exercise} failed! Please try again. Here's the output:")
        print(exc.output.stderr)
        raise VerificationError(exercise) from exc


def _compile_only(exercise: Exercise, success_hints: bool) -> bool:
    with _Spinner(f"Compiling {exercise}...") as spinner:
        compiled = _compile(exercise, spinner)
        spinner.finish_and_clear()
    with compiled:
        return prompt_for_completion(exercise, None, success_hints)


def _compile_and_run_interactively(exercise: Exercise, success_hints: bool) -> bool:
    with _Spinner(f"Compiling {exercise}...") as spinner:
        compiled = _compile(exercise, spinner)
        with compiled:
            spinner.set_message(f"Running {exercise}...")
            try:
                output = compiled.run()
            except ExerciseRunError as exc:
                spinner.finish_and_clear()
                warn(f"Ran {exercise} with errors")
                print(exc.output.stdout)
                print(exc.output.stderr)
                raise VerificationError(exercise) from exc
            spinner.finish_and_clear()
            return prompt_for_completion(exercise, output.stdout, success_hints)


def _compile_and_test(
    exercise: Exercise, interactive: bool, verbose: bool, success_hints: bool
) -> bool:
    with _Spinner(f"Testing {exercise}...") as spinner:
        compiled = _compile(exercise, spinner)
        with compiled:
            try:
                output = compiled.run()
            except ExerciseRunError as exc:
                spinner.finish_and_clear()
                warn(f"Testing of {exercise} failed! Please try again. Here's the output:")
                print(exc.output.stdout)
                raise VerificationError(exercise) from exc
            spinner.finish_and_clear()
            if verbose:
                print(output.stdout)
            if interactive:
                return prompt_for_completion(exercise, None, success_hints)
            return True


def _separator() -> str:
    return bold("=" * 20)


def prompt_for_completion(
    exercise: Exercise, prompt_output: str | None, success_hints: bool
) -> bool:
    """Return True if the exercise is done, else show where it is pending."""
    context = exercise.state()
    if not context:
        return True

    if exercise.mode is Mode.COMPILE:
        success(f"Successfully ran {exercise}!")
    elif exercise.mode is Mode.TEST:
        success(f"Successfully tested {exercise}!")
    else:
        success(f"Successfully compiled {exercise}!")

    no_emoji = "NO_EMOJI" in os.environ
    if no_emoji:
        clippy_success_msg = "The code is compiling, and Clippy is happy!"
    else:
        clippy_success_msg = "The code is compiling, and 📎 Clippy 📎 is happy!"

    success_msg = {
        Mode.COMPILE: "The code is compiling!",
        Mode.TEST: "The code is compiling, and the tests pass!",
        Mode.CLIPPY: clippy_success_msg,
        Mode.BUILD_SCRIPT: "Build script works!",
    }[exercise.mode]

    print()
    if no_emoji:
        print(f"~*~ {success_msg} ~*~")
    else:
        print(f"🎉 🎉  {success_msg} 🎉 🎉")
    print()

    if prompt_output is not None:
        print("Output:")
        print(_separator())
        print(prompt_output)
        print(_separator())
        print()
    if success_hints:
        print("Hints:")
        print(_separator())
        print(exercise.hint)
        print(_separator())
        print()

    print("You can keep working on this exercise,")
    print(f"or jump into the next one by removing the {bold('`I AM NOT DONE`')} comment:")
    print()
    for context_line in context:
        line = bold(context_line.line) if context_line.important else context_line.line
        print(f"{bold(blue(f'{context_line.number:>2}'))} {blue('|')}  {line}")

    return False