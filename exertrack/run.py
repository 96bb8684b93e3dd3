"""Running a single exercise and resetting it."""

from __future__ import annotations

import subprocess

from exertrack.exercise import CompilationError, Exercise, ExerciseRunError, Mode
from exertrack.ui import success, warn
from exertrack.verify import VerificationError, _Spinner, test


def run(exercise: Exercise, verbose: bool = False) -> None:
    """Build and run (or test) one exercise; raise VerificationError on failure."""
    if exercise.mode in (Mode.TEST, Mode.BUILD_SCRIPT):
        test(exercise, verbose)
    else:
        _compile_and_run(exercise)


def reset(exercise: Exercise) -> None:
    """Discard changes to the exercise by stashing them with git."""
    subprocess.Popen(["git", "stash", "--", str(exercise.path)])


def _compile_and_run(exercise: Exercise) -> None:
    with _Spinner(f"Compiling {exercise}...") as spinner:
        try:
            compiled = exercise.compile()
        except CompilationError as exc:
            spinner.finish_and_clear()
            warn(f"Compilation of {exercise} failed!, Compiler error message:\n")
            print(exc.output.stderr)
            raise VerificationError(exercise) from exc

        with compiled:
            spinner.set_message(f"Running {exercise}...")
            try:
                output = compiled.run()
            except ExerciseRunError as exc:
                spinner.finish_and_clear()
                print(exc.output.stdout)
                print(exc.output.stderr)
                warn(f"Ran {exercise} with errors")
                raise VerificationError(exercise) from exc
            spinner.finish_and_clear()
            print(output.stdout)
            success(f"Successfully ran {exercise}")