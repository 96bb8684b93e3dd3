"""Checking every exercise at once and recording the results as JSON."""

from __future__ import annotations

import json
import os
import threading
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from pathlib import Path

from exertrack.exercise import Exercise
from exertrack.run import run
from exertrack.verify import VerificationError

DEFAULT_RESULT_PATH = ".github/result/check_result.json"


def _now() -> int:
    return int(time.time())


@dataclass
class ExerciseResult:
    """Whether one exercise passed."""

    name: str
    result: bool


@dataclass
class ExerciseStatistics:
    """Totals over a whole check."""

    total_exercations: int = 0
    total_succeeds: int = 0
    total_failures: int = 0
    total_time: int = 0


@dataclass
class ExerciseCheckList:
    """The full report of a check."""

    exercises: list[ExerciseResult] = field(default_factory=list)
    user_name: str | None = None
    statistics: ExerciseStatistics = field(default_factory=ExerciseStatistics)

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2, ensure_ascii=False)

    def record(self, name: str, result: bool) -> None:
        """Add one exercise's result and update the totals."""
        self.exercises.append(ExerciseResult(name=name, result=result))
        if result:
            self.statistics.total_succeeds += 1
        else:
            self.statistics.total_failures += 1


def cicv_verify(
    exercises: Iterable[Exercise],
    output_path: str | os.PathLike = DEFAULT_RESULT_PATH,
) -> ExerciseCheckList:
    """Run every exercise concurrently and write the report to ``output_path``."""
    exercises = list(exercises)
    started = _now()
    total = len(exercises)
    checklist = ExerciseCheckList(
        statistics=ExerciseStatistics(total_exercations=total)
    )
    lock = threading.Lock()
    rights = 0

    def check(exercise: Exercise, task_start: int) -> None:
        nonlocal rights
        try:
            run(exercise, True)
            passed = True
        except VerificationError:
            passed = False
        with lock:
            if passed:
                rights += 1
                print(f"{exercise.name}执行成功")
            else:
                print(f"{exercise.name}执行失败")
            print(f"总的题目数: {total}")
            print(f"当前做正确的题目数: {rights}")
            print(f"当前修改试卷耗时: {_now() - task_start} s")
            checklist.record(exercise.name, passed)

    with ThreadPoolExecutor() as pool:
        futures = [pool.submit(check, exercise, _now()) for exercise in exercises]
        for future in futures:
            future.result()

    total_time = _now() - started
    print(
        "===============================试卷批改完成,总耗时: "
        f"{total_time} s; =================================="
    )
    checklist.statistics.total_time = total_time
    Path(output_path).write_text(checklist.to_json(), encoding="utf-8")
    return checklist