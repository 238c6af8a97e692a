"""
Batch orchestration.

Each workflow takes an already discovered list of paths and runs one
step per file. A file ends up SUCCEEDED, FAILED or SKIPPED; whatever
goes wrong with one file is recorded in its outcome and the batch moves
on to the next one.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .container import is_container
from .errors import FormatError, KnotError
from .transformer import Transformer


class Status(enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class FileOutcome:
    path: Path
    status: Status
    output: Optional[Path] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is Status.SUCCEEDED


@dataclass
class BatchReport:
    outcomes: List[FileOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status is Status.SUCCEEDED]

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status is Status.FAILED]

    @property
    def skipped(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status is Status.SKIPPED]


OutcomeCallback = Optional[Callable[[FileOutcome], None]]


def _run(
    paths: Sequence[Path],
    step: Callable[[Path], FileOutcome],
    on_outcome: OutcomeCallback,
) -> BatchReport:
    report = BatchReport()

    for path in paths:
        try:
            outcome = step(path)
        except (KnotError, OSError, ValueError) as e:
            outcome = FileOutcome(path, Status.FAILED, message=str(e))

        report.outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)

    return report


# ---------------------------------------------------------------------------
# Workflows
# ---------------------------------------------------------------------------


def encrypt_all(
    paths: Sequence[Path],
    transformer: Transformer,
    on_outcome: OutcomeCallback = None,
) -> BatchReport:
    """Encrypt every path into a sibling ``.knot`` container."""

    def step(path: Path) -> FileOutcome:
        output = transformer.encrypt_file(path)
        return FileOutcome(path, Status.SUCCEEDED, output=output)

    return _run(paths, step, on_outcome)


def decrypt_all(
    paths: Sequence[Path],
    transformer: Transformer,
    on_outcome: OutcomeCallback = None,
) -> BatchReport:
    """Decrypt every valid container; anything else is skipped."""

    def step(path: Path) -> FileOutcome:
        if not is_container(path):
            return FileOutcome(path, Status.SKIPPED, message="not a valid .knot container")

        try:
            output = transformer.decrypt_file(path)
        except FormatError as e:
            return FileOutcome(path, Status.SKIPPED, message=str(e))

        return FileOutcome(path, Status.SUCCEEDED, output=output)

    return _run(paths, step, on_outcome)


def clean_all(
    paths: Sequence[Path],
    confirm: Callable[[Sequence[Path]], bool],
    on_outcome: OutcomeCallback = None,
) -> BatchReport:
    """
    Delete containers after a single confirmation.

    ``confirm`` is asked once for the whole list. The signature of each
    file is checked again right before it is removed; a file that merely
    has the extension is never deleted.
    """

    if not confirm(paths):
        return BatchReport(cancelled=True)

    def step(path: Path) -> FileOutcome:
        if not is_container(path):
            return FileOutcome(path, Status.SKIPPED, message="not a Knot encrypted file")

        path.unlink()
        return FileOutcome(path, Status.SUCCEEDED)

    return _run(paths, step, on_outcome)


def is_affirmative(answer: str) -> bool:
    """``yes`` or ``y``, any case, surrounding whitespace ignored."""
    return answer.strip().lower() in ("yes", "y")
