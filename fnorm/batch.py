"""Run the rename protocol over many paths, collecting failures."""

from __future__ import annotations

import os
from typing import Iterable, Optional

from .errors import FnormError
from .logger import get_logger
from .models import BatchFailure, BatchReport
from .rename import apply
from .rules import CharacterRules, default_rules

log = get_logger("batch")


def _failure(path: os.PathLike[str] | str, error: FnormError) -> BatchFailure:
    cause = getattr(error, "cause", None)
    return BatchFailure(
        path=os.fspath(path),
        kind=type(error).__name__,
        message=str(error),
        cause=str(cause) if cause is not None else None,
    )


def process_paths(
    paths: Iterable[os.PathLike[str] | str],
    rules: Optional[CharacterRules] = None,
    dry_run: bool = False,
) -> BatchReport:
    """
    Apply the rename protocol to each path in order.

    A failing path is recorded in ``report.failures`` and the rest still run.
    """
    rules = rules if rules is not None else default_rules()
    report = BatchReport()

    for path in paths:
        try:
            report.outcomes.append(apply(path, rules, dry_run))
        except FnormError as exc:
            log.info("failed to process %s: %s", path, exc)
            report.failures.append(_failure(path, exc))

    return report
