"""
Safe rename protocol.

``plan_rename`` inspects the entry and decides what should happen;
``apply`` carries the plan out. Nothing is ever overwritten: a regular
rename onto an existing entry fails with ``TargetExistsError``, and
case-only renames go through a sibling ``<name>.fnorm-tmp`` so that
case-insensitive filesystems register the change.
"""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .errors import PathNotFoundError, RenameError, TargetExistsError
from .logger import get_logger
from .models import OutcomeKind, RenameOutcome
from .normalize import normalize
from .rules import TEMP_SUFFIX, CharacterRules

log = get_logger("rename")


class PlanKind(str, Enum):
    NO_CHANGE = "no_change"
    WOULD_RENAME = "would_rename"
    CASE_ONLY = "case_only"
    REGULAR = "regular"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class RenamePlan:
    kind: PlanKind
    source: Path
    target: Optional[Path]
    old_name: str
    new_name: str


def _usable_name(name: str) -> bool:
    if name in ("", ".", ".."):
        return False
    if "\x00" in name or os.sep in name:
        return False
    return not (os.altsep and os.altsep in name)


def _same_entry(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def _entry_name(path: Path) -> str:
    try:
        os.stat(path)
    except OSError as exc:
        raise PathNotFoundError(path, exc) from exc
    name = path.name
    if name in ("", ".", ".."):
        raise PathNotFoundError(path)
    return name


def plan_rename(
    path: os.PathLike[str] | str,
    rules: Optional[CharacterRules] = None,
    dry_run: bool = False,
) -> RenamePlan:
    """Inspect *path* and decide how (or whether) to rename it."""
    source = Path(path)
    old_name = _entry_name(source)
    new_name = normalize(old_name, rules)

    if old_name == new_name:
        return RenamePlan(PlanKind.NO_CHANGE, source, None, old_name, new_name)

    if not _usable_name(new_name):
        log.warning("leaving %s alone: normalized name %r is not a usable file name", source, new_name)
        return RenamePlan(PlanKind.NO_CHANGE, source, None, old_name, old_name)

    target = source.with_name(new_name)

    if dry_run:
        return RenamePlan(PlanKind.WOULD_RENAME, source, target, old_name, new_name)

    if old_name.lower() == new_name.lower():
        # On a case-sensitive volume both spellings can exist side by side.
        if os.path.lexists(target) and not _same_entry(source, target):
            return RenamePlan(PlanKind.CONFLICT, source, target, old_name, new_name)
        return RenamePlan(PlanKind.CASE_ONLY, source, target, old_name, new_name)

    if os.path.lexists(target):
        return RenamePlan(PlanKind.CONFLICT, source, target, old_name, new_name)
    return RenamePlan(PlanKind.REGULAR, source, target, old_name, new_name)


class CaseOnlyState(str, Enum):
    PENDING = "pending"
    STAGED = "staged"
    DONE = "done"
    ROLLED_BACK = "rolled_back"
    STRANDED = "stranded"


class CaseOnlyRename:
    """
    Two-hop rename ``source -> temp -> target``.

    If the second hop fails the entry is moved back to ``source``. When that
    also fails the entry stays under ``temp`` (state ``STRANDED``) and only a
    warning is logged; the error raised is still the second hop's.
    """

    def __init__(self, source: Path, target: Path):
        self.source = Path(source)
        self.target = Path(target)
        self.temp = self.source.with_name(self.source.name + TEMP_SUFFIX)
        self.state = CaseOnlyState.PENDING

    def run(self) -> None:
        if os.path.lexists(self.temp):
            cause = FileExistsError(errno.EEXIST, "temporary path already exists", str(self.temp))
            raise RenameError(self.source, self.temp, cause)
        self.stage()
        self.commit()

    def stage(self) -> None:
        log.debug("rename %s -> %s", self.source, self.temp)
        try:
            os.rename(self.source, self.temp)
        except OSError as exc:
            raise RenameError(self.source, self.temp, exc) from exc
        self.state = CaseOnlyState.STAGED

    def commit(self) -> None:
        log.debug("rename %s -> %s", self.temp, self.target)
        try:
            os.rename(self.temp, self.target)
        except OSError as exc:
            self.rollback()
            raise RenameError(self.temp, self.target, exc) from exc
        self.state = CaseOnlyState.DONE

    def rollback(self) -> bool:
        log.debug("restore %s -> %s", self.temp, self.source)
        try:
            os.rename(self.temp, self.source)
        except OSError as exc:
            log.warning("could not restore %s to %s: %s", self.temp, self.source, exc)
            self.state = CaseOnlyState.STRANDED
            return False
        self.state = CaseOnlyState.ROLLED_BACK
        return True


def _rename_direct(source: Path, target: Path) -> None:
    log.debug("rename %s -> %s", source, target)
    try:
        os.rename(source, target)
    except OSError as exc:
        raise RenameError(source, target, exc) from exc


def apply(
    path: os.PathLike[str] | str,
    rules: Optional[CharacterRules] = None,
    dry_run: bool = False,
) -> RenameOutcome:
    """
    Normalize the name of the entry at *path* on disk.

    Raises ``PathNotFoundError``, ``TargetExistsError`` or ``RenameError``.
    Directories are renamed in place; their contents are not visited.
    """
    plan = plan_rename(path, rules, dry_run)

    def outcome(kind: OutcomeKind, case_only: bool = False) -> RenameOutcome:
        return RenameOutcome(
            path=str(plan.source),
            old_name=plan.old_name,
            new_name=plan.new_name,
            kind=kind,
            case_only=case_only,
        )

    if plan.kind is PlanKind.NO_CHANGE:
        return outcome(OutcomeKind.UNCHANGED)
    if plan.kind is PlanKind.WOULD_RENAME:
        return outcome(OutcomeKind.WOULD_RENAME)
    if plan.kind is PlanKind.CONFLICT:
        raise TargetExistsError(plan.target)

    if plan.kind is PlanKind.CASE_ONLY:
        CaseOnlyRename(plan.source, plan.target).run()
        return outcome(OutcomeKind.RENAMED, case_only=True)

    _rename_direct(plan.source, plan.target)
    return outcome(OutcomeKind.RENAMED)


# ---------------------------------------------------------------------------
# Leftovers from interrupted case-only renames
# ---------------------------------------------------------------------------


def find_orphans(directory: os.PathLike[str] | str) -> List[Path]:
    """List entries in *directory* (not recursive) still under a temporary name."""
    root = Path(directory)
    try:
        entries = list(root.iterdir())
    except OSError as exc:
        raise PathNotFoundError(root, exc) from exc
    return sorted(
        p for p in entries
        if p.name.endswith(TEMP_SUFFIX) and len(p.name) > len(TEMP_SUFFIX)
    )


def recover_orphans(directory: os.PathLike[str] | str, dry_run: bool = False) -> List[RenameOutcome]:
    """Move orphaned ``.fnorm-tmp`` entries back to their original names."""
    recovered: List[RenameOutcome] = []
    for orphan in find_orphans(directory):
        original = orphan.with_name(orphan.name[: -len(TEMP_SUFFIX)])
        if os.path.lexists(original):
            log.warning("not recovering %s: %s already exists", orphan, original.name)
            continue

        kind = OutcomeKind.WOULD_RENAME
        if not dry_run:
            _rename_direct(orphan, original)
            kind = OutcomeKind.RENAMED
        recovered.append(
            RenameOutcome(path=str(orphan), old_name=orphan.name, new_name=original.name, kind=kind)
        )
    return recovered
