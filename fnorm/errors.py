"""Error types raised by the rename protocol and configuration loading."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from .models import BatchFailure


class FnormError(Exception):
    """Base class for all fnorm errors."""


class PathNotFoundError(FnormError):
    def __init__(self, path: os.PathLike[str] | str, cause: Optional[BaseException] = None):
        self.path = os.fspath(path)
        self.cause = cause
        super().__init__(f"file not found: {self.path}")


class TargetExistsError(FnormError):
    def __init__(self, path: os.PathLike[str] | str):
        self.path = os.fspath(path)
        super().__init__(f'target file already exists: "{self.path}"')


class RenameError(FnormError):
    """An underlying filesystem rename failed; ``cause`` holds the OS error."""

    def __init__(self, src: os.PathLike[str] | str, dst: os.PathLike[str] | str, cause: BaseException):
        self.src = os.fspath(src)
        self.dst = os.fspath(dst)
        self.cause = cause
        super().__init__(f'failed to rename "{self.src}" to "{self.dst}": {cause}')


class ConfigError(FnormError):
    """The configuration document could not be read or has a bad value."""


class InvalidKeyError(ConfigError):
    def __init__(self, section: str, key: str):
        self.section = section
        self.key = key
        super().__init__(
            f"invalid key {key!r} in [{section}]: keys must be exactly one character"
        )


class BatchError(FnormError):
    """One or more paths in a batch failed."""

    def __init__(self, failures: Sequence["BatchFailure"]):
        self.failures: List["BatchFailure"] = list(failures)
        super().__init__(self._render())

    def _render(self) -> str:
        count = len(self.failures)
        lines = [f"failed to process {count} path{'s' if count != 1 else ''}:"]
        for failure in self.failures:
            lines.append(f"  {failure.path}: {failure.message}")
            if failure.cause:
                lines.append(f"    caused by: {failure.cause}")
        return "\n".join(lines)
