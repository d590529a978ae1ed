"""
Filename normalization.

Pipeline (pure, never raises):
- trim the whole name
- split base name and extension
- run the base name through the per-character rule list
- collapse hyphen runs, trim leading hyphens
- lowercase the extension (optional) and reassemble
"""

from __future__ import annotations

import re
import string
from typing import Callable, Optional, Tuple

from .rules import HYPHEN_CHARS, CharacterRules, default_rules

_ALLOWED_LOWER = frozenset(string.ascii_lowercase + string.digits + "-_.")
_ALLOWED_ANY_CASE = _ALLOWED_LOWER | frozenset(string.ascii_uppercase)

_HYPHEN_RUN_RE = re.compile(r"-{2,}")

CharRule = Callable[[str, CharacterRules], Optional[str]]


def _special_token(ch: str, rules: CharacterRules) -> Optional[str]:
    return rules.special_tokens.get(ch)


def _transliteration(ch: str, rules: CharacterRules) -> Optional[str]:
    return rules.transliterations.get(ch)


def _hyphen_char(ch: str, rules: CharacterRules) -> Optional[str]:
    return "-" if ch in HYPHEN_CHARS else None


def _allowed_char(ch: str, rules: CharacterRules) -> Optional[str]:
    allowed = _ALLOWED_LOWER if rules.lowercase else _ALLOWED_ANY_CASE
    return ch if ch in allowed else None


# First match wins; anything left over becomes a hyphen.
CHARACTER_RULES: Tuple[CharRule, ...] = (
    _special_token,
    _transliteration,
    _hyphen_char,
    _allowed_char,
)


def translate_char(ch: str, rules: CharacterRules) -> str:
    for rule in CHARACTER_RULES:
        out = rule(ch, rules)
        if out is not None:
            return out
    return "-"


def split_extension(name: str) -> tuple[str, str]:
    """
    Split *name* into ``(base, extension)``; the extension excludes the dot.

    A leading dot (``.bashrc``) makes the whole remainder the extension with
    an empty base. A trailing dot or no dot means there is no extension.
    """
    dot = name.rfind(".")
    if dot == -1:
        return name, ""
    if dot == 0:
        return "", name[1:]
    if dot == len(name) - 1:
        return name[:dot], ""
    return name[:dot], name[dot + 1:]


def collapse_hyphens(text: str) -> str:
    return _HYPHEN_RUN_RE.sub("-", text)


def normalize_base(base: str, rules: Optional[CharacterRules] = None) -> str:
    """
    Normalize a base name (the part before the extension).

    Leading hyphens are trimmed from the result, trailing ones are kept.
    """
    rules = rules if rules is not None else default_rules()

    trimmed = base.strip().strip(".")
    if not trimmed:
        return ""

    out: list[str] = []
    for ch in trimmed:
        # lower() may expand one character into several (e.g. "İ")
        folded = ch.lower() if rules.lowercase else ch
        for c in folded:
            out.append(translate_char(c, rules))

    return collapse_hyphens("".join(out)).lstrip("-")


def normalize(filename: str, rules: Optional[CharacterRules] = None) -> str:
    """Return the canonical slug form of *filename*, keeping its extension."""
    if not filename:
        return ""

    rules = rules if rules is not None else default_rules()

    base, extension = split_extension(filename.strip())
    normalized_base = normalize_base(base, rules)
    if rules.lowercase_extension:
        extension = extension.lower()

    if not extension:
        return normalized_base
    return f"{normalized_base}.{extension}"
