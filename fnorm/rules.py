"""
Deterministic normalization rules.

The character tables live here so that new tokens or transliterations are
configuration, not code, changes.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_serializer, field_validator

from .errors import InvalidKeyError

TEMP_SUFFIX = ".fnorm-tmp"

DEFAULT_SPECIAL_TOKENS: Dict[str, str] = {
    "/": "-or-",
    "&": "-and-",
    "@": "-at-",
    "%": "-percent-",
}

DEFAULT_TRANSLITERATIONS: Dict[str, str] = {
    **dict.fromkeys("áàâäãå", "a"),
    **dict.fromkeys("éèêë", "e"),
    **dict.fromkeys("íìîï", "i"),
    **dict.fromkeys("óòôöõø", "o"),
    **dict.fromkeys("úùûü", "u"),
    "ñ": "n",
    "ç": "c",
    "æ": "ae",
    "œ": "oe",
    "ß": "ss",
}

# space, en/em dash, curly single and double quotes
HYPHEN_CHARS = frozenset(" –—‘’“”")


class CharacterRules(BaseModel):
    """Immutable rule set: the tables are read-only mappings after validation."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    special_tokens: Mapping[str, str] = Field(default_factory=lambda: dict(DEFAULT_SPECIAL_TOKENS))
    transliterations: Mapping[str, str] = Field(default_factory=lambda: dict(DEFAULT_TRANSLITERATIONS))
    lowercase: bool = True
    lowercase_extension: bool = True

    @field_validator("special_tokens", "transliterations")
    @classmethod
    def _single_character_keys(cls, table: Mapping[str, str], info: ValidationInfo) -> Mapping[str, str]:
        for key in table:
            if len(key) != 1:
                raise InvalidKeyError(info.field_name, key)
        return MappingProxyType(dict(table))

    @field_serializer("special_tokens", "transliterations")
    def _plain_dict(self, table: Mapping[str, str]) -> Dict[str, str]:
        return dict(table)

    def merged(
        self,
        *,
        special_tokens: Optional[Mapping[str, str]] = None,
        transliterations: Optional[Mapping[str, str]] = None,
        lowercase: Optional[bool] = None,
        lowercase_extension: Optional[bool] = None,
    ) -> "CharacterRules":
        """
        Return a new rule set with the given overrides layered on top.

        Table entries are merged key by key (overrides win); options replace.
        """
        return CharacterRules(
            special_tokens={**self.special_tokens, **(special_tokens or {})},
            transliterations={**self.transliterations, **(transliterations or {})},
            lowercase=self.lowercase if lowercase is None else lowercase,
            lowercase_extension=(
                self.lowercase_extension if lowercase_extension is None else lowercase_extension
            ),
        )


def default_rules() -> CharacterRules:
    """Build a fresh default rule set."""
    return CharacterRules()
