"""
Resolve a ``CharacterRules`` value from a TOML configuration file.

Example::

    [special_tokens]
    "+" = "-plus-"

    [transliterations]
    "ð" = "d"

    [options]
    lowercase = true
    lowercase_extension = false

Tables are layered over the defaults; keys must be exactly one character.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from charset_normalizer import from_bytes

from .errors import ConfigError, InvalidKeyError
from .logger import get_logger
from .rules import CharacterRules, default_rules

log = get_logger("config")

CONFIG_ENV_VAR = "FNORM_CONFIG"
TABLE_SECTIONS = ("special_tokens", "transliterations")
OPTION_NAMES = ("lowercase", "lowercase_extension")


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "fnorm" / "config.toml"


def resolve_config_path(path: Optional[os.PathLike[str] | str] = None) -> Optional[Path]:
    """
    Pick the config file to load: *path*, then ``$FNORM_CONFIG``, then the
    per-user default if it exists. Returns None when there is nothing to load.
    """
    explicit = path if path is not None else os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidate = Path(explicit).expanduser()
        if not candidate.is_file():
            raise ConfigError(f"config file not found: {candidate}")
        return candidate

    candidate = default_config_path()
    return candidate if candidate.is_file() else None


def decode_config_bytes(raw: bytes) -> str:
    """
    Decode a config file. UTF-8 (with or without BOM) is expected; anything
    else goes through charset-normalizer's best guess, then UTF-8 with
    replacement characters as a last resort.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is not None:
        log.warning("config file is not UTF-8, decoding as %s", match.encoding)
        try:
            return raw.decode(match.encoding)
        except (LookupError, UnicodeDecodeError):
            pass

    log.warning("config file could not be decoded cleanly, replacing invalid bytes")
    return raw.decode("utf-8", errors="replace")


def _check_table(section: str, table: Any) -> Dict[str, str]:
    if not isinstance(table, dict):
        raise ConfigError(f"[{section}] must be a table")
    for key, value in table.items():
        if len(key) != 1:
            raise InvalidKeyError(section, key)
        if not isinstance(value, str):
            raise ConfigError(f"value for {key!r} in [{section}] must be a string")
    return dict(table)


def rules_from_mapping(
    data: Mapping[str, Any],
    base: Optional[CharacterRules] = None,
) -> CharacterRules:
    """Layer a parsed config document over *base* (the defaults if omitted)."""
    base = base if base is not None else default_rules()

    for name in data:
        if name not in TABLE_SECTIONS and name != "options":
            log.warning("ignoring unknown config table [%s]", name)

    tables = {section: _check_table(section, data.get(section, {})) for section in TABLE_SECTIONS}

    options = data.get("options", {})
    if not isinstance(options, dict):
        raise ConfigError("[options] must be a table")
    for name, value in options.items():
        if name not in OPTION_NAMES:
            log.warning("ignoring unknown option %r", name)
        elif not isinstance(value, bool):
            raise ConfigError(f"option {name!r} must be true or false")

    return base.merged(
        special_tokens=tables["special_tokens"],
        transliterations=tables["transliterations"],
        lowercase=options.get("lowercase"),
        lowercase_extension=options.get("lowercase_extension"),
    )


def load_rules_bytes(raw: bytes, base: Optional[CharacterRules] = None) -> CharacterRules:
    text = decode_config_bytes(raw)
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc
    return rules_from_mapping(data, base)


def load_rules(path: Optional[os.PathLike[str] | str] = None) -> CharacterRules:
    """Load rules from the resolved config file, or the defaults if there is none."""
    config_path = resolve_config_path(path)
    if config_path is None:
        return default_rules()

    log.debug("loading rules from %s", config_path)
    try:
        raw = config_path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"cannot read config file {config_path}: {exc}") from exc
    return load_rules_bytes(raw)
