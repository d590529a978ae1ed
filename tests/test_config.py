import pytest
from pydantic import ValidationError

from fnorm.config import load_rules, load_rules_bytes, resolve_config_path, rules_from_mapping
from fnorm.errors import ConfigError, InvalidKeyError
from fnorm.normalize import normalize
from fnorm.rules import CharacterRules, default_rules

CONFIG = """
[special_tokens]
"+" = "-plus-"

[transliterations]
"ð" = "d"

[options]
lowercase_extension = false
"""


def test_overrides_layer_over_defaults():
    rules = rules_from_mapping({"special_tokens": {"+": "-plus-", "&": "-und-"}})
    assert normalize("a+b & c.txt", rules) == "a-plus-b-und-c.txt"
    # untouched defaults stay
    assert normalize("tcp/udp.txt", rules) == "tcp-or-udp.txt"


@pytest.mark.parametrize("key", ["ab", ""])
def test_key_must_be_one_character(key):
    with pytest.raises(InvalidKeyError) as info:
        rules_from_mapping({"transliterations": {key: "x"}})
    assert info.value.section == "transliterations"
    assert info.value.key == key


def test_non_string_value_rejected():
    with pytest.raises(ConfigError):
        rules_from_mapping({"special_tokens": {"+": 1}})


def test_non_bool_option_rejected():
    with pytest.raises(ConfigError):
        rules_from_mapping({"options": {"lowercase": "yes"}})


def test_unknown_table_is_ignored(caplog):
    rules = rules_from_mapping({"extras": {"x": 1}})
    assert rules == default_rules()
    assert "extras" in caplog.text


def test_load_rules_bytes():
    rules = load_rules_bytes(CONFIG.encode("utf-8"))
    assert rules.lowercase is True
    assert rules.lowercase_extension is False
    assert normalize("Guðmundur+Co.TXT", rules) == "gudmundur-plus-co.TXT"


def test_load_rules_bytes_with_bom():
    rules = load_rules_bytes(b"\xef\xbb\xbf" + CONFIG.encode("utf-8"))
    assert rules.special_tokens["+"] == "-plus-"


def test_invalid_toml():
    with pytest.raises(ConfigError):
        load_rules_bytes(b"[special_tokens\n")


def test_load_rules_from_path(tmp_path):
    path = tmp_path / "fnorm.toml"
    path.write_text(CONFIG, encoding="utf-8")
    assert load_rules(path).transliterations["ð"] == "d"


def test_load_rules_from_env(tmp_path, monkeypatch):
    path = tmp_path / "fnorm.toml"
    path.write_text(CONFIG, encoding="utf-8")
    monkeypatch.setenv("FNORM_CONFIG", str(path))
    assert resolve_config_path() == path
    assert load_rules().lowercase_extension is False


def test_load_rules_from_user_config_dir(tmp_path, monkeypatch):
    path = tmp_path / "fnorm" / "config.toml"
    path.parent.mkdir()
    path.write_text(CONFIG, encoding="utf-8")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert load_rules().special_tokens["+"] == "-plus-"


def test_no_config_gives_defaults():
    assert resolve_config_path() is None
    assert load_rules() == default_rules()


def test_missing_explicit_config(tmp_path):
    with pytest.raises(ConfigError):
        load_rules(tmp_path / "absent.toml")


def test_rules_reject_multi_character_keys_on_construction():
    with pytest.raises(InvalidKeyError) as info:
        CharacterRules(special_tokens={"ab": "x"})
    assert info.value.section == "special_tokens"
    assert info.value.key == "ab"

    with pytest.raises(InvalidKeyError) as info:
        default_rules().merged(transliterations={"": "x"})
    assert info.value.section == "transliterations"


def test_rules_are_frozen():
    rules = default_rules()
    with pytest.raises(ValidationError):
        rules.lowercase = False


def test_rule_tables_are_read_only():
    rules = default_rules()
    with pytest.raises(TypeError):
        rules.special_tokens["ab"] = "zz"
    with pytest.raises(TypeError):
        del rules.transliterations["é"]
    assert "ab" not in rules.special_tokens


def test_rules_serialize_tables_as_plain_dicts():
    dumped = default_rules().model_dump()
    assert dumped["special_tokens"]["&"] == "-and-"
    assert isinstance(dumped["transliterations"], dict)
