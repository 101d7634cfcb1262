# tests/test_utils.py
"""Unit tests for utility functions in the `wee.utils.utils` module."""

import os
from unittest.mock import patch

from wee.utils import utils


def test_deep_merge() -> None:
    """Verify that `deep_merge` correctly merges nested dictionaries.

    This test ensures:
    - Existing values are preserved if not overridden.
    - Nested dictionaries are merged recursively.
    - Conflicting keys are overridden by values from the second dictionary.
    - The base dictionary is left untouched.
    """
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 99, "z": 100}, "c": 3}
    result = utils.deep_merge(base, override)
    expected = {"a": 1, "b": {"x": 10, "y": 99, "z": 100}, "c": 3}
    assert result == expected
    assert base == {"a": 1, "b": {"x": 10, "y": 20}}


def test_load_config_merges_user_file(tmp_path) -> None:
    (tmp_path / "config.toml").write_text(
        '[editor]\ntab_stop = 8\n\n[keybindings]\nquit = ["ctrl+x"]\n', encoding="utf-8"
    )

    config = utils.load_config(tmp_path)

    assert config["editor"]["tab_stop"] == 8
    assert config["editor"]["quit_times"] == utils.DEFAULT_CONFIG["editor"]["quit_times"]
    assert config["keybindings"]["quit"] == ["ctrl+x"]
    assert config["keybindings"]["save_file"] == ["ctrl+s"]
    assert utils.DEFAULT_CONFIG["editor"]["tab_stop"] == 4


def test_load_config_ignores_broken_file(tmp_path) -> None:
    (tmp_path / "config.toml").write_text("[editor\ntab_stop = ", encoding="utf-8")
    assert utils.load_config(tmp_path) == utils.DEFAULT_CONFIG


def test_load_config_reads_env_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("WEE_KEYTRACE=1\n", encoding="utf-8")
    with patch.dict(os.environ):
        os.environ.pop("WEE_KEYTRACE", None)
        utils.load_config(tmp_path)
        assert os.environ["WEE_KEYTRACE"] == "1"


def test_user_config_templates_created_on_first_run(tmp_path) -> None:
    config_dir = tmp_path / "wee"
    with patch("wee.utils.utils.get_config_dir", return_value=config_dir), patch.dict(os.environ):
        config = utils.load_config()

    assert (config_dir / "config.toml").is_file()
    assert "WEE_KEYTRACE=0" in (config_dir / ".env").read_text(encoding="utf-8")
    assert config["editor"] == utils.DEFAULT_CONFIG["editor"]


def test_decode_bytes_utf8() -> None:
    text = "héllo wörld ñandú çà 漢字"
    decoded, encoding = utils.decode_bytes(text.encode("utf-8"))
    assert decoded == text
    assert encoding.lower().replace("_", "-") in {"utf-8", "utf-8-sig"}


def test_decode_bytes_never_fails() -> None:
    decoded, _ = utils.decode_bytes(b"caf\xe9 \xff\xfe")
    assert isinstance(decoded, str)
    assert decoded.startswith("caf")


def test_decode_bytes_empty() -> None:
    assert utils.decode_bytes(b"") == ("", "utf-8")
