"""
Tests for environment variable translation.
"""

from cmdx.env_vars import translate_env_vars
from cmdx.platforms import Os
from cmdx.tables import ENV_VAR_MAP, lookup_env_var

W, L = Os.WINDOWS, Os.LINUX


def test_windows_to_posix():
    """Test %VAR% references becoming $VAR."""
    assert translate_env_vars(r"%USERPROFILE%\docs", W, L) == r"$HOME\docs"
    assert translate_env_vars("%username%", W, L) == "$USER"
    assert translate_env_vars("%FOO%", W, L) == "$FOO"
    assert translate_env_vars("%USERNAME%_backup", W, L) == "${USER}_backup"

    print("[OK] Windows to POSIX env test passed")


def test_posix_to_windows():
    """Test $VAR and ${VAR} references becoming %VAR%."""
    assert translate_env_vars("$HOME/x", L, W) == "%USERPROFILE%/x"
    assert translate_env_vars("${USER}", L, W) == "%USERNAME%"
    assert translate_env_vars("$CUSTOM", L, W) == "%CUSTOM%"


def test_non_variables_untouched():
    """Test text without variable references."""
    assert translate_env_vars("100%", W, L) == "100%"
    assert translate_env_vars("price: $", L, W) == "price: $"
    assert translate_env_vars("", W, L) == ""


def test_same_family_untouched():
    """Test that Unix to Unix needs no rewriting."""
    assert translate_env_vars("$HOME", L, Os.MACOS) == "$HOME"
    assert lookup_env_var("HOME", L, Os.FREEBSD) is None


def test_symmetry():
    """Test that every mapped name survives a round trip."""
    for windows, unix in ENV_VAR_MAP:
        there = translate_env_vars(f"%{windows}%", W, L)
        assert there == f"${unix}"
        assert translate_env_vars(there, L, W) == f"%{windows}%"
