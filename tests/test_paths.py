"""
Tests for path translation.
"""

import pytest

from cmdx.errors import TranslateError, UnresolvedPath
from cmdx.paths import (
    PathResult,
    is_unix_path,
    is_windows_path,
    lookup_path_rules,
    translate_path,
    translate_path_auto,
    translate_paths,
)
from cmdx.platforms import Os

W, L, M = Os.WINDOWS, Os.LINUX, Os.MACOS


def test_drive_round_trip():
    """Test that a drive path survives Windows -> Linux -> Windows."""
    forward = translate_path(r"C:\Users\john", W, L)
    assert forward.path == "/mnt/c/Users/john"
    assert forward.rule == "drive"
    assert translate_path(forward.path, L, W).path == r"C:\Users\john"

    assert translate_path("C:", W, L).path == "/mnt/c"
    assert translate_path("d:/data", W, L).path == "/mnt/d/data"

    print("[OK] Drive round trip test passed")


def test_round_trip_normalises_windows_spelling():
    """Test that a round trip yields the canonical Windows form."""
    def round_trip(path):
        return translate_path(translate_path(path, W, L).path, L, W).path

    assert round_trip("C:/x") == r"C:\x"
    assert round_trip(r"c:\x") == r"C:\x"
    assert round_trip("c:") == "C:"
    assert round_trip(r"%userprofile%\docs") == r"%USERPROFILE%\docs"


def test_home_paths():
    """Test %USERPROFILE% <-> ~."""
    assert translate_path(r"%USERPROFILE%\Documents", W, L).path == "~/Documents"
    assert translate_path(r"%userprofile%", W, L).path == "~"
    assert translate_path("~/projects/app", L, W).path == r"%USERPROFILE%\projects\app"


def test_unc_paths():
    """Test network shares, including smb:// URLs on Apple systems."""
    assert translate_path(r"\\server\share\dir", W, L).path == "//server/share/dir"
    assert translate_path(r"\\server\share\dir", W, M).path == "smb://server/share/dir"
    assert translate_path("smb://server/share/dir", M, W).path == r"\\server\share\dir"
    assert translate_path("//nas/media/x", L, M).path == "smb://nas/media/x"


def test_separator_fallback():
    """Test relative paths that only need their separators swapped."""
    result = translate_path(r"docs\readme.txt", W, L)
    assert result.path == "docs/readme.txt"
    assert result.rule == "separator"
    assert translate_path("/etc/hosts", L, W).path == r"\etc\hosts"


def test_invalid_paths():
    """Test paths that cannot exist on the target."""
    with pytest.raises(UnresolvedPath):
        translate_path("docs/a|b", L, W)
    with pytest.raises(UnresolvedPath):
        translate_path("notes:v2.txt", L, W)
    with pytest.raises(UnresolvedPath) as exc:
        translate_path("", W, L)
    assert exc.value.reason == "empty path"


def test_identity():
    """Test that the same OS returns the path untouched."""
    result = translate_path(r"C:\x", W, W)
    assert result == PathResult(r"C:\x", r"C:\x", W, W)


def test_sniffing():
    """Test Windows and Unix path detection."""
    assert is_windows_path(r"C:\Temp")
    assert is_windows_path("c:")
    assert is_windows_path(r"\\server\share")
    assert not is_windows_path("/usr/bin")

    assert is_unix_path("/usr/bin")
    assert is_unix_path("~")
    assert is_unix_path("../x")
    assert not is_unix_path("file.txt")


def test_translate_path_auto():
    """Test translation with a guessed source convention."""
    assert translate_path_auto(r"C:\Temp", L).path == "/mnt/c/Temp"
    assert translate_path_auto("/mnt/c/Temp", W).path == r"C:\Temp"
    assert translate_path_auto("/home/me", M).path == "/home/me"


def test_translate_paths_collects_errors():
    """Test that a bad path does not stop the others."""
    results = translate_paths(["/mnt/c/a", "x|y"], L, W)
    assert results[0].path == r"C:\a"
    assert isinstance(results[1], TranslateError)


def test_rules_are_cached():
    """Test that rule lists are built once per OS pair, fallback last."""
    rules = lookup_path_rules(W, L)
    assert rules is lookup_path_rules(W, L)
    assert [r.name for r in rules] == ["drive", "home", "unc", "separator"]
    assert lookup_path_rules(L, L) == ()
