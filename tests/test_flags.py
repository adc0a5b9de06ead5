"""
Tests for per-command flag mapping.
"""

from cmdx.flags import is_flag, map_flag, map_flags, takes_value
from cmdx.lexer import Token
from cmdx.platforms import Os
from cmdx.tables import lookup_command

W, L = Os.WINDOWS, Os.LINUX


def test_map_flags_in_source_order():
    """Test that flags come out in the order they were given."""
    mapping = lookup_command("dir", W, L)
    assert map_flags(mapping, ["/w", "/s"], windows_source=True) == (["-C", "-R"], [], [])
    assert map_flags(mapping, ["/s", "/w"], windows_source=True) == (["-R", "-C"], [], [])

    print("[OK] Flag order test passed")


def test_windows_switches_ignore_case():
    """Test that /S matches the /s entry."""
    mapping = lookup_command("dir", W, L)
    assert map_flag(mapping, "/S", windows_source=True) == ["-R"]


def test_unmapped_flags_pass_through():
    """Test that unknown flags are kept and reported."""
    mapping = lookup_command("dir", W, L)
    target, unmapped, _ = map_flags(mapping, ["/w", "/z"], windows_source=True)
    assert target == ["-C", "/z"]
    assert unmapped == ["/z"]


def test_empty_and_multi_token_targets():
    """Test dropped flags and flags that expand to several tokens."""
    xcopy = lookup_command("xcopy", W, L)
    assert map_flags(xcopy, ["/s", "/e", "/y"], windows_source=True) == (["-f"], [], [])

    rm = lookup_command("rm", L, W)
    assert map_flag(rm, "-rf") == ["/s", "/q"]
    assert map_flag(rm, "-f") == ["/q", "/f"]


def test_value_flags_keep_their_value():
    """Test that a value flag carries the next token along with it."""
    taskkill = lookup_command("taskkill", W, L)
    assert takes_value(taskkill, "/PID", windows_source=True)
    assert not takes_value(taskkill, "/f", windows_source=True)

    pid = Token("1234")
    flags, unmapped, arguments = map_flags(taskkill, ["/pid", pid, "/f"], windows_source=True)
    assert flags == ["-9"]
    assert unmapped == []
    assert arguments == [pid]

    head = lookup_command("head", L, W)
    count = Token("5")
    assert map_flags(head, ["-n", count]).flags == ["-TotalCount", count]


def test_short_flag_clusters():
    """Test that clusters expand only when every letter is known."""
    rm = lookup_command("rm", L, W)
    assert map_flag(rm, "-vf") == ["/q", "/f"]

    ls = lookup_command("ls", L, W)
    assert map_flag(ls, "-lZ") is None
    assert map_flag(ls, "--color") is None


def test_is_flag():
    """Test flag detection for both conventions."""
    assert is_flag(None, "/s", windows_source=True)
    assert not is_flag(None, "-n", windows_source=True)
    assert not is_flag(None, "/", windows_source=True)

    tracert = lookup_command("tracert", W, L)
    assert is_flag(tracert, "-h", windows_source=True)

    assert is_flag(None, "-la", windows_source=False)
    assert not is_flag(None, "-", windows_source=False)
    assert not is_flag(None, "/etc", windows_source=False)
