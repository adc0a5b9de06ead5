"""
Tests for command, compound and full-line translation.
Run with: python -m pytest tests/ or just python tests/test_translator.py
"""

import dataclasses
import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cmdx.errors import EmptyCommand, InvalidCompoundSegment, TranslateError, UnknownCommand
from cmdx.platforms import Os
from cmdx.translator import (
    TranslationResult,
    is_native_command,
    translate_batch,
    translate_command,
    translate_compound_command,
    translate_full,
)

W, L, M = Os.WINDOWS, Os.LINUX, Os.MACOS


def test_identity():
    """Test that translating to the same OS changes nothing."""
    for os_ in Os.all():
        result = translate_command("dir /w", os_, os_)
        assert result.translated == "dir /w"
        assert result.warnings == ()
        assert not result.had_unmapped_flags

    print("[OK] Identity test passed")


def test_native_passthrough():
    """Test that commands native to the target are left alone."""
    result = translate_command("ls -la", W, L)
    assert result.translated == "ls -la"
    assert result.warnings == ()
    assert not result.had_unmapped_flags

    assert translate_command("ping -c 4 example.com", L, W).translated == "ping -c 4 example.com"

    print("[OK] Passthrough test passed")


def test_windows_to_linux_flags():
    """Test the basic Windows to Linux flag mapping."""
    assert translate_command("dir /w /s", W, L).translated == "ls -C -R"
    assert translate_command("DIR /W", W, L).translated == "ls -C"
    assert translate_command("ipconfig.exe /all", W, L).translated == "ip addr"
    assert translate_command("cls", W, L).translated == "clear"

    print("[OK] Windows to Linux test passed")


def test_unmapped_flag_warning():
    """Test that an unknown flag is kept and produces exactly one warning."""
    result = translate_command("dir /w /z", W, L)
    assert result.translated == "ls -C /z"
    assert result.had_unmapped_flags
    assert len(result.warnings) == 1
    assert "/z" in result.warnings[0]


@pytest.mark.parametrize("line, expected", [
    ("ls -la", "dir /a"),
    ("rm -rf build", "del /s /q build"),
    ("kill -9 1234", "taskkill /f /pid 1234"),
    ("pkill -9 firefox", "taskkill /f /im firefox"),
    ("grep -i TODO notes.txt", "findstr /i TODO notes.txt"),
    ("ps aux", "tasklist"),
    ("ip addr", "ipconfig"),
    ("touch a.txt", "type nul > a.txt"),
    ("head -n 5 log.txt", "powershell Get-Content -TotalCount 5 log.txt"),
    ("cp -r src dst", "xcopy /e /i src dst"),
])
def test_linux_to_windows(line, expected):
    """Test common Linux commands on Windows."""
    assert translate_command(line, L, W).translated == expected


@pytest.mark.parametrize("line, expected", [
    ("taskkill /pid 1234 /f", "kill -9 1234"),
    ("taskkill /im notepad.exe /f", "pkill -9 notepad.exe"),
    ("tracert -h 5 example.com", "traceroute -m 5 example.com"),
    ("timeout /t 5 /nobreak", "sleep 5"),
    ('findstr /i "hello world" file.txt', 'grep -i "hello world" file.txt'),
])
def test_windows_to_linux_arguments(line, expected):
    """Test value flags, subcommand keys and quoted arguments."""
    assert translate_command(line, W, L).translated == expected


def test_subcommand_key_only_follows_flags():
    """Test that a later argument never selects a subcommand mapping."""
    assert translate_command("ip neigh show dev a", L, W).translated == "ipconfig neigh show dev a"
    assert translate_command("ps x aux", L, W).translated == "tasklist x aux"
    assert translate_command("taskkill /f /im notepad.exe", W, L).translated == "pkill -9 notepad.exe"


def test_end_of_options_marker():
    """Test that -- is kept for Unix targets and dropped for cmd.exe."""
    assert translate_command("rm -- -x", L, W).translated == "del -x"
    assert translate_command("grep -i -- -v notes.txt", L, W).translated == "findstr /i -v notes.txt"
    assert translate_command("md5sum -- -file.iso", L, M).translated == "md5 -- -file.iso"


def test_unix_to_unix():
    """Test translation between GNU and BSD userlands."""
    assert translate_command("ip addr", L, M).translated == "ifconfig"
    assert translate_command("md5sum file.iso", L, M).translated == "md5 file.iso"
    assert translate_command("pbcopy", M, L).translated == "xclip -selection clipboard"
    assert translate_command("ipconfig /all", W, M).translated == "ifconfig -a"


def test_unknown_command():
    """Test that a command with no mapping raises UnknownCommand."""
    with pytest.raises(UnknownCommand) as exc:
        translate_command("frobnicate --now", L, W)
    assert exc.value.name == "frobnicate"
    assert exc.value.from_os is L
    assert isinstance(exc.value, ValueError)


def test_unknown_command_suggestions():
    """Test that near misses suggest a known command."""
    with pytest.raises(UnknownCommand) as exc:
        translate_command("lss -la", L, W)
    assert "ls" in exc.value.suggestions
    assert "did you mean" in str(exc.value)


def test_empty_command():
    """Test that blank input is rejected."""
    with pytest.raises(EmptyCommand):
        translate_command("   ", L, W)
    with pytest.raises(EmptyCommand):
        translate_compound_command("", L, W)


def test_native_command_check():
    """Test the native-command predicate."""
    assert is_native_command("DIR", W)
    assert is_native_command("ping.exe", W)
    assert is_native_command("ls", L)
    assert not is_native_command("dir", L)
    assert not is_native_command("LS", L)


def test_compound():
    """Test that every segment is translated and operators are kept."""
    assert translate_compound_command("dir && cls", W, L).translated == "ls && clear"
    assert translate_compound_command("dir&&cls", W, L).translated == "ls && clear"
    assert translate_compound_command("ls -la | grep foo", L, W).translated == "dir /a | findstr foo"

    result = translate_compound_command("dir /z ; cls", W, L)
    assert result.translated == "ls /z ; clear"
    assert result.had_unmapped_flags
    assert len(result.warnings) == 1

    print("[OK] Compound test passed")


def test_compound_single_segment_keeps_quotes():
    """Test that a quoted operator does not split the line."""
    line = 'echo "a && b"'
    assert translate_compound_command(line, L, W).translated == line


def test_compound_failure_names_segment():
    """Test that a failing segment is reported with its index."""
    with pytest.raises(InvalidCompoundSegment) as exc:
        translate_compound_command("ls && frobnicate", L, W)
    assert exc.value.index == 1
    assert exc.value.segment == "frobnicate"
    assert isinstance(exc.value.cause, UnknownCommand)

    with pytest.raises(InvalidCompoundSegment) as exc:
        translate_compound_command("ls && ", L, W)
    assert isinstance(exc.value.cause, EmptyCommand)


def test_full_translation():
    """Test paths and variables inside translated commands."""
    assert translate_full(r"dir C:\Users\john", W, L).translated == "ls /mnt/c/Users/john"
    assert translate_full(r"type %USERPROFILE%\notes.txt", W, L).translated == "cat ~/notes.txt"
    assert translate_full("cat ~/notes.txt", L, W).translated == r"type %USERPROFILE%\notes.txt"
    assert translate_full(r"cd C:\Projects && dir", W, L).translated == "cd /mnt/c/Projects && ls"

    print("[OK] Full translation test passed")


def test_full_translation_of_native_commands():
    """Test that native commands still get their arguments rewritten."""
    assert translate_full(r"ls C:\Temp", W, L).translated == "ls /mnt/c/Temp"
    assert translate_full("echo $HOME", L, W).translated == "echo %USERPROFILE%"
    assert translate_full("echo hello", L, W).translated == "echo hello"


def test_batch_collects_errors():
    """Test that one failure does not stop a batch."""
    results = translate_batch(["dir", "frobnicate", "cls"], W, L)
    assert isinstance(results[0], TranslationResult)
    assert results[0].translated == "ls"
    assert isinstance(results[1], TranslateError)
    assert results[2].translated == "clear"


def test_result_serialization():
    """Test the dict and JSON forms of a result."""
    result = translate_command("dir /w", W, L)
    data = result.to_dict()
    assert data["from"] == "windows"
    assert data["to"] == "linux"
    assert data["translated"] == "ls -C"
    assert json.loads(result.to_json())["original"] == "dir /w"
    assert result.command == "ls -C"

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.translated = "ls"


if __name__ == '__main__':
    print("Running cmdx translator tests...\n")

    try:
        test_identity()
        test_native_passthrough()
        test_windows_to_linux_flags()
        test_compound()
        test_full_translation()

        print("\n" + "="*50)
        print("[SUCCESS] All tests passed!")
        print("="*50)
    except AssertionError as e:
        print(f"\n[FAIL] Test failed: {e}")
        sys.exit(1)
