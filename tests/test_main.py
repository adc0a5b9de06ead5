"""
Tests for the command-line front end.
"""

import io
import json

import pytest

from cmdx.main import build_parser, main


@pytest.fixture
def run(tmp_path, capsys):
    """Run main() against a throwaway config directory."""
    def _run(*argv):
        code = main(["--config-dir", str(tmp_path), *argv])
        captured = capsys.readouterr()
        return code, captured.out, captured.err
    return _run


def test_translate(run):
    """Test translating a single command."""
    code, out, _ = run("translate", "--from", "windows", "--to", "linux", "dir", "/w", "/s")
    assert code == 0
    assert out.strip() == "ls -C -R"

    code, out, _ = run("t", "--from", "linux", "--to", "windows", "ls -la && clear")
    assert out.strip() == "dir /a && cls"

    print("[OK] CLI translate test passed")


def test_translate_json_and_warnings(run):
    """Test JSON output and warnings on stderr."""
    code, out, _ = run("translate", "--json", "--from", "windows", "--to", "linux", "dir /w")
    data = json.loads(out)
    assert data["translated"] == "ls -C"
    assert data["from"] == "windows"

    code, out, err = run("translate", "--from", "windows", "--to", "linux", "dir /z")
    assert out.strip() == "ls /z"
    assert "Warning:" in err


def test_translate_error(run):
    """Test that an unknown command exits with status 1."""
    code, out, err = run("translate", "--from", "linux", "--to", "windows", "frobnicate")
    assert code == 1
    assert "No translation" in err


def test_translate_stdin_batch(run, monkeypatch):
    """Test reading several lines from stdin."""
    monkeypatch.setattr("sys.stdin", io.StringIO("dir\nfrobnicate\n\ncls\n"))
    code, out, err = run("translate", "--from", "windows", "--to", "linux", "-")
    assert code == 1
    assert out.split() == ["ls", "clear"]
    assert "frobnicate" in err


def test_path_and_env(run):
    """Test the path and env subcommands."""
    code, out, _ = run("path", "--to", "linux", r"C:\Users\john")
    assert out.strip() == "/mnt/c/Users/john"

    code, out, _ = run("env", "--from", "windows", "--to", "linux", r"%USERPROFILE%\docs")
    assert out.strip() == r"$HOME\docs"


def test_path_errors_do_not_stop_other_paths(run):
    """Test that a bad path is reported while the rest still translate."""
    code, out, err = run("path", "--from", "linux", "--to", "windows", "a|b", "/mnt/c/Users")
    assert code == 1
    assert out.strip() == r"C:\Users"
    assert "Error:" in err

    code, out, _ = run("path", "--json", "--to", "windows", "a|b", "/mnt/c/Users")
    data = json.loads(out)
    assert code == 1
    assert "error" in data[0]
    assert data[1]["path"] == r"C:\Users"


def test_pkg(run):
    """Test package manager translation from the CLI."""
    code, out, _ = run("pkg", "--to", "pacman", "sudo apt install -y vim")
    assert code == 0
    assert out.strip() == "sudo pacman -S --noconfirm vim"

    code, out, err = run("pkg", "sudo apt install -y vim")
    assert code == 2
    assert "--to" in err


def test_pkg_accepts_distro_name(run):
    """Test naming the target by distribution instead of package manager."""
    code, out, _ = run("pkg", "--to", "fedora", "sudo apt install vim")
    assert code == 0
    assert out.strip() == "sudo dnf install vim"

    code, out, _ = run("pkg", "--to", "ubuntu", "sudo pacman -S vim")
    assert code == 0
    assert out.strip() == "sudo apt install vim"


def test_script(run, tmp_path):
    """Test translating a script file."""
    script = tmp_path / "build.bat"
    script.write_text("@echo off\ncls\n")
    code, out, _ = run("script", "--from", "windows", "--to", "linux", str(script))
    assert code == 0
    assert out == "#!/bin/bash\nclear\n"


def test_ext_shebang_list_os(run):
    """Test the small informational subcommands."""
    assert run("ext", "--from", "windows", "--to", "linux", "deploy.bat")[1].strip() == "deploy.sh"
    assert run("shebang", "--from", "windows", "--to", "linux", "@echo off")[1].strip() == "#!/bin/bash"

    code, out, _ = run("list", "--from", "linux", "--to", "windows")
    assert "Commands translatable from Linux to Windows:" in out
    assert "  ls" in out.splitlines()

    code, out, _ = run("os", "--json")
    data = json.loads(out)
    assert "windows" in [row["os"] for row in data["os"]]
    assert "apt" in data["package_managers"]


def test_no_subcommand_prints_help(run):
    """Test running without a subcommand."""
    code, out, _ = run()
    assert code == 0
    assert "usage:" in out


def test_bad_os_argument():
    """Test that argparse rejects an unknown OS name."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["translate", "--to", "plan9", "ls"])
