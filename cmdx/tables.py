"""
Static lookup tables for command, environment-variable and script translation.

Tables are plain data declared at module level and assembled into per-OS-pair
dictionaries the first time any lookup runs.  After that they are never
mutated, so lookups need no locking.

Keys are source command names.  A key may also be a two-token "subcommand"
key (``ip addr``, ``taskkill /im``); the translator tries those first.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from cmdx.platforms import Os

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandMapping:
    """
    How one command (and its flags) translates between two systems.

    ``flag_map`` is an ordered sequence of ``(source_flag, target_flag)``
    pairs.  A target may be empty (the flag is dropped) or several
    space-separated tokens.
    """

    source_command: str
    target_command: str
    flag_map: Tuple[Tuple[str, str], ...] = ()
    arg_prefix: str = ""
    value_flags: FrozenSet[str] = field(default_factory=frozenset)

    def target_for(self, flag: str) -> Optional[str]:
        """Return the target spelling for *flag*, or None if unmapped."""
        for source, target in self.flag_map:
            if source == flag:
                return target
        return None

    @property
    def source_flags(self) -> FrozenSet[str]:
        return frozenset(source for source, _ in self.flag_map)


def _m(source: str, target: str, *flags: Tuple[str, str],
       arg_prefix: str = "", value_flags: Tuple[str, ...] = ()) -> CommandMapping:
    return CommandMapping(source, target, tuple(flags), arg_prefix,
                          frozenset(value_flags))


# ===================================================================
# Native command sets
# ===================================================================

WINDOWS_NATIVE = frozenset({
    "arp", "assoc", "attrib", "call", "cd", "certutil", "chdir", "chkdsk",
    "choice", "clip", "cls", "cmd", "color", "comp", "copy", "curl", "date",
    "del", "dir", "diskpart", "driverquery", "echo", "erase", "exit",
    "expand", "explorer", "fc", "find", "findstr", "for", "format", "ftype",
    "getmac", "goto", "gpresult", "gpupdate", "help", "hostname", "icacls",
    "if", "ipconfig", "label", "md", "mkdir", "mklink", "more", "move",
    "msiexec", "net", "netsh", "netstat", "notepad", "nslookup", "path",
    "pathping", "pause", "ping", "popd", "powershell", "prompt", "pushd",
    "pwsh", "rd", "reg", "rem", "ren", "rename", "replace", "rmdir",
    "robocopy", "route", "runas", "sc", "schtasks", "scp", "set", "setx",
    "shift", "shutdown", "sort", "ssh", "start", "subst", "systeminfo",
    "tar", "taskkill", "tasklist", "time", "timeout", "title", "tracert",
    "tree", "type", "ver", "vol", "where", "whoami", "winget", "wmic",
    "xcopy",
})

# Utilities every POSIX-style userland ships, shell builtins included.
POSIX_CORE = frozenset({
    "alias", "awk", "basename", "bash", "bg", "cal", "cat", "cd", "chgrp",
    "chmod", "chown", "clear", "cmp", "cp", "crontab", "curl", "cut", "date",
    "df", "diff", "dig", "dirname", "du", "echo", "egrep", "env", "exit",
    "export", "expr", "false", "fg", "fgrep", "file", "find", "grep",
    "gunzip", "gzip", "head", "history", "hostname", "id", "jobs", "kill",
    "killall", "less", "ln", "ls", "man", "mkdir", "more", "mount", "mv",
    "nohup", "nslookup", "passwd", "patch", "pgrep", "ping", "pkill",
    "popd", "printenv", "printf", "ps", "pushd", "pwd", "read", "readlink",
    "realpath", "reboot", "rm", "rmdir", "rsync", "scp", "sed", "set", "sh",
    "shutdown", "sleep", "sort", "source", "ssh", "stat", "su", "sudo",
    "tail", "tar", "tee", "test", "time", "top", "touch", "tr",
    "traceroute", "true", "umount", "unalias", "uname", "uniq", "unset",
    "unzip", "uptime", "vi", "wait", "wc", "which", "whereis", "whoami",
    "xargs", "zip",
})

_NATIVE_EXTRAS: Dict[Os, FrozenSet[str]] = {
    Os.LINUX: frozenset({
        "apt", "apt-get", "dnf", "free", "ip", "journalctl", "lsblk",
        "lscpu", "lspci", "lsusb", "ldd", "md5sum", "nproc", "pacman",
        "sha1sum", "sha256sum", "ss", "systemctl", "tac", "watch", "wget",
        "xdg-open", "yum", "zypper",
    }),
    Os.MACOS: frozenset({
        "caffeinate", "defaults", "diskutil", "ditto", "hdiutil", "ifconfig",
        "launchctl", "md5", "mdfind", "netstat", "networksetup", "open",
        "otool", "pbcopy", "pbpaste", "say", "shasum", "softwareupdate",
        "sw_vers", "sysctl", "vm_stat", "arp",
    }),
    Os.FREEBSD: frozenset({
        "arp", "fetch", "ifconfig", "md5", "netstat", "pkg", "sha1",
        "sha256", "sockstat", "sysctl", "vmstat",
    }),
    Os.OPENBSD: frozenset({
        "arp", "doas", "ifconfig", "md5", "netstat", "pkg_add", "sha1",
        "sha256", "sysctl", "vmstat",
    }),
    Os.NETBSD: frozenset({
        "arp", "ifconfig", "md5", "netstat", "pkgin", "sha1", "sysctl",
        "vmstat",
    }),
    Os.SOLARIS: frozenset({
        "arp", "digest", "ifconfig", "netstat", "pfexec", "pkg", "prstat",
        "svcadm", "svcs", "zfs", "zpool",
    }),
    Os.ANDROID: frozenset({
        "am", "dumpsys", "free", "getprop", "ifconfig", "input", "ip",
        "logcat", "md5sum", "netstat", "nproc", "pm", "screencap",
        "setprop", "settings", "sha1sum", "sha256sum", "svc", "toybox", "wm",
    }),
    Os.IOS: frozenset(),
}


# ===================================================================
# Windows -> POSIX
# ===================================================================

WINDOWS_TO_POSIX: List[CommandMapping] = [
    _m("dir", "ls",
       ("/w", "-C"), ("/s", "-R"), ("/b", "-1"), ("/a", "-la"),
       ("/a:h", "-a"), ("/ah", "-a"), ("/o:n", ""), ("/on", ""),
       ("/o:s", "-Sr"), ("/o:-s", "-S"), ("/o:d", "-tr"), ("/o:-d", "-t"),
       ("/p", ""), ("/q", "-l")),
    _m("copy", "cp",
       ("/y", "-f"), ("/-y", "-i"), ("/v", "-v"), ("/a", ""), ("/b", ""),
       ("/z", "")),
    _m("xcopy", "cp -r",
       ("/s", ""), ("/e", ""), ("/y", "-f"), ("/-y", "-i"), ("/i", ""),
       ("/q", ""), ("/h", ""), ("/f", "-v")),
    _m("robocopy", "rsync -a",
       ("/e", ""), ("/s", ""), ("/mir", "--delete"),
       ("/mov", "--remove-source-files"), ("/z", "--partial"),
       ("/np", ""), ("/nfl", ""), ("/ndl", "")),
    _m("move", "mv", ("/y", "-f"), ("/-y", "-i")),
    _m("del", "rm", ("/s", "-r"), ("/q", "-f"), ("/f", "-f"), ("/p", "-i")),
    _m("erase", "rm", ("/s", "-r"), ("/q", "-f"), ("/f", "-f"), ("/p", "-i")),
    _m("rd", "rm -r", ("/s", ""), ("/q", "-f")),
    _m("md", "mkdir -p"),
    _m("type", "cat"),
    _m("cls", "clear"),
    _m("findstr", "grep",
       ("/i", "-i"), ("/s", "-r"), ("/n", "-n"), ("/v", "-v"), ("/r", "-E"),
       ("/x", "-x"), ("/m", "-l"), ("/l", "-F")),
    _m("tasklist", "ps aux", ("/v", ""), ("/svc", "")),
    _m("taskkill", "kill",
       ("/f", "-9"), ("/t", ""), ("/pid", ""),
       value_flags=("/pid",)),
    _m("taskkill /im", "pkill", ("/f", "-9"), ("/t", "")),
    _m("ipconfig", "ip addr", ("/all", "")),
    _m("systeminfo", "uname -a"),
    _m("attrib", "chmod", ("/s", "-R")),
    _m("fc", "diff", ("/b", ""), ("/c", "-i"), ("/n", ""), ("/w", "-w")),
    _m("comp", "cmp"),
    _m("ren", "mv"),
    _m("rename", "mv"),
    _m("tree", "tree", ("/f", ""), ("/a", "--charset=ascii")),
    _m("where", "which"),
    _m("tracert", "traceroute",
       ("-h", "-m"), ("-w", "-w"), ("-d", "-n"),
       value_flags=("-h", "-w")),
    _m("netstat", "ss",
       ("-a", "-a"), ("-n", "-n"), ("-o", "-p"), ("-b", "-p"),
       ("-an", "-a -n"), ("-ano", "-a -n -p")),
    _m("chkdsk", "fsck", ("/f", ""), ("/r", "")),
    _m("chdir", "cd"),
    _m("start", "xdg-open"),
    _m("explorer", "xdg-open"),
    _m("ver", "uname -r"),
    _m("pause", 'read -r -p "Press Enter to continue..."'),
    _m("timeout", "sleep", ("/t", ""), ("/nobreak", ""),
       value_flags=("/t",)),
    _m("clip", "xclip -selection clipboard"),
    _m("route print", "ip route"),
    _m("getmac", "ip link", ("/v", "")),
    _m("notepad", "nano"),
]

# Per-target replacements for rows of WINDOWS_TO_POSIX.
_BSD_STYLE_FROM_WINDOWS: List[CommandMapping] = [
    _m("ipconfig", "ifconfig", ("/all", "-a")),
    _m("netstat", "netstat"),
    _m("route print", "netstat -rn"),
    _m("getmac", "ifconfig", ("/v", "")),
]

WINDOWS_TO_OS_OVERRIDES: Dict[Os, List[CommandMapping]] = {
    Os.MACOS: _BSD_STYLE_FROM_WINDOWS + [
        _m("start", "open"),
        _m("explorer", "open"),
        _m("clip", "pbcopy"),
        _m("systeminfo", "sw_vers"),
        _m("notepad", "open -e"),
    ],
    Os.FREEBSD: _BSD_STYLE_FROM_WINDOWS,
    Os.OPENBSD: _BSD_STYLE_FROM_WINDOWS,
    Os.NETBSD: _BSD_STYLE_FROM_WINDOWS,
    Os.SOLARIS: _BSD_STYLE_FROM_WINDOWS + [
        _m("tasklist", "ps -ef", ("/v", ""), ("/svc", "")),
    ],
    Os.ANDROID: [
        _m("tasklist", "ps -A", ("/v", ""), ("/svc", "")),
        _m("start", "am start"),
    ],
    Os.IOS: [
        _m("ipconfig", "ifconfig", ("/all", "-a")),
    ],
}


# ===================================================================
# POSIX -> Windows
# ===================================================================

_LS_TO_DIR = (
    ("-l", ""), ("-a", "/a"), ("-A", "/a"), ("-la", "/a"), ("-al", "/a"),
    ("-R", "/s"), ("-1", "/b"), ("-S", "/o:-s"), ("-t", "/o:-d"),
    ("-r", "/o:-n"), ("-h", ""), ("--all", "/a"), ("--recursive", "/s"),
    ("--sort=size", "/o:-s"), ("--sort=time", "/o:-d"),
)

_KILL_FLAGS = (
    ("-9", "/f"), ("-KILL", "/f"), ("-SIGKILL", "/f"),
    ("-15", ""), ("-TERM", ""), ("-SIGTERM", ""),
)

POSIX_TO_WINDOWS: List[CommandMapping] = [
    _m("ls", "dir", *_LS_TO_DIR),
    _m("cp", "xcopy",
       ("-r", "/e /i"), ("-R", "/e /i"), ("-a", "/e /i /h /k"),
       ("-f", "/y"), ("-i", "/-y"), ("-v", "/f"), ("-u", "/d")),
    _m("mv", "move", ("-f", "/y"), ("-i", "/-y"), ("-v", "")),
    _m("rm", "del",
       ("-r", "/s"), ("-R", "/s"), ("-f", "/q /f"), ("-rf", "/s /q"),
       ("-fr", "/s /q"), ("-i", "/p"), ("-v", "")),
    _m("cat", "type"),
    _m("clear", "cls"),
    _m("grep", "findstr",
       ("-i", "/i"), ("-r", "/s"), ("-R", "/s"), ("-n", "/n"), ("-v", "/v"),
       ("-E", "/r"), ("-x", "/x"), ("-l", "/m"), ("-F", "/l")),
    _m("ps", "tasklist", ("-e", ""), ("-f", ""), ("-ef", ""), ("-A", "")),
    _m("ps aux", "tasklist"),
    _m("top", "tasklist"),
    _m("kill", "taskkill", *_KILL_FLAGS, arg_prefix="/pid"),
    _m("pkill", "taskkill", *_KILL_FLAGS, arg_prefix="/im"),
    _m("killall", "taskkill", *_KILL_FLAGS, arg_prefix="/im"),
    _m("ifconfig", "ipconfig", ("-a", "/all")),
    _m("ip", "ipconfig"),
    _m("ip addr", "ipconfig"),
    _m("ip a", "ipconfig"),
    _m("ip route", "route print"),
    _m("ip link", "getmac"),
    _m("uname", "systeminfo", ("-a", ""), ("-s", ""), ("-r", ""), ("-m", "")),
    _m("env", "set"),
    _m("printenv", "set"),
    _m("export", "set"),
    _m("chmod", "attrib", ("-R", "/s")),
    _m("diff", "fc", ("-i", "/c"), ("-w", "/w"), ("-b", "/w")),
    _m("cmp", "comp"),
    _m("less", "more"),
    _m("head", "powershell Get-Content",
       ("-n", "-TotalCount"), value_flags=("-n",)),
    _m("tail", "powershell Get-Content",
       ("-n", "-Tail"), ("-f", "-Wait"), value_flags=("-n",)),
    _m("which", "where"),
    _m("whereis", "where"),
    _m("touch", "type nul >"),
    _m("traceroute", "tracert",
       ("-m", "-h"), ("-w", "-w"), ("-n", "-d"), value_flags=("-m", "-w")),
    _m("ss", "netstat",
       ("-a", "-a"), ("-n", "-n"), ("-p", "-o"), ("-t", ""), ("-u", ""),
       ("-l", "-a")),
    _m("wget", "curl -O",
       ("-O", "-o"), ("-q", "-s"), ("-c", "-C -"), value_flags=("-O",)),
    _m("df", "wmic logicaldisk get size,freespace,caption", ("-h", "")),
    _m("du", "dir /s", ("-h", ""), ("-s", "")),
    _m("free", "systeminfo", ("-h", ""), ("-m", ""), ("-g", "")),
    _m("man", "help"),
    _m("pwd", "cd"),
    _m("sleep", "timeout /t"),
    _m("history", "doskey /history"),
    _m("reboot", "shutdown /r /t 0"),
    _m("poweroff", "shutdown /s /t 0"),
    _m("nproc", "echo %NUMBER_OF_PROCESSORS%"),
    _m("unzip", "tar -xf", ("-d", "-C"), ("-q", ""), value_flags=("-d",)),
    _m("xdg-open", "start"),
    _m("lsblk", "wmic diskdrive list brief"),
]

POSIX_TO_WINDOWS_OVERRIDES: Dict[Os, List[CommandMapping]] = {
    Os.MACOS: [
        _m("open", "start"),
        _m("pbcopy", "clip"),
        _m("pbpaste", "powershell Get-Clipboard"),
        _m("sw_vers", "ver"),
    ],
    Os.SOLARIS: [
        _m("prstat", "tasklist"),
    ],
}


# ===================================================================
# POSIX <-> POSIX
# ===================================================================

def _gnu_userland(os_: Os) -> bool:
    return os_ in (Os.LINUX, Os.ANDROID)


_NETSTAT_FROM_SS = (
    ("-a", "-a"), ("-n", "-n"), ("-t", "-p tcp"), ("-u", "-p udp"),
    ("-l", ""), ("-p", ""),
)

GNU_TO_BSD: List[CommandMapping] = [
    _m("ip", "ifconfig"),
    _m("ip addr", "ifconfig"),
    _m("ip a", "ifconfig"),
    _m("ip link", "ifconfig"),
    _m("ip route", "netstat -rn"),
    _m("ss", "netstat", *_NETSTAT_FROM_SS),
    _m("md5sum", "md5"),
    _m("sha1sum", "sha1"),
    _m("sha256sum", "sha256"),
    _m("nproc", "sysctl -n hw.ncpu"),
    _m("free", "vmstat"),
    _m("tac", "tail -r"),
    _m("wget", "curl -O",
       ("-O", "-o"), ("-q", "-s"), ("-c", "-C -"), value_flags=("-O",)),
]

GNU_TO_OS_OVERRIDES: Dict[Os, List[CommandMapping]] = {
    Os.MACOS: [
        _m("free", "vm_stat"),
        _m("sha1sum", "shasum"),
        _m("sha256sum", "shasum -a 256"),
        _m("xdg-open", "open"),
        _m("lsblk", "diskutil list"),
        _m("ldd", "otool -L"),
    ],
    Os.FREEBSD: [
        _m("lsblk", "geom disk list"),
        _m("wget", "fetch", ("-O", "-o"), ("-q", "-q"), value_flags=("-O",)),
    ],
    Os.SOLARIS: [
        _m("ip", "ifconfig -a"),
        _m("ip addr", "ifconfig -a"),
        _m("ip a", "ifconfig -a"),
        _m("md5sum", "digest -a md5"),
        _m("sha1sum", "digest -a sha1"),
        _m("sha256sum", "digest -a sha256"),
        _m("nproc", "psrinfo -p"),
    ],
}

BSD_TO_GNU: List[CommandMapping] = [
    _m("ifconfig", "ip addr", ("-a", "")),
    _m("md5", "md5sum"),
    _m("sha1", "sha1sum"),
    _m("sha256", "sha256sum"),
    _m("vm_stat", "free"),
    _m("sockstat", "ss -p"),
    _m("fetch", "wget", ("-o", "-O"), ("-q", "-q"), value_flags=("-o",)),
    _m("open", "xdg-open"),
    _m("pbcopy", "xclip -selection clipboard"),
    _m("pbpaste", "xclip -selection clipboard -o"),
    _m("sw_vers", "cat /etc/os-release"),
    _m("diskutil list", "lsblk"),
    _m("otool -L", "ldd"),
    _m("mdfind", "locate"),
    _m("say", "espeak"),
    _m("shasum", "sha1sum"),
    _m("prstat", "top"),
]


# ===================================================================
# Environment variables, script extensions and shebangs
# ===================================================================

# Windows name -> Unix name.  One-to-one so the reverse table is exact.
ENV_VAR_MAP: Tuple[Tuple[str, str], ...] = (
    ("USERPROFILE", "HOME"),
    ("USERNAME", "USER"),
    ("APPDATA", "XDG_CONFIG_HOME"),
    ("LOCALAPPDATA", "XDG_DATA_HOME"),
    ("TEMP", "TMPDIR"),
    ("COMPUTERNAME", "HOSTNAME"),
    ("CD", "PWD"),
    ("COMSPEC", "SHELL"),
)

WINDOWS_SCRIPT_EXTENSIONS = (".bat", ".cmd", ".ps1")
UNIX_SCRIPT_EXTENSIONS = (".sh", ".bash")
WINDOWS_EXECUTABLE_EXTENSION = ".exe"
WINDOWS_DEFAULT_SCRIPT_EXTENSION = ".bat"

WINDOWS_DIRECTIVES = ("@echo off",)

UNIX_SHEBANGS = (
    "#!/bin/bash",
    "#!/usr/bin/env bash",
    "#!/bin/sh",
    "#!/usr/bin/env sh",
    "#!/bin/zsh",
    "#!/usr/bin/env zsh",
    "#!/system/bin/sh",
)

_DEFAULT_SHEBANG = "#!/bin/bash"
_SHEBANG_OVERRIDES: Dict[Os, str] = {
    Os.FREEBSD: "#!/bin/sh",
    Os.OPENBSD: "#!/bin/sh",
    Os.NETBSD: "#!/bin/sh",
    Os.ANDROID: "#!/system/bin/sh",
    Os.IOS: "#!/bin/sh",
}


def shebang_for(os_: Os) -> str:
    """Return the interpreter line scripts should start with on *os_*."""
    return _SHEBANG_OVERRIDES.get(os_, _DEFAULT_SHEBANG)


# ---------------------------------------------------------------------------
# Table assembly
# ---------------------------------------------------------------------------

class _Tables:
    """The assembled, read-only lookup tables."""

    def __init__(self):
        self.commands: Dict[Tuple[Os, Os], Dict[str, CommandMapping]] = {}
        self.native: Dict[Os, FrozenSet[str]] = {}
        self.env_to_unix: Dict[str, str] = dict(ENV_VAR_MAP)
        self.env_to_windows: Dict[str, str] = {
            unix: windows for windows, unix in ENV_VAR_MAP
        }

        for os_ in Os:
            if os_ is Os.WINDOWS:
                self.native[os_] = WINDOWS_NATIVE
            else:
                self.native[os_] = POSIX_CORE | _NATIVE_EXTRAS[os_]

        for src in Os:
            for dst in Os:
                if src is not dst:
                    self.commands[(src, dst)] = self._build_pair(src, dst)

    @staticmethod
    def _index(*groups: List[CommandMapping]) -> Dict[str, CommandMapping]:
        table: Dict[str, CommandMapping] = {}
        for group in groups:
            for mapping in group:
                table[mapping.source_command] = mapping
        return table

    def _build_pair(self, src: Os, dst: Os) -> Dict[str, CommandMapping]:
        if src is Os.WINDOWS:
            return self._index(WINDOWS_TO_POSIX,
                               WINDOWS_TO_OS_OVERRIDES.get(dst, []))
        if dst is Os.WINDOWS:
            return self._index(POSIX_TO_WINDOWS,
                               POSIX_TO_WINDOWS_OVERRIDES.get(src, []))
        src_gnu, dst_gnu = _gnu_userland(src), _gnu_userland(dst)
        if src_gnu and not dst_gnu:
            return self._index(GNU_TO_BSD, GNU_TO_OS_OVERRIDES.get(dst, []))
        if dst_gnu and not src_gnu:
            return self._index(BSD_TO_GNU)
        return {}


_tables: Optional[_Tables] = None
_tables_lock = threading.Lock()


def _get_tables() -> _Tables:
    global _tables
    if _tables is None:
        with _tables_lock:
            if _tables is None:
                logger.debug("Building command lookup tables")
                _tables = _Tables()
    return _tables


# ===================================================================
# Public API
# ===================================================================

def lookup_command(cmd: str, from_os: Os, to_os: Os) -> Optional[CommandMapping]:
    """
    Return the mapping for *cmd* from *from_os* to *to_os*, if any.

    *cmd* is matched exactly; callers fold Windows command names to lower
    case before calling.
    """
    if from_os is to_os:
        return None
    return _get_tables().commands[(from_os, to_os)].get(cmd)


def native_commands(os_: Os) -> FrozenSet[str]:
    """Return the set of command names considered canonical on *os_*."""
    return _get_tables().native[os_]


def available_commands(from_os: Os, to_os: Os) -> List[str]:
    """Sorted source commands that have a mapping for the OS pair."""
    if from_os is to_os:
        return []
    return sorted(_get_tables().commands[(from_os, to_os)])


def lookup_env_var(name: str, from_os: Os, to_os: Os) -> Optional[str]:
    """
    Map an environment variable name between Windows and Unix conventions.

    Windows names are matched case-insensitively.  Returns None when the
    name has no counterpart or both systems share a convention.
    """
    if from_os.is_windows == to_os.is_windows:
        return None
    tables = _get_tables()
    if from_os.is_windows:
        return tables.env_to_unix.get(name.upper())
    return tables.env_to_windows.get(name)
