"""
Operating systems and package managers known to cmdx.

Both are closed enumerations; every lookup table is keyed by these members,
so adding a new OS means adding a member here and its rows in the tables.
"""

import os
import sys
import logging
import platform
from enum import Enum
from typing import Dict, List, Tuple

from cmdx.errors import InvalidDistro, InvalidOs, InvalidPackageManager

logger = logging.getLogger(__name__)


class Os(Enum):
    """A target or source operating system."""
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    FREEBSD = "freebsd"
    OPENBSD = "openbsd"
    NETBSD = "netbsd"
    SOLARIS = "solaris"
    ANDROID = "android"
    IOS = "ios"

    def __str__(self) -> str:
        return _OS_DISPLAY[self]

    @property
    def display_name(self) -> str:
        return _OS_DISPLAY[self]

    @property
    def is_windows(self) -> bool:
        return self is Os.WINDOWS

    @property
    def is_unix_like(self) -> bool:
        """True for systems with a conventional Unix userland (iOS is not)."""
        return self in _UNIX_LIKE

    @property
    def is_bsd(self) -> bool:
        """True for BSD-derived systems, macOS included."""
        return self in _BSD

    @classmethod
    def all(cls) -> List["Os"]:
        return list(cls)

    @classmethod
    def parse(cls, text: str) -> "Os":
        """
        Parse an OS name or common alias, case-insensitively.

        Raises:
            InvalidOs: if *text* names no known system
        """
        key = (text or "").strip().lower()
        if key in _OS_ALIASES:
            return _OS_ALIASES[key]
        for member in cls:
            if key == member.value:
                return member
        raise InvalidOs(text)


_OS_DISPLAY: Dict[Os, str] = {
    Os.WINDOWS: "Windows",
    Os.LINUX: "Linux",
    Os.MACOS: "macOS",
    Os.FREEBSD: "FreeBSD",
    Os.OPENBSD: "OpenBSD",
    Os.NETBSD: "NetBSD",
    Os.SOLARIS: "Solaris",
    Os.ANDROID: "Android",
    Os.IOS: "iOS",
}

_UNIX_LIKE = frozenset({
    Os.LINUX, Os.MACOS, Os.FREEBSD, Os.OPENBSD, Os.NETBSD,
    Os.SOLARIS, Os.ANDROID,
})

_BSD = frozenset({Os.FREEBSD, Os.OPENBSD, Os.NETBSD, Os.MACOS})

_OS_ALIASES: Dict[str, Os] = {
    "win": Os.WINDOWS,
    "win32": Os.WINDOWS,
    "win64": Os.WINDOWS,
    "gnu/linux": Os.LINUX,
    "darwin": Os.MACOS,
    "osx": Os.MACOS,
    "mac": Os.MACOS,
    "sunos": Os.SOLARIS,
}


class PackageOperation(Enum):
    """An abstract package manager action."""
    INSTALL = "install"
    REMOVE = "remove"
    UPDATE = "update"
    UPGRADE = "upgrade"
    SEARCH = "search"
    INFO = "info"
    LIST = "list"
    CLEAN = "clean"
    AUTOREMOVE = "autoremove"

    def __str__(self) -> str:
        return self.value

    @property
    def requires_sudo(self) -> bool:
        return self not in (PackageOperation.SEARCH,
                            PackageOperation.INFO,
                            PackageOperation.LIST)


class PackageManager(Enum):
    """A Linux (or Linux-style) package manager."""
    APT = "apt"
    YUM = "yum"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    APK = "apk"
    EMERGE = "emerge"
    XBPS = "xbps"
    NIX = "nix"

    def __str__(self) -> str:
        return self.value

    @property
    def binaries(self) -> Tuple[str, ...]:
        """Executable names that identify this package manager."""
        return _PM_BINARIES[self]

    @classmethod
    def all(cls) -> List["PackageManager"]:
        return list(cls)

    @classmethod
    def parse(cls, text: str) -> "PackageManager":
        """
        Parse a package manager name, one of its binary names, or the
        name of a distribution that uses it (``ubuntu`` -> apt).

        Raises:
            InvalidPackageManager: if nothing matches
        """
        key = (text or "").strip().lower()
        for member in cls:
            if key == member.value or key in member.binaries:
                return member
        try:
            return Distro.parse(key).package_manager
        except InvalidDistro:
            raise InvalidPackageManager(text)

    @classmethod
    def from_binary(cls, binary: str):
        """Return the manager owning *binary*, or None."""
        name = binary.rsplit("/", 1)[-1]
        for member in cls:
            if name in member.binaries:
                return member
        return None


_PM_BINARIES: Dict[PackageManager, Tuple[str, ...]] = {
    PackageManager.APT: ("apt", "apt-get", "aptitude", "apt-cache"),
    PackageManager.YUM: ("yum",),
    PackageManager.DNF: ("dnf",),
    PackageManager.PACMAN: ("pacman",),
    PackageManager.ZYPPER: ("zypper",),
    PackageManager.APK: ("apk",),
    PackageManager.EMERGE: ("emerge", "eclean", "qlist"),
    PackageManager.XBPS: ("xbps-install", "xbps-remove", "xbps-query"),
    PackageManager.NIX: ("nix-env", "nix-channel", "nix-collect-garbage", "nix"),
}


class Distro(Enum):
    """A Linux distribution, identified by the package manager it ships."""
    DEBIAN = "debian"
    UBUNTU = "ubuntu"
    RHEL = "rhel"
    CENTOS = "centos"
    FEDORA = "fedora"
    ARCH = "arch"
    MANJARO = "manjaro"
    OPENSUSE = "opensuse"
    ALPINE = "alpine"
    GENTOO = "gentoo"
    VOID = "void"
    NIXOS = "nixos"

    def __str__(self) -> str:
        return _DISTRO_DISPLAY[self]

    @property
    def package_manager(self) -> PackageManager:
        return _DISTRO_PM[self]

    @classmethod
    def all(cls) -> List["Distro"]:
        return list(cls)

    @classmethod
    def parse(cls, text: str) -> "Distro":
        """
        Parse a distribution name or alias, case-insensitively.

        Raises:
            InvalidDistro: if *text* names no known distribution
        """
        key = (text or "").strip().lower()
        if key in _DISTRO_ALIASES:
            return _DISTRO_ALIASES[key]
        for member in cls:
            if key == member.value:
                return member
        raise InvalidDistro(text)


_DISTRO_DISPLAY: Dict[Distro, str] = {
    Distro.DEBIAN: "Debian",
    Distro.UBUNTU: "Ubuntu",
    Distro.RHEL: "RHEL",
    Distro.CENTOS: "CentOS",
    Distro.FEDORA: "Fedora",
    Distro.ARCH: "Arch",
    Distro.MANJARO: "Manjaro",
    Distro.OPENSUSE: "openSUSE",
    Distro.ALPINE: "Alpine",
    Distro.GENTOO: "Gentoo",
    Distro.VOID: "Void",
    Distro.NIXOS: "NixOS",
}

_DISTRO_ALIASES: Dict[str, Distro] = {
    "redhat": Distro.RHEL,
    "red hat": Distro.RHEL,
    "archlinux": Distro.ARCH,
    "suse": Distro.OPENSUSE,
}

_DISTRO_PM: Dict[Distro, PackageManager] = {
    Distro.DEBIAN: PackageManager.APT,
    Distro.UBUNTU: PackageManager.APT,
    Distro.RHEL: PackageManager.YUM,
    Distro.CENTOS: PackageManager.YUM,
    Distro.FEDORA: PackageManager.DNF,
    Distro.ARCH: PackageManager.PACMAN,
    Distro.MANJARO: PackageManager.PACMAN,
    Distro.OPENSUSE: PackageManager.ZYPPER,
    Distro.ALPINE: PackageManager.APK,
    Distro.GENTOO: PackageManager.EMERGE,
    Distro.VOID: PackageManager.XBPS,
    Distro.NIXOS: PackageManager.NIX,
}


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

def _is_android() -> bool:
    return "ANDROID_ROOT" in os.environ or os.path.exists("/system/build.prop")


def detect_os() -> Os:
    """Detect the operating system this process is running on."""
    if sys.platform == "ios":
        return Os.IOS
    if sys.platform == "android":
        return Os.ANDROID

    system = platform.system()
    if system == "Windows" or system.startswith(("CYGWIN", "MSYS")):
        detected = Os.WINDOWS
    elif system == "Darwin":
        detected = Os.MACOS
    elif system == "Linux":
        detected = Os.ANDROID if _is_android() else Os.LINUX
    elif system == "FreeBSD":
        detected = Os.FREEBSD
    elif system == "OpenBSD":
        detected = Os.OPENBSD
    elif system == "NetBSD":
        detected = Os.NETBSD
    elif system == "SunOS":
        detected = Os.SOLARIS
    else:
        logger.debug("Unrecognised platform %r, assuming Linux", system)
        detected = Os.LINUX
    return detected


def current_os() -> Os:
    """Return the detected OS, computed once per process."""
    if current_os._cached is None:
        current_os._cached = detect_os()
    return current_os._cached


current_os._cached = None  # type: ignore[attr-defined]
