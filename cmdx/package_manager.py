"""
Package manager command translation.

Each manager spells every abstract operation one or more ways; the first
spelling is the one emitted when translating *to* that manager.  Flags are
translated through their shared meaning ("assume yes", "dry run", ...)
so any pair of managers works without a table per pair.

    sudo apt install -y vim   ->   sudo pacman -S --noconfirm vim
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from cmdx.errors import EmptyCommand, NotPackageManagerCommand, UnsupportedOperation
from cmdx.flags import is_flag, map_flags
from cmdx.lexer import Token, render_token, tokenize
from cmdx.platforms import Os, PackageManager, PackageOperation
from cmdx.tables import CommandMapping

logger = logging.getLogger(__name__)

PM = PackageManager
Op = PackageOperation

SUDO = "sudo"

# Operations that never take package arguments.  Used to break ties when
# two operations share a spelling (``xbps-install -S`` syncs, but
# ``xbps-install -S vim`` installs).
_NO_ARG_OPERATIONS = frozenset({Op.UPDATE, Op.LIST, Op.CLEAN})


# ===================================================================
# Operation spellings (first entry is canonical)
# ===================================================================

OPERATIONS: Dict[PackageManager, Dict[PackageOperation, Tuple[str, ...]]] = {
    PM.APT: {
        Op.INSTALL: ("apt install", "apt-get install", "aptitude install"),
        Op.REMOVE: ("apt remove", "apt-get remove", "apt purge", "apt-get purge",
                    "aptitude remove", "aptitude purge"),
        Op.UPDATE: ("apt update", "apt-get update", "aptitude update"),
        Op.UPGRADE: ("apt upgrade", "apt-get upgrade", "apt full-upgrade",
                     "apt-get dist-upgrade", "aptitude upgrade",
                     "aptitude safe-upgrade", "aptitude full-upgrade"),
        Op.SEARCH: ("apt search", "apt-cache search", "aptitude search"),
        Op.INFO: ("apt show", "apt-cache show", "apt-cache policy", "aptitude show"),
        Op.LIST: ("apt list --installed", "apt list"),
        Op.CLEAN: ("apt clean", "apt-get clean", "apt autoclean",
                   "apt-get autoclean", "aptitude clean"),
        Op.AUTOREMOVE: ("apt autoremove", "apt-get autoremove"),
    },
    PM.YUM: {
        Op.INSTALL: ("yum install", "yum localinstall"),
        Op.REMOVE: ("yum remove", "yum erase"),
        Op.UPDATE: ("yum check-update", "yum makecache"),
        Op.UPGRADE: ("yum update", "yum upgrade"),
        Op.SEARCH: ("yum search",),
        Op.INFO: ("yum info",),
        Op.LIST: ("yum list installed", "yum list"),
        Op.CLEAN: ("yum clean all", "yum clean"),
        Op.AUTOREMOVE: ("yum autoremove",),
    },
    PM.DNF: {
        Op.INSTALL: ("dnf install",),
        Op.REMOVE: ("dnf remove", "dnf erase"),
        Op.UPDATE: ("dnf check-update", "dnf makecache"),
        Op.UPGRADE: ("dnf upgrade", "dnf update", "dnf distro-sync"),
        Op.SEARCH: ("dnf search",),
        Op.INFO: ("dnf info",),
        Op.LIST: ("dnf list installed", "dnf list --installed", "dnf list"),
        Op.CLEAN: ("dnf clean all", "dnf clean"),
        Op.AUTOREMOVE: ("dnf autoremove",),
    },
    PM.PACMAN: {
        Op.INSTALL: ("pacman -S",),
        Op.REMOVE: ("pacman -R", "pacman -Rs", "pacman -Rn", "pacman -Rns"),
        Op.UPDATE: ("pacman -Sy",),
        Op.UPGRADE: ("pacman -Syu", "pacman -Syyu", "pacman -Su"),
        Op.SEARCH: ("pacman -Ss",),
        Op.INFO: ("pacman -Si", "pacman -Qi"),
        Op.LIST: ("pacman -Q", "pacman -Qe"),
        Op.CLEAN: ("pacman -Sc", "pacman -Scc"),
        Op.AUTOREMOVE: ("pacman -Rns $(pacman -Qdtq)",),
    },
    PM.ZYPPER: {
        Op.INSTALL: ("zypper install", "zypper in"),
        Op.REMOVE: ("zypper remove", "zypper rm"),
        Op.UPDATE: ("zypper refresh", "zypper ref"),
        Op.UPGRADE: ("zypper update", "zypper up", "zypper dist-upgrade", "zypper dup"),
        Op.SEARCH: ("zypper search", "zypper se"),
        Op.INFO: ("zypper info", "zypper if"),
        Op.LIST: ("zypper search --installed-only", "zypper se -i",
                  "zypper packages --installed-only"),
        Op.CLEAN: ("zypper clean", "zypper cc"),
        Op.AUTOREMOVE: ("zypper remove --clean-deps", "zypper rm -u"),
    },
    PM.APK: {
        Op.INSTALL: ("apk add",),
        Op.REMOVE: ("apk del",),
        Op.UPDATE: ("apk update",),
        Op.UPGRADE: ("apk upgrade",),
        Op.SEARCH: ("apk search",),
        Op.INFO: ("apk info",),
        Op.LIST: ("apk list --installed", "apk list -I"),
        Op.CLEAN: ("apk cache clean",),
    },
    PM.EMERGE: {
        Op.INSTALL: ("emerge", "emerge --ask", "emerge -a", "emerge -av"),
        Op.REMOVE: ("emerge --unmerge", "emerge -C", "emerge --deselect"),
        Op.UPDATE: ("emerge --sync",),
        Op.UPGRADE: ("emerge --update --deep --newuse @world", "emerge -uDN @world",
                     "emerge -uDU @world", "emerge --update @world", "emerge -u @world"),
        Op.SEARCH: ("emerge --search", "emerge -s"),
        Op.INFO: ("emerge --info",),
        Op.LIST: ("qlist -I",),
        Op.CLEAN: ("eclean distfiles", "eclean packages"),
        Op.AUTOREMOVE: ("emerge --depclean", "emerge -c"),
    },
    PM.XBPS: {
        Op.INSTALL: ("xbps-install -S", "xbps-install"),
        Op.REMOVE: ("xbps-remove", "xbps-remove -R"),
        Op.UPDATE: ("xbps-install -S",),
        Op.UPGRADE: ("xbps-install -Su",),
        Op.SEARCH: ("xbps-query -Rs",),
        Op.INFO: ("xbps-query -RS", "xbps-query -R"),
        Op.LIST: ("xbps-query -l",),
        Op.CLEAN: ("xbps-remove -O",),
        Op.AUTOREMOVE: ("xbps-remove -o",),
    },
    PM.NIX: {
        Op.INSTALL: ("nix-env -i", "nix-env -iA", "nix-env --install", "nix profile install"),
        Op.REMOVE: ("nix-env -e", "nix-env --uninstall", "nix profile remove"),
        Op.UPDATE: ("nix-channel --update",),
        Op.UPGRADE: ("nix-env -u", "nix-env --upgrade", "nix profile upgrade"),
        Op.SEARCH: ("nix search nixpkgs", "nix search"),
        Op.INFO: ("nix-env -qa --description",),
        Op.LIST: ("nix-env -q", "nix-env --query", "nix profile list"),
        Op.CLEAN: ("nix-collect-garbage",),
        Op.AUTOREMOVE: ("nix-collect-garbage -d",),
    },
}


# ===================================================================
# Flags by meaning
# ===================================================================

@dataclass(frozen=True)
class FlagMeaning:
    """
    One behaviour expressed by a flag across managers.

    ``spellings`` maps a manager to its flags for the behaviour, first one
    preferred.  An empty tuple means the manager behaves that way already,
    so the flag is dropped.  A missing manager has no equivalent.
    """

    name: str
    spellings: Dict[PackageManager, Tuple[str, ...]]
    operations: Optional[FrozenSet[PackageOperation]] = None

    def applies_to(self, op: PackageOperation) -> bool:
        return self.operations is None or op in self.operations


FLAG_MEANINGS: List[FlagMeaning] = [
    FlagMeaning("assume-yes", {
        PM.APT: ("-y", "--yes", "--assume-yes"),
        PM.YUM: ("-y", "--assumeyes"),
        PM.DNF: ("-y", "--assumeyes"),
        PM.PACMAN: ("--noconfirm",),
        PM.ZYPPER: ("-y", "--no-confirm"),
        PM.APK: (),
        PM.EMERGE: (),
        PM.XBPS: ("-y", "--yes"),
        PM.NIX: (),
    }),
    FlagMeaning("quiet", {
        PM.APT: ("-q", "--quiet"),
        PM.YUM: ("-q", "--quiet"),
        PM.DNF: ("-q", "--quiet"),
        PM.PACMAN: ("-q", "--quiet"),
        PM.ZYPPER: ("-q", "--quiet"),
        PM.APK: ("-q", "--quiet"),
        PM.EMERGE: ("-q", "--quiet"),
        PM.NIX: ("--quiet",),
    }),
    FlagMeaning("verbose", {
        PM.YUM: ("-v", "--verbose"),
        PM.DNF: ("-v", "--verbose"),
        PM.PACMAN: ("-v", "--verbose"),
        PM.ZYPPER: ("-v", "--verbose"),
        PM.APK: ("-v", "--verbose"),
        PM.EMERGE: ("-v", "--verbose"),
        PM.XBPS: ("-v", "--verbose"),
        PM.NIX: ("-v", "--verbose"),
    }),
    FlagMeaning("reinstall", {
        PM.APT: ("--reinstall",),
        PM.PACMAN: (),
        PM.ZYPPER: ("-f", "--force"),
        PM.XBPS: ("-f", "--force"),
    }, frozenset({Op.INSTALL})),
    FlagMeaning("no-recommends", {
        PM.APT: ("--no-install-recommends",),
        PM.YUM: ("--setopt=install_weak_deps=False",),
        PM.DNF: ("--setopt=install_weak_deps=False",),
        PM.PACMAN: (),
        PM.ZYPPER: ("--no-recommends",),
        PM.APK: (),
        PM.XBPS: (),
    }, frozenset({Op.INSTALL})),
    FlagMeaning("purge", {
        PM.APT: ("--purge",),
        PM.PACMAN: ("-n", "--nosave"),
    }, frozenset({Op.REMOVE})),
    FlagMeaning("download-only", {
        PM.APT: ("-d", "--download-only"),
        PM.YUM: ("--downloadonly",),
        PM.DNF: ("--downloadonly",),
        PM.PACMAN: ("-w", "--downloadonly"),
        PM.ZYPPER: ("-d", "--download-only"),
        PM.EMERGE: ("-f", "--fetchonly"),
        PM.XBPS: ("-D", "--download-only"),
    }, frozenset({Op.INSTALL, Op.UPGRADE})),
    FlagMeaning("dry-run", {
        PM.APT: ("-s", "--simulate", "--dry-run"),
        PM.YUM: ("--assumeno",),
        PM.DNF: ("--assumeno",),
        PM.PACMAN: ("-p", "--print"),
        PM.ZYPPER: ("-D", "--dry-run"),
        PM.APK: ("-s", "--simulate"),
        PM.EMERGE: ("-p", "--pretend"),
        PM.XBPS: ("-n", "--dry-run"),
    }),
]


# ===================================================================
# Lookups
# ===================================================================

def lookup_package_command(op: PackageOperation, from_pm: PackageManager,
                           to_pm: PackageManager) -> Optional[CommandMapping]:
    """
    Build the mapping for *op* between two package managers.

    Returns None when either manager has no spelling for the operation.
    """
    source = OPERATIONS[from_pm].get(op)
    target = OPERATIONS[to_pm].get(op)
    if not source or not target:
        return None

    pairs: List[Tuple[str, str]] = []
    for meaning in FLAG_MEANINGS:
        if not meaning.applies_to(op) or to_pm not in meaning.spellings:
            continue
        target_flags = meaning.spellings[to_pm]
        for flag in meaning.spellings.get(from_pm, ()):
            pairs.append((flag, target_flags[0] if target_flags else ""))
    return CommandMapping(source[0], target[0], tuple(pairs))


def detect_package_manager(command: str) -> Optional[PackageManager]:
    """Return the manager whose binary starts *command*, skipping ``sudo``."""
    words = command.split()
    if words and words[0] == SUDO:
        words = words[1:]
    if not words:
        return None
    return PackageManager.from_binary(words[0])


def detect_operation(pm: PackageManager, words: List[str]
                     ) -> Optional[Tuple[PackageOperation, int]]:
    """
    Identify the operation spelled at the start of *words*.

    The longest matching spelling wins.  Between spellings of equal
    length, an operation whose argument expectations fit the remaining
    words is preferred.

    Returns:
        Tuple of (operation, number of words consumed), or None
    """
    candidates = []
    for op, spellings in OPERATIONS[pm].items():
        for spelling in spellings:
            parts = spelling.split()
            if words[:len(parts)] != parts:
                continue
            remaining = [w for w in words[len(parts):] if not w.startswith("-")]
            fits = (op in _NO_ARG_OPERATIONS) == (not remaining)
            candidates.append((len(parts), fits, op))
    if not candidates:
        return None
    length, _, op = max(candidates, key=lambda c: (c[0], c[1]))
    return op, length


# ===================================================================
# Translation
# ===================================================================

@dataclass(frozen=True)
class PackageTranslationResult:
    """The outcome of translating one package manager command."""

    original: str
    translated: str
    from_pm: PackageManager
    to_pm: PackageManager
    operation: Optional[PackageOperation] = None
    had_unmapped_flags: bool = False
    warnings: Tuple[str, ...] = ()

    @property
    def command(self) -> str:
        return self.translated

    @property
    def requires_sudo(self) -> bool:
        return self.operation is not None and self.operation.requires_sudo

    def to_dict(self) -> dict:
        return {
            "original": self.original,
            "translated": self.translated,
            "from": self.from_pm.value,
            "to": self.to_pm.value,
            "operation": self.operation.value if self.operation else None,
            "requires_sudo": self.requires_sudo,
            "had_unmapped_flags": self.had_unmapped_flags,
            "warnings": list(self.warnings),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def translate_package_command(command: str, from_pm: PackageManager,
                              to_pm: PackageManager) -> PackageTranslationResult:
    """
    Translate a package manager invocation to another manager.

    A leading ``sudo`` is kept in front of the result.

    Raises:
        EmptyCommand: if *command* is blank
        NotPackageManagerCommand: if it does not start with a known binary
        UnsupportedOperation: if the operation is unknown to the source or
            has no equivalent in the target
    """
    if not command or not command.strip():
        raise EmptyCommand()
    if from_pm is to_pm:
        return PackageTranslationResult(command, command, from_pm, to_pm)

    tokens = tokenize(command)
    prefix: List[str] = []
    if tokens[0].text == SUDO:
        prefix.append(SUDO)
        tokens = tokens[1:]
    if not tokens:
        raise EmptyCommand()

    warnings: List[str] = []
    binary = tokens[0].text
    detected = PackageManager.from_binary(binary)
    if detected is None:
        raise NotPackageManagerCommand(binary)
    if detected is not from_pm:
        warnings.append(
            f"Command uses {detected} but the source was given as {from_pm}; "
            f"translating as {detected}"
        )

    words = [token.text for token in tokens]
    found = detect_operation(detected, words)
    if found is None:
        verb = words[1] if len(words) > 1 else binary
        raise UnsupportedOperation(verb, detected)
    op, consumed = found

    mapping = lookup_package_command(op, detected, to_pm)
    if mapping is None:
        raise UnsupportedOperation(op.value, to_pm)

    source_flags: List[str] = []
    packages: List[Token] = []
    for token in tokens[consumed:]:
        if token.quoted or not is_flag(mapping, token.text, windows_source=False):
            packages.append(token)
        else:
            source_flags.append(token.text)

    mapped = map_flags(mapping, source_flags)
    for flag in mapped.unmapped:
        warnings.append(
            f"Flag '{flag}' has no direct equivalent in {to_pm} for {op} operation"
        )

    # Package names follow POSIX quoting on every manager.
    pieces = prefix + [mapping.target_command] + [str(flag) for flag in mapped.flags]
    pieces += [render_token(token, Os.LINUX) for token in packages]
    translated = " ".join(pieces)
    logger.debug("%s -> %s (%s)", command, translated, op)

    return PackageTranslationResult(
        original=command,
        translated=translated,
        from_pm=from_pm,
        to_pm=to_pm,
        operation=op,
        had_unmapped_flags=bool(mapped.unmapped),
        warnings=tuple(warnings),
    )


def translate_package_command_auto(command: str, to_pm: PackageManager
                                   ) -> PackageTranslationResult:
    """
    Translate *command*, inferring the source manager from its binary.

    Raises:
        NotPackageManagerCommand: if no manager owns the leading binary
    """
    if not command or not command.strip():
        raise EmptyCommand()
    from_pm = detect_package_manager(command)
    if from_pm is None:
        words = command.split()
        binary = words[1] if words[0] == SUDO and len(words) > 1 else words[0]
        raise NotPackageManagerCommand(binary)
    return translate_package_command(command, from_pm, to_pm)
