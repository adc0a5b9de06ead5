"""
Error types raised by the cmdx translators.

Every error is a ``ValueError`` subclass so callers that only care about
"bad input" can catch that, while the CLI and batch helpers catch
``TranslateError`` to report the structured cause.
"""

from typing import List, Optional


class TranslateError(ValueError):
    """Base class for every translation failure."""


class EmptyCommand(TranslateError):
    """Raised when a translator receives a blank command line."""

    def __init__(self):
        super().__init__("Empty command")


class InvalidOs(TranslateError):
    """Raised when an OS name cannot be parsed."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Unknown operating system: '{text}'")


class InvalidPackageManager(TranslateError):
    """Raised when a package manager name cannot be parsed."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Unknown package manager: '{text}'")


class InvalidDistro(TranslateError):
    """Raised when a Linux distribution name cannot be parsed."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Unknown distribution: '{text}'")


class UnknownCommand(TranslateError):
    """
    No mapping exists for a command between two operating systems.

    Attributes:
        name: The command name as it appeared in the input
        suggestions: Close command names that do have a mapping
    """

    def __init__(self, name: str, from_os=None, to_os=None,
                 suggestions: Optional[List[str]] = None):
        self.name = name
        self.from_os = from_os
        self.to_os = to_os
        self.suggestions = list(suggestions or [])

        msg = f"No translation for '{name}'"
        if from_os is not None and to_os is not None:
            msg += f" from {from_os} to {to_os}"
        if self.suggestions:
            msg += f" (did you mean: {', '.join(self.suggestions)}?)"
        super().__init__(msg)


class UnresolvedPath(TranslateError):
    """A path matched no rule and is not valid on the target OS."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Cannot translate path '{path}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidCompoundSegment(TranslateError):
    """Wraps the failure of one segment of a compound command."""

    def __init__(self, index: int, segment: str, cause: TranslateError):
        self.index = index
        self.segment = segment
        self.cause = cause
        super().__init__(f"Segment {index} ('{segment}'): {cause}")


class NotPackageManagerCommand(TranslateError):
    """The leading token is not a known package manager binary."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Not a package manager command: '{command}'")


class UnsupportedOperation(TranslateError):
    """A package operation is unknown to, or unavailable in, a manager."""

    def __init__(self, operation: str, package_manager):
        self.operation = operation
        self.package_manager = package_manager
        super().__init__(
            f"Operation '{operation}' is not supported by {package_manager}"
        )
