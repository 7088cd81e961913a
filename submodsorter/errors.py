from __future__ import annotations

from pathlib import Path


class SubModSorterError(Exception):
    """Base class for every failure raised by the load-order tooling."""


class DiscoveryIncomplete(SubModSorterError):
    """The game installation path is unknown or does not exist."""


class OfficialFilesMissing(SubModSorterError):
    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__("Game files are missing - please re-install the game")


class ScanFailure(SubModSorterError):
    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class ParseInvalid(SubModSorterError, ValueError):
    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = message
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class PreferencesNotFound(SubModSorterError, FileNotFoundError):
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Launcher data not found: {self.path}")


class UserCancelled(SubModSorterError):
    """The directory walk was interrupted by the user."""


__all__ = [
    "SubModSorterError",
    "DiscoveryIncomplete",
    "OfficialFilesMissing",
    "ScanFailure",
    "ParseInvalid",
    "PreferencesNotFound",
    "UserCancelled",
]
