"""Exceptions raised while seeding an OMERO server."""

from typing import Optional


class SeedError(Exception):
    """Base class for all fatal seeding errors."""


class PreflightError(SeedError):
    """The container is missing the OMERO CLI or the image directory."""


class ServerNotReady(SeedError):
    """OMERO did not accept sessions within the readiness budget."""


class CommandError(SeedError):
    """A command exited non-zero or printed something we could not use."""

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        exit_status: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command
        self.exit_status = exit_status
        self.stdout = stdout
        self.stderr = stderr
