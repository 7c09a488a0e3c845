"""Failures raised while running the platform process listing."""

from __future__ import annotations


class ListingError(RuntimeError):
    """The process listing could not be produced."""


class ProcessLaunchError(ListingError):
    """The listing command could not be started."""

    def __init__(self, command: str, cause: BaseException) -> None:
        super().__init__(f"Failed to start {command}: {cause}")
        self.command = command
        self.cause = cause


class ListingStderrError(ListingError):
    """The listing command wrote to its error stream."""


class ListingExitError(ListingError):
    def __init__(self, exit_code: int) -> None:
        super().__init__(f"process terminated with exit code: {exit_code}")
        self.exit_code = exit_code


class ListingSignalError(ListingError):
    def __init__(self, signal_name: str) -> None:
        super().__init__(f"process terminated with signal: {signal_name}")
        self.signal_name = signal_name
