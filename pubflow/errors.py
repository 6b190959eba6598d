"""Exception types raised by pubflow.

Resolver errors surface before any pipeline step runs. Step failures are
wrapped in StepExecutionError with the name of the failing step. Rollback
problems never raise; they are reported as RollbackWarning.
"""

from __future__ import annotations


class PubflowError(Exception):
    """Base class for all pubflow errors."""


class InvalidIncrement(PubflowError, ValueError):
    """The increment is neither a known kind nor a valid, greater version."""


class InvalidVersionFormat(InvalidIncrement):
    """A version string is not a valid semantic version."""


class VersionNotGreater(InvalidIncrement):
    """The resolved version is not strictly greater than the current one."""


class ConfigError(PubflowError):
    """pyproject.toml or [tool.pubflow] is missing or invalid."""


class PreflightError(PubflowError):
    """A prerequisite or repository-state check failed."""


class CommandError(PubflowError):
    """An external command exited with a non-zero status.

    Attributes:
        cmd: The command and its arguments.
        returncode: Exit status of the process.
        stderr: Captured error output, empty when output was streamed.
    """

    def __init__(self, cmd: tuple[str, ...], returncode: int, stderr: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command '{' '.join(cmd)}' exited with status {returncode}"
        if stderr:
            message += f":\n{stderr}"
        super().__init__(message)


class StepExecutionError(PubflowError):
    """A pipeline step failed.

    The underlying collaborator failure is chained as __cause__.

    Attributes:
        step: Name of the step that failed.
        rolled_back: True when a rollback was attempted before raising.
    """

    def __init__(self, step: str, message: str, *, rolled_back: bool = False) -> None:
        self.step = step
        self.rolled_back = rolled_back
        super().__init__(message)


class RollbackWarning(UserWarning):
    """Rollback could not restore the previous state."""
