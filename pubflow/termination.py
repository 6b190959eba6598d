"""Rollback on interrupt.

While a release runs, SIGINT and SIGTERM are routed through a
TerminationHandler that looks at the publish status at the moment of the
signal and rolls back only when publishing failed. A signal that lands
while a rollback is already running does not cut it short: the exit is
deferred until the handler's block is left.
"""

from __future__ import annotations

import signal
from types import FrameType, TracebackType
from typing import Any

from .models import PublishStatus, ReleaseContext
from .rollback import RollbackGuard

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class TerminationHandler:
    """Context manager that installs the release signal handlers.

    Args:
        ctx: The context of the running release.
        rollback: The run's rollback guard.
        preview: In preview mode nothing was changed, so nothing is undone.

    Attributes:
        exit_code: Exit status requested by a signal that arrived during a
            rollback, raised as SystemExit when the block is left.
    """

    def __init__(
        self, ctx: ReleaseContext, rollback: RollbackGuard[Any], *, preview: bool
    ) -> None:
        self.ctx = ctx
        self.rollback = rollback
        self.preview = preview
        self.exit_code: int | None = None
        self._handled = False
        self._previous: dict[int, Any] = {}

    def __enter__(self) -> TerminationHandler:
        for sig in HANDLED_SIGNALS:
            self._previous[sig] = signal.getsignal(sig)
            signal.signal(sig, self._on_signal)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler)
        self._previous.clear()
        if self.exit_code is not None:
            raise SystemExit(self.exit_code)

    def terminate(self) -> bool:
        """Decide what to do about an abnormal termination.

        Only the first call acts; later calls return False.

        Returns:
            True if a rollback was run.
        """
        if self._handled:
            return False
        self._handled = True

        if self.preview:
            return False
        if self.ctx.publish_status is PublishStatus.FAILED:
            self.rollback()
            return True
        if self.ctx.publish_status is not PublishStatus.SUCCESS:
            print("\nAborted!")
        return False

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        self.terminate()
        code = 128 + signum
        if self.rollback.in_progress:
            # Raising here would unwind the rollback half way through
            self.exit_code = code
            return
        raise SystemExit(code)
