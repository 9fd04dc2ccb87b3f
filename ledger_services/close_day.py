"""
ledger_services.close_day -- the "close and share" action.

Responsibility:
    One user action that (1) mirrors the active record if cloud sync is
    enabled, (2) locks the active day and forwards its balance (sales view
    only), (3) renders the summary text and (4) shares it.

Failure modes:
    - A sync failure or timeout does not stop the close; it is reported in
      ``CloseDayResult.sync``.
    - Errors from lock/forward or persistence propagate before anything is
      shared.
"""

from __future__ import annotations

from dataclasses import dataclass

from ledger_kernel.domain.session import ViewMode
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.services.day_transition import DayTransitionEngine, ForwardResult
from ledger_services.share import Clipboard, ShareChannel, ShareTarget, share_text
from ledger_services.summary import ledger_summary
from ledger_services.sync_service import SyncResult, SyncService

logger = get_logger("services.close_day")


@dataclass(frozen=True)
class CloseDayResult:
    text: str
    channel: ShareChannel
    sync: SyncResult | None = None
    forward: ForwardResult | None = None


class CloseDayOrchestrator:
    def __init__(
        self,
        engine: DayTransitionEngine,
        clipboard: Clipboard,
        sync_service: SyncService | None = None,
        share_target: ShareTarget | None = None,
    ):
        self.engine = engine
        self.clipboard = clipboard
        self.sync_service = sync_service
        self.share_target = share_target

    def close(self) -> CloseDayResult:
        session = self.engine.session
        store = self.engine.store

        with LogContext.bind_session(session, operation="close_day"):
            sync_result = None
            if store.cloud_sync_enabled and self.sync_service is not None:
                sync_result = self.sync_service.submit().wait()
            else:
                logger.debug("close_day_sync_skipped")

            forward = None
            if session.view_mode is ViewMode.SALES:
                forward = self.engine.lock_and_forward()

            text = ledger_summary(self.engine.ledger(), session.language)
            channel = share_text(text, self.clipboard, self.share_target)

            logger.info(
                "day_closed",
                extra={
                    "sync_status": sync_result.status.value if sync_result else None,
                    "forwarded": forward.forwarded if forward else None,
                    "channel": channel.value,
                },
            )

        return CloseDayResult(text=text, channel=channel, sync=sync_result, forward=forward)


def close_day(
    engine: DayTransitionEngine,
    clipboard: Clipboard,
    sync_service: SyncService | None = None,
    share_target: ShareTarget | None = None,
) -> CloseDayResult:
    """Convenience wrapper around ``CloseDayOrchestrator.close``."""
    return CloseDayOrchestrator(engine, clipboard, sync_service, share_target).close()
