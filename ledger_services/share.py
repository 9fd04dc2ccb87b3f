"""
ledger_services.share -- hand summary text to a sharing channel.

A share target (messaging app, system share sheet) may be missing or may
fail; the text then goes to the clipboard instead.  The result says which
channel took it.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from ledger_kernel.logging_config import get_logger

logger = get_logger("services.share")


class ShareTarget(Protocol):
    def share(self, text: str) -> None: ...


class Clipboard(Protocol):
    def copy(self, text: str) -> None: ...


class MemoryClipboard:
    """Clipboard that keeps the last copied text."""

    def __init__(self) -> None:
        self.text: str | None = None

    def copy(self, text: str) -> None:
        self.text = text


class ShareChannel(str, Enum):
    SHARE_TARGET = "share_target"
    CLIPBOARD = "clipboard"


def share_text(
    text: str,
    clipboard: Clipboard,
    share_target: ShareTarget | None = None,
) -> ShareChannel:
    """Share ``text``; fall back to ``clipboard`` if there is no target or it fails."""
    if share_target is not None:
        try:
            share_target.share(text)
        except Exception:
            logger.warning("share_target_failed_using_clipboard", exc_info=True)
        else:
            logger.info("summary_shared", extra={"channel": ShareChannel.SHARE_TARGET.value})
            return ShareChannel.SHARE_TARGET

    clipboard.copy(text)
    logger.info("summary_shared", extra={"channel": ShareChannel.CLIPBOARD.value})
    return ShareChannel.CLIPBOARD
