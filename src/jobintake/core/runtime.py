from __future__ import annotations

from jobintake.config import get_settings
from jobintake.core.inbox import ExtensionInbox

_INBOX: ExtensionInbox | None = None


def get_inbox() -> ExtensionInbox:
    global _INBOX
    if _INBOX is None:
        settings = get_settings()
        _INBOX = ExtensionInbox(max_items=settings.inbox_max_items, ttl_sec=settings.inbox_ttl_sec)
    return _INBOX
