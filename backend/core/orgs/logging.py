from __future__ import annotations

import logging
import re
from typing import Any


_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)+")


def mask_email(text: str) -> str:
    """Mask e-mail addresses in a string.

    Tenant e-mails are PII; no part of the address is kept in logs.
    """

    if not text:
        return text

    return _EMAIL_RE.sub("***EMAIL***", text)


class MaskEmailFilter(logging.Filter):
    """Logging filter to mask e-mail addresses in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except Exception:  # pragma: no cover
            message = str(getattr(record, "msg", ""))

        # Replace the formatted message and clear args to avoid double formatting.
        record.msg = mask_email(str(message))
        record.args = ()

        for key in ("email", "user_email"):
            if hasattr(record, key):
                value: Any = getattr(record, key)
                if isinstance(value, str):
                    setattr(record, key, mask_email(value))

        return True
