from __future__ import annotations


class TutorialValidationError(ValueError):
    """A required request field is missing or empty."""


def error_message(exc: BaseException, fallback: str) -> str:
    """Message carried by exc, or the operation's fallback when it has none."""
    msg = str(exc).strip() if exc is not None else ""
    return msg or fallback
