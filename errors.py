"""
Rejections raised while handling a veto action.

Every VetoError is recoverable: it short-circuits the current action before
any state is mutated and its ``message`` is shown to the offending user only.
"""
from typing import Optional


class VetoError(Exception):
    """Base class for user-facing rejections."""

    message = "❌ That action can't be done right now."

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class SessionAlreadyActive(VetoError):
    message = (
        "❌ A veto session is already in progress in this channel. "
        "Please finish it or use `/endveto` to cancel it."
    )


class NoActiveSession(VetoError):
    message = "❌ There is no active veto session in this channel."


class NotYourTurn(VetoError):
    message = "❌ It's not your turn!"


class InvalidOpponent(VetoError):
    message = "❌ Invalid opponent."


class InvalidMap(VetoError):
    message = "❌ That map is no longer available."


class InvalidSide(VetoError):
    message = "❌ That side is not a valid choice."


class InvalidFormat(VetoError):
    message = "❌ Unknown match format."


class FormatAlreadyChosen(VetoError):
    message = "❌ The match format has already been chosen."


class VetoStateError(RuntimeError):
    """Session data is inconsistent; this is a bug, not a user mistake."""
