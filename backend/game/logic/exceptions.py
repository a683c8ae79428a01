"""Typed domain exceptions.

Rule violations raised by the pure game logic (state.py, win.py) use
subclasses of GameRuleError rather than raw ValueError. Lookups along the
identity chain raise SessionError subclasses. The command router catches
both and converts them into denial replies; nothing is persisted when one
is raised.
"""


class GameRuleError(Exception):
    """Base exception for game rule violations."""


class InvalidSelectorError(GameRuleError):
    """Drop selector does not name a tile in the hand.

    Attributes:
        position: The 1-based position that was requested.
        hand_size: Number of tiles in the hand at the time of the request.

    """

    def __init__(self, *, position: int, hand_size: int) -> None:
        self.position = position
        self.hand_size = hand_size
        super().__init__(f"position {position} is outside 1..{hand_size}")


class PileExhaustedError(GameRuleError):
    """The draw pile is empty and the hand can no longer be refilled."""


class HandSizeError(GameRuleError):
    """Completion check invoked on a hand that does not hold exactly 14 tiles."""


class SessionError(Exception):
    """Base exception for resolving a message to the game it continues."""


class UnknownReferenceError(SessionError):
    """The referenced message id is not the latest message of any live game."""

    def __init__(self, reference_id: str | None) -> None:
        self.reference_id = reference_id
        super().__init__(f"no live game for reference {reference_id!r}")


class NotOwnerError(SessionError):
    """The actor is not the player who started the referenced game."""

    def __init__(self, *, reference_id: str, actor: str) -> None:
        self.reference_id = reference_id
        self.actor = actor
        super().__init__(f"{actor} does not own game {reference_id}")
