"""
Custom exceptions shared by all layers.

Everything derives from GameError, so callers (presentation layer, tests) can catch a single top-level exception.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong while playing a game."""


# --- MOVE REJECTIONS (recoverable, the game state stays unchanged) ---
class MoveRejectedError(GameError):
    """A proposed move was not accepted by the rules engine."""

    reason: str = "move rejected"


class IllegalMoveError(MoveRejectedError):
    """Move does not follow the movement / path rules of the piece."""

    reason = "illegal move"


class SelfCheckError(MoveRejectedError):
    """Move follows the movement rules, but would leave your own king under attack."""

    reason = "would put your king in check"


class NoOpMoveError(MoveRejectedError):
    """Source and destination are the same square. The presentation layer treats this as a deselect."""

    reason = "no move made"


class OutOfBoundsError(MoveRejectedError):
    """A supplied square does not lie on the board."""

    reason = "square out of bounds"


# --- GAME STATE ---
class GameStateError(GameError):
    """Operation is not allowed in the current state of the game."""


class GameOverError(GameStateError, MoveRejectedError):
    """The game already ended (checkmate or king captured). Reset before playing on."""

    reason = "game is over"


# --- BOUNDARY / SETUP ---
class InvalidRequestError(GameError):
    """Request data could not be validated. Raised from within the pydantic validators and propagates as-is."""


class InvalidFENError(GameError):
    """Board placement string cannot be parsed."""


class ConfigurationError(GameError):
    """Settings could not be loaded."""
