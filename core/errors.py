"""Exceptions raised by the pursuit game engine."""


class GameNotReadyError(RuntimeError):
    """Raised when a query needs a complete roster but players are missing."""

    pass


class UnknownPlayerError(KeyError):
    """Raised when a colour is queried that has not joined the game."""

    pass
