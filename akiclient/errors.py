"""Exceptions raised by the Akinator clients."""


class AkinatorError(Exception):
    """Base class for every error raised by akiclient."""

    def __init__(self, message, operation=None):
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self):
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class TransportError(AkinatorError):
    """The request never produced a response (connection error, timeout)."""


class ProtocolError(AkinatorError):
    """The response did not have the shape the client expects."""


class StateError(AkinatorError):
    """The operation is not valid for the current session state."""


class NoGuessError(AkinatorError):
    """The service has no guess with a non-zero probability yet."""


class InvalidLanguageError(AkinatorError):
    pass
