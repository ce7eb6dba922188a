from .base import GameFactory, GuessingGame
from .client import SessionClient
from .errors import (
    AkinatorError,
    InvalidLanguageError,
    NoGuessError,
    ProtocolError,
    StateError,
    TransportError,
)
from .game import QueryGame
from .models import (
    ANIMALS,
    CHARACTERS,
    OBJECTS,
    Cursor,
    Guess,
    QuestionAnswer,
    Response,
    Step,
    Theme,
)
from .themes import ThemeRegistry
from .transport import HttpTransport

__all__ = [
    "AkinatorError",
    "ANIMALS",
    "CHARACTERS",
    "Cursor",
    "GameFactory",
    "Guess",
    "GuessingGame",
    "HttpTransport",
    "InvalidLanguageError",
    "NoGuessError",
    "OBJECTS",
    "ProtocolError",
    "QueryGame",
    "QuestionAnswer",
    "Response",
    "SessionClient",
    "StateError",
    "Step",
    "Theme",
    "ThemeRegistry",
    "TransportError",
]
