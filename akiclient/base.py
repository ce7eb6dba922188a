import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Union

from .config import settings
from .errors import NoGuessError, StateError
from .models import (
    BUILTIN_THEMES,
    Cursor,
    Guess,
    QuestionAnswer,
    Response,
    Theme,
    resolve_language,
)
from .transport import HttpTransport, base_url

logger = logging.getLogger(__name__)


def coerce_theme(theme: Union[Theme, str, None]) -> Theme:
    """Accept a Theme, a theme name or None (the configured default)."""
    if isinstance(theme, Theme):
        return theme
    name = theme or settings.THEME
    return BUILTIN_THEMES.get(name.strip().lower(), Theme(name=name))


class GuessingGame(ABC):
    """
    One Akinator game.

    Subclasses implement the wire protocol; the session cursor, the answer
    history and the held guess live here. The cursor is only replaced after a
    reply has been fully decoded, so a failed call leaves the game where it was.
    Instances are not safe to share between threads.
    """

    def __init__(self, theme=None, language=None, child_mode=None,
                 transport: Optional[HttpTransport] = None):
        self.theme = coerce_theme(theme)
        self.language = resolve_language(language or settings.LANGUAGE)
        self.child_mode = settings.CHILD_MODE if child_mode is None else child_mode
        self.transport = transport or HttpTransport()
        self.base_url = base_url(self.language)

        self.cursor: Optional[Cursor] = None
        self.history: List[QuestionAnswer] = []
        self.answer_guess: Optional[Guess] = None

    # --- Protocol ---
    @abstractmethod
    def start(self) -> str:
        """Open a session and return the first question."""

    @abstractmethod
    def answer(self, response) -> bool:
        """Submit an answer. Returns True when the service came back with a guess."""

    @abstractmethod
    def undo(self) -> None:
        """Take back the most recent answer."""

    @abstractmethod
    def list_guesses(self) -> List[Guess]:
        """All current guesses with a non-zero probability."""

    @abstractmethod
    def accept_answer(self) -> None:
        pass

    @abstractmethod
    def decline_answer(self) -> str:
        pass

    # --- State ---
    @property
    def started(self) -> bool:
        return self.cursor is not None

    @property
    def question(self) -> str:
        return self.cursor.question if self.cursor else ""

    def options(self) -> List[str]:
        if self.cursor and self.cursor.options:
            return list(self.cursor.options)
        return [r.label for r in Response]

    def select_option(self, index: int) -> bool:
        """Answer with the option at `index` of options()."""
        if index < 0 or index >= len(self.options()):
            raise ValueError(f"answer selection {index} is invalid")
        return self.answer(Response(index))

    def progress(self) -> float:
        return self.cursor.progress if self.cursor else 0.0

    def responses(self) -> List[QuestionAnswer]:
        return list(self.history)

    def is_answered(self) -> bool:
        return self.answer_guess is not None and bool(self.answer_guess.name)

    def guess(self) -> Guess:
        """The highest probability guess."""
        guesses = self.list_guesses()
        if not guesses:
            raise NoGuessError("no guesses available", "guess")
        return guesses[0]

    # --- Helpers ---
    def _require_started(self, operation):
        if self.cursor is None:
            raise StateError("game has not been started", operation)
        return self.cursor

    def _require_answer(self, operation):
        self._require_started(operation)
        if not self.is_answered():
            raise StateError("there is no guess to act on", operation)
        return self.answer_guess

    def _record(self, question: str, response: Response, label: str = ""):
        self.history.append(QuestionAnswer(question, response, label or response.label))

    def _forget_last(self):
        if self.history:
            self.history.pop()

    def _at_first_step(self) -> bool:
        return self.cursor is None or self.cursor.step == "0"


class GameFactory:
    """Pick the protocol variant for a new game."""

    VARIANTS = ("html", "json")

    @staticmethod
    def create(variant: Optional[str] = None, **options) -> GuessingGame:
        variant = (variant or settings.VARIANT).lower()
        if variant == "html":
            from .client import SessionClient
            return SessionClient(**options)
        elif variant == "json":
            from .game import QueryGame
            return QueryGame(**options)
        raise ValueError(f"Unknown game variant '{variant}'")
