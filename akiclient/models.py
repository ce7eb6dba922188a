from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, List, Optional

from .errors import InvalidLanguageError, ProtocolError

# Answer value the service treats as "take back the last answer"
CANCEL_ANSWER = -1


# --- Answers ---
class Response(IntEnum):
    YES = 0
    NO = 1
    DONT_KNOW = 2
    PROBABLY = 3
    PROBABLY_NOT = 4

    @property
    def label(self) -> str:
        return RESPONSE_LABELS[self]

    @classmethod
    def parse(cls, text) -> "Response":
        """Map user input such as 'y', 'probably not' or '3' to a Response."""
        if isinstance(text, int):
            return cls(text)
        key = str(text).strip().lower()
        if key not in _RESPONSE_ALIASES:
            raise ValueError(f"Unknown answer '{text}'")
        return _RESPONSE_ALIASES[key]


RESPONSE_LABELS = {
    Response.YES: "Yes",
    Response.NO: "No",
    Response.DONT_KNOW: "Don't know",
    Response.PROBABLY: "Probably",
    Response.PROBABLY_NOT: "Probably not",
}

_RESPONSE_ALIASES = {
    "yes": Response.YES, "y": Response.YES, "0": Response.YES,
    "no": Response.NO, "n": Response.NO, "1": Response.NO,
    "don't know": Response.DONT_KNOW, "dont know": Response.DONT_KNOW,
    "i don't know": Response.DONT_KNOW, "idk": Response.DONT_KNOW,
    "i": Response.DONT_KNOW, "?": Response.DONT_KNOW, "2": Response.DONT_KNOW,
    "probably": Response.PROBABLY, "p": Response.PROBABLY, "3": Response.PROBABLY,
    "probably not": Response.PROBABLY_NOT, "pn": Response.PROBABLY_NOT,
    "4": Response.PROBABLY_NOT,
}


# --- Languages ---
LANGUAGES = {
    "english": "en", "arabic": "ar", "chinese": "cn", "german": "de",
    "spanish": "es", "french": "fr", "hebrew": "il", "italian": "it",
    "japanese": "jp", "korean": "kr", "dutch": "nl", "polish": "pl",
    "portuguese": "pt", "russian": "ru", "turkish": "tr", "indonesian": "id",
}


def resolve_language(language: str) -> str:
    """Return the site code for a language name or code."""
    key = language.strip().lower()
    if key in LANGUAGES:
        return LANGUAGES[key]
    if key in LANGUAGES.values():
        return key
    raise InvalidLanguageError(f"Language '{language}' is not supported")


# --- Themes ---
@dataclass(frozen=True)
class Theme:
    """A playable category. `url` is the web service root used by the json client."""
    name: str
    url: str = ""
    subject_id: str = ""


CHARACTERS = Theme("Characters", subject_id="1")
OBJECTS = Theme("Objects", subject_id="2")
ANIMALS = Theme("Animals", subject_id="14")

BUILTIN_THEMES = {
    "characters": CHARACTERS,
    "objects": OBJECTS,
    "animals": ANIMALS,
}


# --- Step / guess payloads ---
@dataclass
class Step:
    question: str
    options: List[str]
    step: str
    progression: str
    question_id: str = ""
    infogain: str = ""
    status_minibase: str = ""
    extra: Any = None


@dataclass
class Guess:
    id: str
    name: str
    description: str = ""
    probability: float = 0.0
    image: str = ""
    pseudo: str = ""


@dataclass
class QuestionAnswer:
    question: str
    answer: Response
    label: str = ""


# --- Session cursor ---
@dataclass
class Cursor:
    step: str = ""
    progression: str = ""
    signature: str = ""
    session: str = ""
    identifier: str = ""
    question: str = ""
    theme: Optional[Theme] = None
    child_mode: bool = False
    options: List[str] = field(default_factory=list)

    REQUIRED = ("step", "progression", "signature", "session", "identifier", "question")

    def validate(self, operation=None) -> "Cursor":
        """Raise ProtocolError if any session token is missing."""
        for name in self.REQUIRED:
            if not getattr(self, name):
                raise ProtocolError(f"{name} cannot be empty", operation)
        return self

    def advance(self, step: Step, operation=None) -> "Cursor":
        """Return a validated copy positioned on `step`."""
        return replace(
            self,
            step=step.step,
            progression=step.progression,
            question=step.question,
            options=list(step.options),
        ).validate(operation)

    @property
    def progress(self) -> float:
        try:
            return float(self.progression)
        except ValueError:
            return 0.0
