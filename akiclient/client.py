"""
Client for the Akinator web site's form protocol.

The game page is fetched with a form POST and the session tokens are
scraped out of its inline script; every later call posts the cursor back as
a form and gets a flat JSON object in return.
"""
import logging
from typing import List

from .base import GuessingGame
from .errors import ProtocolError, StateError
from .models import Cursor, Guess, Response
from .parsing import decode_payload, parse_answer, parse_game_page

logger = logging.getLogger(__name__)


def _flag(value: bool) -> str:
    return "true" if value else "false"


class SessionClient(GuessingGame):
    """html variant: form posts against https://<lang>.akinator.com."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.step_last_proposition = ""

    # --- Endpoints ---
    @property
    def game_url(self):
        return f"{self.base_url}/game"

    @property
    def answer_url(self):
        return f"{self.base_url}/answer"

    @property
    def undo_url(self):
        return f"{self.base_url}/cancel_answer"

    @property
    def accept_url(self):
        return f"{self.base_url}/choice"

    @property
    def decline_url(self):
        return f"{self.base_url}/exclude"

    # --- Game flow ---
    def start(self) -> str:
        if not self.theme.subject_id:
            raise StateError(f"theme '{self.theme.name}' has no subject id", "start")

        form = {"sid": self.theme.subject_id, "cm": _flag(self.child_mode)}
        reply = self.transport.post(self.game_url, data=form, operation="start")
        if not reply.ok:
            raise ProtocolError(f"unexpected status {reply.status_code}", "start")

        state = parse_game_page(reply.text, "start")
        cursor = Cursor(theme=self.theme, child_mode=self.child_mode, **state).validate("start")

        self.cursor = cursor
        self.history = []
        self.answer_guess = None
        self.step_last_proposition = ""
        logger.info(f"Started {self.theme.name} game (session {cursor.session})")
        return cursor.question

    def answer(self, response) -> bool:
        response = Response.parse(response)
        cursor = self._require_started("answer")

        form = {
            "step": cursor.step,
            "progression": cursor.progression,
            "sid": self.theme.subject_id,
            "cm": _flag(self.child_mode),
            "answer": int(response),
            "step_last_proposition": self.step_last_proposition,
            "session": cursor.session,
            "signature": cursor.signature,
        }
        reply = self.transport.post(self.answer_url, data=form, operation="answer")
        result = parse_answer(decode_payload(reply.text, "answer"), "answer")

        if isinstance(result, Guess):
            result.probability = cursor.progress
            self.answer_guess = result
            self.step_last_proposition = cursor.step
            logger.info(f"Guess proposed at step {cursor.step}: {result.name}")
        else:
            self.cursor = cursor.advance(result, "answer")

        self._record(cursor.question, response)
        return self.is_answered()

    def undo(self) -> None:
        if self._at_first_step():
            return
        cursor = self.cursor

        form = {
            "step": cursor.step,
            "progression": cursor.progression,
            "sid": self.theme.subject_id,
            "cm": _flag(self.child_mode),
            "session": cursor.session,
            "signature": cursor.signature,
        }
        reply = self.transport.post(self.undo_url, data=form, operation="undo")
        result = parse_answer(decode_payload(reply.text, "undo"), "undo")
        if isinstance(result, Guess):
            raise ProtocolError("expected the previous question, got a guess", "undo")

        self.cursor = cursor.advance(result, "undo")
        self.answer_guess = None
        self._forget_last()

    def list_guesses(self) -> List[Guess]:
        """
        The web site only ever proposes one guess: the held one.

        It has no probability of its own, so it is returned whatever its
        probability; that field carries the progression reached when it was
        proposed.
        """
        self._require_started("list_guesses")
        return [self.answer_guess] if self.is_answered() else []

    def accept_answer(self) -> None:
        guess = self._require_answer("accept_answer")
        cursor = self.cursor

        form = {
            "sid": self.theme.subject_id,
            "pid": guess.id,
            "identifiant": cursor.identifier,
            "pflag_photo": 1,
            "charac_name": guess.name,
            "charac_desc": guess.description,
            "session": cursor.session,
            "signature": cursor.signature,
            "step": cursor.step,
        }
        reply = self.transport.post(self.accept_url, data=form, operation="accept_answer")
        if not reply.ok:
            raise ProtocolError(f"unexpected status {reply.status_code}", "accept_answer")
        logger.info(f"Accepted guess {guess.name}")

    def decline_answer(self) -> str:
        guess = self._require_answer("decline_answer")
        cursor = self.cursor

        form = {
            "step": cursor.step,
            "sid": self.theme.subject_id,
            "cm": _flag(self.child_mode),
            "progression": cursor.progression,
            "session": cursor.session,
            "signature": cursor.signature,
        }
        reply = self.transport.post(self.decline_url, data=form, operation="decline_answer")
        if not reply.ok:
            raise ProtocolError(f"unexpected status {reply.status_code}", "decline_answer")
        result = parse_answer(decode_payload(reply.text, "decline_answer"), "decline_answer")
        if isinstance(result, Guess):
            raise ProtocolError("expected a new question, got a guess", "decline_answer")

        self.cursor = cursor.advance(result, "decline_answer")
        self.answer_guess = None
        logger.info(f"Declined guess {guess.name}")
        return self.cursor.question
