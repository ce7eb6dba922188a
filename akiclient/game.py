"""
Client for the Akinator JSON web service.

Every request is a GET carrying the whole session as query parameters; the
service answers with JSONP, so each call gets a fresh jQuery callback name.
"""
import logging
from typing import List, Optional

from .base import GuessingGame
from .errors import ProtocolError, StateError
from .models import CANCEL_ANSWER, Cursor, Guess, Response
from .parsing import (
    decode_payload,
    parse_answer,
    parse_bootstrap_page,
    parse_guesses,
    parse_session,
)
from .themes import ThemeRegistry
from .transport import callback_token

logger = logging.getLogger(__name__)


class QueryGame(GuessingGame):
    """json variant: new_session / answer_api / list against the theme's web service."""

    def __init__(self, theme=None, language=None, child_mode=None, transport=None,
                 registry: Optional[ThemeRegistry] = None):
        super().__init__(theme, language, child_mode, transport)
        self.registry = registry
        self.params = {}

    def _query(self, **extra):
        params = dict(self.params)
        params.update(extra)
        params["callback"] = callback_token()
        return sorted(params.items())

    def _request(self, url, operation, **extra):
        reply = self.transport.get(url, params=self._query(**extra), xhr=True, operation=operation)
        if not reply.ok:
            raise ProtocolError(f"unexpected status {reply.status_code}", operation)
        return reply

    def _resolve_theme(self):
        if self.theme.url:
            return self.theme
        registry = self.registry or ThemeRegistry(self.transport, self.language)
        theme = registry.resolve(self.theme.name)
        if theme is None or not theme.url:
            raise StateError(f"theme '{self.theme.name}' could not be resolved", "start")
        return theme

    # --- Game flow ---
    def start(self) -> str:
        theme = self._resolve_theme()

        reply = self.transport.get(f"{self.base_url}/game", operation="start")
        uid, frontaddr = parse_bootstrap_page(reply.text, "start")

        params = {
            "answer": "",
            "childMod": "true" if self.child_mode else "false",
            "constraint": "ETAT<>'AV'",
            "frontaddr": frontaddr,
            "partner": "1",
            "player": "website-desktop",
            "question_filter": "''",
            "soft_constaint": "''",
            "uid_ext_session": uid,
            "urlApiWs": theme.url,
        }
        reply = self.transport.get(
            f"{self.base_url}/new_session",
            params=sorted(dict(params, callback=callback_token()).items()),
            xhr=True,
            operation="start",
        )
        session, signature, step = parse_session(decode_payload(reply.text, "start"), "start")

        cursor = Cursor(
            step=step.step,
            progression=step.progression,
            signature=signature,
            session=session,
            identifier=uid,
            question=step.question,
            theme=theme,
            child_mode=self.child_mode,
            options=step.options,
        ).validate("start")

        params.update(session=session, signature=signature, step=step.step)
        self.theme = theme
        self.params = params
        self.cursor = cursor
        self.history = []
        self.answer_guess = None
        logger.info(f"Started {theme.name} game (session {session})")
        return cursor.question

    def answer(self, response) -> bool:
        response = Response.parse(response)
        cursor = self._require_started("answer")
        options = self.options()
        label = options[response] if response < len(options) else response.label

        reply = self._request(
            f"{self.base_url}/answer_api", "answer",
            answer=str(int(response)), step=cursor.step,
        )
        result = parse_answer(decode_payload(reply.text, "answer"), "answer")

        if isinstance(result, Guess):
            self.answer_guess = result
            logger.info(f"Guess proposed at step {cursor.step}: {result.name}")
        else:
            self._move_to(cursor.advance(result, "answer"))

        self._record(cursor.question, response, label)
        return self.is_answered()

    def undo(self) -> None:
        if self._at_first_step():
            return
        cursor = self.cursor

        reply = self._request(
            f"{self.theme.url}/cancel_answer", "undo",
            answer=str(CANCEL_ANSWER), step=cursor.step,
        )
        result = parse_answer(decode_payload(reply.text, "undo"), "undo")
        if isinstance(result, Guess):
            raise ProtocolError("expected the previous question, got a guess", "undo")

        self._move_to(cursor.advance(result, "undo"))
        self.answer_guess = None
        self._forget_last()

    def list_guesses(self) -> List[Guess]:
        cursor = self._require_started("list_guesses")
        reply = self._request(f"{self.theme.url}/list", "list_guesses", step=cursor.step)
        guesses = parse_guesses(decode_payload(reply.text, "list_guesses"), "list_guesses")
        logger.debug(f"{len(guesses)} guesses at step {cursor.step}")
        return guesses

    def guess(self) -> Guess:
        """Fetch the top guess and hold it for accept_answer / decline_answer."""
        guess = super().guess()
        self.answer_guess = guess
        return guess

    def accept_answer(self) -> None:
        guess = self._require_answer("accept_answer")
        self._request(
            f"{self.theme.url}/choice", "accept_answer",
            step=self.cursor.step, element=guess.id,
        )
        logger.info(f"Accepted guess {guess.name}")

    def decline_answer(self) -> str:
        guess = self._require_answer("decline_answer")
        reply = self._request(
            f"{self.theme.url}/exclude", "decline_answer",
            step=self.cursor.step, forward_answer="1",
        )
        result = parse_answer(decode_payload(reply.text, "decline_answer"), "decline_answer")
        if isinstance(result, Guess):
            raise ProtocolError("expected a new question, got a guess", "decline_answer")

        self._move_to(self.cursor.advance(result, "decline_answer"))
        self.answer_guess = None
        logger.info(f"Declined guess {guess.name}")
        return self.cursor.question

    def _move_to(self, cursor: Cursor):
        self.cursor = cursor
        self.params["step"] = cursor.step
