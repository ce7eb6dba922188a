"""
Decoders for the replies of the Akinator web site and web service.

Everything in here is a pure function over text or decoded JSON, so the
brittle parts (regular expressions over HTML, JSONP unwrapping) can be
tested against fixed sample payloads. Every failure is a ProtocolError.
"""
import html
import json
import re
from typing import Dict, List, Union

from .errors import ProtocolError
from .models import Guess, Step, Theme

STATE_PATTERN = re.compile(r"localStorage\.setItem\('([^']*)', '([^']*)'\);")
QUESTION_PATTERN = re.compile(r"<p[^>]*>([^<]*)</p>")
UID_PATTERN = re.compile(r"var uid_ext_session = '([^']*)'")
FRONTADDR_PATTERN = re.compile(r"var frontaddr = '([^']*)'")
THEMES_PATTERN = re.compile(r"'arrUrlThemesToPlay', (.*)\);")

# localStorage key -> cursor attribute
STATE_KEYS = {
    "step": "step",
    "progression": "progression",
    "signature": "signature",
    "session": "session",
    "identifiant": "identifier",
}

STEP_REQUIRED = ("question", "step", "progression")


# --- Wire shapes ---
def unwrap_jsonp(text: str, operation=None) -> str:
    """Return what sits between the first '(' and the last ')'."""
    start = text.find("(")
    end = text.rfind(")")
    if start == -1 or end == -1 or end <= start:
        raise ProtocolError("response is not a JSONP payload", operation)
    return text[start + 1:end]


def decode_payload(text: str, operation=None) -> dict:
    """Decode a direct JSON object or a JSONP-wrapped one."""
    body = (text or "").strip()
    if not body:
        raise ProtocolError("empty response body", operation)
    if not body.startswith("{"):
        body = unwrap_jsonp(body, operation)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"malformed JSON: {e}", operation) from e
    if not isinstance(data, dict):
        raise ProtocolError("expected a JSON object", operation)
    return data


def check_completion(data: dict, operation=None):
    completion = data.get("completion")
    if completion != "OK":
        raise ProtocolError(f"completion is {completion!r}", operation)


# --- Steps and answers ---
def parse_step(data: dict, operation=None) -> Step:
    """Build a Step from a step_information / parameters object."""
    if not isinstance(data, dict):
        raise ProtocolError("step is not an object", operation)
    for name in STEP_REQUIRED:
        if data.get(name) in (None, ""):
            raise ProtocolError(f"{name} cannot be empty", operation)
    try:
        answers = data.get("answers") or []
        step = Step(
            question=data["question"],
            options=[a["answer"] for a in answers],
            step=str(data["step"]),
            progression=str(data["progression"]),
            question_id=str(data.get("questionid") or data.get("question_id") or ""),
            infogain=str(data.get("infogain") or ""),
            status_minibase=str(data.get("status_minibase") or ""),
            extra=data.get("options"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ProtocolError(f"missing step field {e}", operation) from e
    return step


def parse_proposition(data: dict) -> Guess:
    return Guess(
        id=str(data.get("id_proposition", "")),
        name=data.get("name_proposition", ""),
        description=data.get("description_proposition", ""),
        image=data.get("photo", ""),
        pseudo=data.get("pseudo", ""),
    )


def parse_answer(data: dict, operation=None) -> Union[Step, Guess]:
    """
    Decode the reply to an answer, undo or exclude request.

    Both the flat shape of the web site and the `parameters` envelope of the
    web service are accepted. A non-empty proposition name means the service
    is ready to guess and a Guess is returned instead of the next Step.
    """
    check_completion(data, operation)
    body = data.get("parameters", data)
    if not isinstance(body, dict):
        raise ProtocolError("parameters is not an object", operation)
    if body.get("name_proposition"):
        return parse_proposition(body)
    return parse_step(body, operation)


def parse_session(data: dict, operation=None):
    """Return (session, signature, Step) from a new_session reply."""
    check_completion(data, operation)
    try:
        parameters = data["parameters"]
        identification = parameters["identification"]
        session = str(identification["session"])
        signature = str(identification["signature"])
        step_information = parameters["step_information"]
    except (KeyError, TypeError) as e:
        raise ProtocolError(f"missing session field {e}", operation) from e
    return session, signature, parse_step(step_information, operation)


def parse_guesses(data: dict, operation=None) -> List[Guess]:
    """Return the listed elements with a non-zero probability, in service order."""
    check_completion(data, operation)
    try:
        elements = data["parameters"]["elements"]
    except (KeyError, TypeError) as e:
        raise ProtocolError(f"missing guess list {e}", operation) from e

    guesses = []
    for item in elements:
        try:
            element = item["element"]
            if not isinstance(element, dict):
                raise TypeError(f"element is {type(element).__name__}")
            probability = float(element.get("proba", 0)) * 100
        except (KeyError, TypeError, ValueError) as e:
            raise ProtocolError(f"malformed element {e}", operation) from e
        if probability <= 0:
            continue
        guesses.append(Guess(
            id=str(element.get("id", "")),
            name=element.get("name", ""),
            description=element.get("description", ""),
            probability=round(probability, 6),
            image=element.get("absolute_picture_path", ""),
            pseudo=element.get("pseudo", ""),
        ))
    return guesses


# --- HTML pages ---
def parse_game_page(page: str, operation=None) -> Dict[str, str]:
    """
    Scrape the session tokens and first question out of the game page.

    Returns a dict keyed by cursor attribute (step, progression, signature,
    session, identifier, question). Missing values are left out; the caller
    validates the result.
    """
    state = {}
    for raw in page.splitlines():
        line = raw.strip()
        if line.startswith("localStorage.setItem("):
            match = STATE_PATTERN.search(line)
            if match and match.group(1) in STATE_KEYS:
                state[STATE_KEYS[match.group(1)]] = match.group(2)
        elif 'id="question-label"' in line:
            match = QUESTION_PATTERN.search(line)
            if match:
                state["question"] = html.unescape(match.group(1))
    return state


def parse_bootstrap_page(page: str, operation=None):
    """Return (uid_ext_session, frontaddr) from the json client's landing page."""
    uid = UID_PATTERN.search(page)
    if not uid:
        raise ProtocolError("could not locate uid_ext_session", operation)
    frontaddr = FRONTADDR_PATTERN.search(page)
    if not frontaddr:
        raise ProtocolError("could not locate frontaddr", operation)
    return uid.group(1), frontaddr.group(1)


def parse_themes(page: str, operation=None) -> List[Theme]:
    match = THEMES_PATTERN.search(page)
    if not match:
        raise ProtocolError("could not locate arrUrlThemesToPlay", operation)
    try:
        raw_themes = json.loads(match.group(1))
        return [
            Theme(
                name=t["translated_theme_name"],
                url=t.get("urlWs", ""),
                subject_id=str(t.get("subject_id", "")),
            )
            for t in raw_themes
        ]
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        raise ProtocolError(f"malformed theme list: {e}", operation) from e
