"""Shared fixtures: a scripted transport and sample payloads"""
import json
from dataclasses import dataclass
from typing import Any, Optional

import pytest

from akiclient.models import Theme
from akiclient.transport import HttpReply


@dataclass
class Call:
    method: str
    url: str
    params: Optional[Any] = None
    data: Optional[dict] = None
    xhr: bool = False
    operation: Optional[str] = None

    @property
    def query(self):
        return dict(self.params or [])


class FakeTransport:
    """Returns queued replies in order and records every request."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def queue(self, body, status_code=200):
        if isinstance(body, Exception):
            self.replies.append(body)
        else:
            text = body if isinstance(body, str) else json.dumps(body)
            self.replies.append(HttpReply(status_code, text))
        return self

    def get(self, url, params=None, xhr=False, operation=None):
        self.calls.append(Call("GET", url, params=params, xhr=xhr, operation=operation))
        return self._next()

    def post(self, url, data=None, operation=None):
        self.calls.append(Call("POST", url, data=data, operation=operation))
        return self._next()

    def _next(self):
        if not self.replies:
            raise AssertionError("unexpected request")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


GAME_PAGE = """<!DOCTYPE html>
<html>
<head>
<script>
    localStorage.setItem('step', '0');
    localStorage.setItem('progression', '0.00000');
    localStorage.setItem('signature', '231977355');
    localStorage.setItem('session', '46');
    localStorage.setItem('identifiant', 'b9d2c8c1-0e9c');
    localStorage.setItem('cm', 'false');
</script>
</head>
<body>
    <p class="question-text" id="question-label">Is your character real?</p>
</body>
</html>
"""

BOOTSTRAP_PAGE = """<script>
var uid_ext_session = 'a1b2c3-uid';
var frontaddr = 'NDYuMTA1LjExMC40NQ==';
</script>"""

LANDING_PAGE = """<script>
localStorage.setItem('arrUrlThemesToPlay', [{"translated_theme_name":"Characters","urlWs":"https:\\/\\/srv3.akinator.com:9331\\/ws","subject_id":"1"},{"translated_theme_name":"Animals","urlWs":"https:\\/\\/srv2.akinator.com:9317\\/ws","subject_id":"14"}]);
</script>"""

ANSWERS = [
    {"answer": "Yes"},
    {"answer": "No"},
    {"answer": "Don't know"},
    {"answer": "Probably"},
    {"answer": "Probably not"},
]


def step_information(step, question, progression="0.00000"):
    return {
        "question": question,
        "answers": ANSWERS,
        "step": str(step),
        "progression": progression,
        "questionid": "266",
        "infogain": "0.607",
        "status_minibase": "0",
        "options": [],
    }


def jsonp(payload, callback="jQuery331023"):
    return f"{callback}({json.dumps(payload)})"


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def ws_theme():
    return Theme("Characters", url="https://srv3.akinator.com:9331/ws", subject_id="1")


@pytest.fixture
def sample():
    """Payload builders, so test modules need no imports from conftest"""
    class Sample:
        game_page = GAME_PAGE
        bootstrap_page = BOOTSTRAP_PAGE
        landing_page = LANDING_PAGE

        @staticmethod
        def step(step, question, progression="0.00000"):
            return step_information(step, question, progression)

        @staticmethod
        def jsonp(payload):
            return jsonp(payload)

        @staticmethod
        def html_step(step, question, progression="10.0"):
            return {
                "completion": "OK",
                "step": str(step),
                "progression": progression,
                "question_id": "12",
                "question": question,
            }

        @staticmethod
        def html_guess(name="Sherlock Holmes"):
            return {
                "completion": "OK",
                "id_proposition": "70531",
                "id_base_proposition": "1005",
                "name_proposition": name,
                "description_proposition": "Fictional detective",
                "photo": "https://photos.clarinea.fr/BL_25_en/600/partenaire/s/70531__1.jpg",
                "pseudo": "X",
                "nb_elements": 1,
            }

        @staticmethod
        def session(step=0, question="Is your character real?"):
            return {
                "completion": "OK",
                "parameters": {
                    "identification": {
                        "channel": 0,
                        "session": "46",
                        "signature": "231977355",
                        "challenge_auth": "7c7ac6a8",
                    },
                    "step_information": step_information(step, question),
                },
            }

        @staticmethod
        def answer(step, question, progression="12.5"):
            return {"completion": "OK", "parameters": step_information(step, question, progression)}

        @staticmethod
        def elements(*probabilities):
            return {
                "completion": "OK",
                "parameters": {
                    "elements": [
                        {"element": {
                            "id": str(1000 + i),
                            "name": name,
                            "description": f"{name} description",
                            "proba": proba,
                            "absolute_picture_path": f"https://photos.example/{i}.jpg",
                            "pseudo": "X",
                        }}
                        for i, (name, proba) in enumerate(probabilities)
                    ],
                    "NbObjetsPertinents": str(len(probabilities)),
                },
            }

    return Sample
