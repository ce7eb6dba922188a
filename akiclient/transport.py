import logging
import time
from dataclasses import dataclass

import requests

from .config import settings
from .errors import TransportError

logger = logging.getLogger(__name__)

BASE_URL_FMT = "https://{language}.akinator.com"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"


@dataclass
class HttpReply:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def base_url(language: str) -> str:
    return BASE_URL_FMT.format(language=language)


def callback_token() -> str:
    """A fresh JSONP callback name; doubles as a cache buster."""
    return f"jQuery{time.time_ns()}"


class HttpTransport:
    """
    Sends requests through a requests.Session.

    Pass your own session to change TLS settings, proxies or adapters.
    The body is read and the connection released before returning.
    """

    def __init__(self, session=None, timeout=None, user_agent=None):
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.TIMEOUT
        self.user_agent = user_agent or settings.USER_AGENT

    def _headers(self, xhr=False, form=False):
        headers = {"User-Agent": self.user_agent}
        if xhr:
            headers["x-requested-with"] = "XMLHttpRequest"
        if form:
            headers["Content-Type"] = FORM_CONTENT_TYPE
        return headers

    def get(self, url, params=None, xhr=False, operation=None) -> HttpReply:
        return self._send("GET", url, operation, params=params, headers=self._headers(xhr=xhr))

    def post(self, url, data=None, operation=None) -> HttpReply:
        return self._send("POST", url, operation, data=data, headers=self._headers(form=True))

    def _send(self, method, url, operation, **kwargs) -> HttpReply:
        logger.debug(f"{method} {url}")
        try:
            with self.session.request(method, url, timeout=self.timeout, **kwargs) as response:
                reply = HttpReply(response.status_code, response.text)
        except requests.exceptions.Timeout as e:
            raise TransportError(f"timed out after {self.timeout}s", operation) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"request to {url} failed: {e}", operation) from e
        logger.debug(f"{method} {url} -> {reply.status_code}")
        return reply
