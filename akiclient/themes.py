import logging
from typing import List, Optional

from .errors import AkinatorError
from .models import BUILTIN_THEMES, Theme, resolve_language
from .parsing import parse_themes
from .transport import HttpTransport, base_url

logger = logging.getLogger(__name__)


class ThemeRegistry:
    """Fetches the playable themes once and looks them up by name."""

    def __init__(self, transport: Optional[HttpTransport] = None, language: str = "en"):
        self.transport = transport or HttpTransport()
        self.language = resolve_language(language)
        self._themes: Optional[List[Theme]] = None

    def list_themes(self, refresh=False) -> List[Theme]:
        if self._themes is None or refresh:
            reply = self.transport.get(base_url(self.language), operation="list_themes")
            self._themes = parse_themes(reply.text, "list_themes")
            logger.info(f"Loaded {len(self._themes)} themes for '{self.language}'")
        return list(self._themes)

    def resolve(self, name: str) -> Optional[Theme]:
        """Case-insensitive lookup. Returns None when the themes can't be fetched."""
        try:
            themes = self.list_themes()
        except AkinatorError as e:
            logger.warning(f"Could not resolve theme '{name}': {e}")
            return None

        for theme in themes:
            if theme.name.lower() == name.strip().lower():
                return theme
        logger.warning(f"Theme '{name}' is not offered for '{self.language}'")
        return None

    def get(self, name: str, default: Optional[Theme] = None) -> Optional[Theme]:
        """Resolve `name`, falling back to `default` or the matching built-in theme."""
        theme = self.resolve(name)
        if theme is not None:
            return theme
        if default is not None:
            return default
        return BUILTIN_THEMES.get(name.strip().lower())
