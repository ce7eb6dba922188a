"""Tests for theme lookup"""
import pytest

from akiclient.errors import InvalidLanguageError, ProtocolError, TransportError
from akiclient.models import ANIMALS, OBJECTS
from akiclient.themes import ThemeRegistry


def test_list_themes_fetches_once(transport, sample):
    registry = ThemeRegistry(transport, "english")
    transport.queue(sample.landing_page)

    first = registry.list_themes()
    second = registry.list_themes()

    assert first == second
    assert len(transport.calls) == 1
    assert transport.calls[0].url == "https://en.akinator.com"


def test_list_themes_refresh(transport, sample):
    registry = ThemeRegistry(transport)
    transport.queue(sample.landing_page).queue(sample.landing_page)
    registry.list_themes()
    registry.list_themes(refresh=True)
    assert len(transport.calls) == 2


def test_list_themes_without_marker(transport):
    transport.queue("<html></html>")
    with pytest.raises(ProtocolError):
        ThemeRegistry(transport).list_themes()


def test_resolve_is_case_insensitive(transport, sample):
    transport.queue(sample.landing_page)
    theme = ThemeRegistry(transport).resolve("  animals ")
    assert theme.name == "Animals"
    assert theme.url == "https://srv2.akinator.com:9317/ws"


def test_resolve_unknown_name(transport, sample):
    transport.queue(sample.landing_page)
    assert ThemeRegistry(transport).resolve("Objects") is None


def test_resolve_swallows_network_failure(transport):
    transport.queue(TransportError("connection refused", "list_themes"))
    assert ThemeRegistry(transport).resolve("Characters") is None


def test_get_falls_back(transport):
    for _ in range(3):
        transport.queue(TransportError("connection refused", "list_themes"))
    registry = ThemeRegistry(transport)
    assert registry.get("objects") == OBJECTS
    assert registry.get("mystery", default=ANIMALS) == ANIMALS
    assert registry.get("mystery") is None


def test_unknown_language():
    with pytest.raises(InvalidLanguageError):
        ThemeRegistry(language="klingon")
