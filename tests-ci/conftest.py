"""
Pytest configuration for CI tests
Provides common fixtures and test config
"""
import httpx
import pytest

from core.message_bus import MessageBus
from modules.integrations.mediawiki.client import MediaWikiClient
from wiki_fakes import FakeWikiApi


@pytest.fixture
def mock_config():
    """Mock configuration for tests (no real token needed)"""
    return {
        'bot': {
            'name': 'test_bot'
        },
        'discord': {
            'token': 'test_token_mock',
            'client_id': '123',
            'guild_id': '456'
        },
        'wiki': {
            'name': 'HighSpell Wiki',
            'base_url': 'https://highspell.wiki/w/',
            'legacy_base_url': 'https://highspell.fandom.com/wiki/'
        },
        'timeouts': {
            'wiki_request': 2.0,
            'discord_send': 1.0
        }
    }


@pytest.fixture
def fake_wiki_api():
    return FakeWikiApi()


@pytest.fixture
def wiki_client(fake_wiki_api, mock_config):
    """MediaWikiClient branché sur FakeWikiApi (aucun appel réseau)"""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_wiki_api))
    return MediaWikiClient.from_config(mock_config, http_client=http_client)


@pytest.fixture
def bus():
    return MessageBus()
