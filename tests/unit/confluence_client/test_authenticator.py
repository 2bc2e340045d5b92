"""Unit tests for confluence_client.auth module."""

import pytest
from unittest.mock import patch

from src.confluence_client.auth import Authenticator, Credentials
from src.confluence_client.errors import InvalidCredentialsError


class TestCredentials:
    """Test cases for Credentials NamedTuple."""

    def test_credentials_are_immutable(self):
        creds = Credentials(url="https://c.example.com", user="bot", api_token="t")
        with pytest.raises(AttributeError):
            creds.url = "different-url"


class TestAuthenticator:
    """Test cases for Authenticator class."""

    @patch('src.confluence_client.auth.load_dotenv')
    def test_init_loads_dotenv(self, mock_load_dotenv):
        Authenticator()
        mock_load_dotenv.assert_called_once()

    @patch('src.confluence_client.auth.load_dotenv')
    def test_get_credentials_with_user(self, mock_load_dotenv, monkeypatch):
        monkeypatch.setenv('CONFLUENCE_URL', 'https://confluence.example.com')
        monkeypatch.setenv('CONFLUENCE_USER', 'bot')
        monkeypatch.setenv('CONFLUENCE_API_TOKEN', 'secret')

        creds = Authenticator().get_credentials()

        assert creds == Credentials('https://confluence.example.com', 'bot', 'secret')

    @patch('src.confluence_client.auth.load_dotenv')
    def test_user_is_optional(self, mock_load_dotenv, monkeypatch):
        monkeypatch.setenv('CONFLUENCE_URL', 'https://confluence.example.com')
        monkeypatch.setenv('CONFLUENCE_USER', '')
        monkeypatch.setenv('CONFLUENCE_API_TOKEN', 'pat')

        creds = Authenticator().get_credentials()

        assert creds.user is None
        assert creds.api_token == 'pat'

    @patch('src.confluence_client.auth.load_dotenv')
    def test_missing_url_raises(self, mock_load_dotenv, monkeypatch):
        monkeypatch.setenv('CONFLUENCE_API_TOKEN', 'secret')

        with pytest.raises(InvalidCredentialsError) as exc_info:
            Authenticator().get_credentials()
        assert exc_info.value.endpoint == "unknown"

    @patch('src.confluence_client.auth.load_dotenv')
    def test_missing_token_raises(self, mock_load_dotenv, monkeypatch):
        monkeypatch.setenv('CONFLUENCE_URL', 'https://confluence.example.com')
        monkeypatch.setenv('CONFLUENCE_USER', 'bot')

        with pytest.raises(InvalidCredentialsError) as exc_info:
            Authenticator().get_credentials()
        assert exc_info.value.user == "bot"
        assert "secret" not in str(exc_info.value)
