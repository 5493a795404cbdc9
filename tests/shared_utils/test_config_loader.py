"""
Tests for shared_utils.config_loader.

Covers the field validators, get_api_base_url(), search defaults,
get_settings() caching and Secrets Manager lookup, and get_secret_from_aws().
"""

import os
from unittest.mock import MagicMock, patch

import pytest

from shared_utils.config_loader import Settings, get_secret_from_aws, get_settings


def _settings(**overrides) -> Settings:
    return Settings(**{"environment": "development", **overrides})


# ---------------------------------------------------------------------------
# validate_embed_provider
# ---------------------------------------------------------------------------


class TestValidateEmbedProvider:
    @pytest.mark.parametrize("value", ["local", "hashing", "openai", "bedrock"])
    def test_supported(self, value: str) -> None:
        assert _settings(embed_provider=value).embed_provider == value

    def test_case_insensitive(self) -> None:
        assert _settings(embed_provider="BEDROCK").embed_provider == "bedrock"

    def test_invalid_raises(self) -> None:
        with pytest.raises(ValueError, match="embed_provider"):
            _settings(embed_provider="cohere")


# ---------------------------------------------------------------------------
# validate_environment
# ---------------------------------------------------------------------------


class TestValidateEnvironment:
    @pytest.mark.parametrize(
        "input_val, expected",
        [
            ("development", "development"),
            ("staging", "staging"),
            ("production", "production"),
            ("PRODUCTION", "production"),
        ],
    )
    def test_valid_environments(self, input_val: str, expected: str) -> None:
        assert _settings(environment=input_val).environment == expected

    def test_invalid_raises(self) -> None:
        with pytest.raises(ValueError, match="environment"):
            _settings(environment="alpha")


# ---------------------------------------------------------------------------
# Search settings
# ---------------------------------------------------------------------------


class TestSearchSettings:
    def test_defaults(self) -> None:
        s = _settings()
        assert s.embed_provider == "local"
        assert s.local_embed_model_id == "sentence-transformers/all-MiniLM-L6-v2"
        assert s.search_top_k == 10
        assert s.ingest_max_workers == 4
        assert s.ingest_embed_timeout_s == 10.0
        assert s.query_embed_timeout_s == 5.0
        assert s.search_debounce_ms == 160
        assert s.content_dir == "data"

    @pytest.mark.parametrize("field", ["search_top_k", "ingest_max_workers", "hashing_dimension"])
    def test_positive_ints(self, field: str) -> None:
        with pytest.raises(ValueError, match=">= 1"):
            _settings(**{field: 0})

    @pytest.mark.parametrize("field", ["ingest_embed_timeout_s", "query_embed_timeout_s"])
    def test_timeouts_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValueError, match="timeout"):
            _settings(**{field: 0})

    def test_debounce_floor(self) -> None:
        with pytest.raises(ValueError, match="search_debounce_ms"):
            _settings(search_debounce_ms=50)
        assert _settings(search_debounce_ms=100).search_debounce_ms == 100

    def test_env_var_override(self) -> None:
        with patch.dict(os.environ, {"SEARCH_TOP_K": "3", "CONTENT_DIR": "/srv/content"}):
            s = Settings()
        assert s.search_top_k == 3
        assert s.content_dir == "/srv/content"


# ---------------------------------------------------------------------------
# get_api_base_url
# ---------------------------------------------------------------------------


class TestGetApiBaseUrl:
    def test_default(self) -> None:
        assert _settings().get_api_base_url() == "http://localhost:4267"

    def test_https_443_omits_port(self) -> None:
        s = _settings(api_host="api.test.com", api_port=443, api_protocol="https")
        assert s.get_api_base_url() == "https://api.test.com"

    def test_http_80_omits_port(self) -> None:
        s = _settings(api_host="localhost", api_port=80)
        assert s.get_api_base_url() == "http://localhost"


# ---------------------------------------------------------------------------
# get_secret_from_aws
# ---------------------------------------------------------------------------


class TestGetSecretFromAWS:
    @patch("shared_utils.config_loader.boto3.client")
    def test_success(self, mock_client_ctor) -> None:
        mock_client = MagicMock()
        mock_client.get_secret_value.return_value = {
            "SecretString": '{"openai_api_key": "sk-test123"}'
        }
        mock_client_ctor.return_value = mock_client

        assert get_secret_from_aws("my-secret", "eu-west-2") == "sk-test123"
        mock_client_ctor.assert_called_once_with("secretsmanager", region_name="eu-west-2")

    @patch("shared_utils.config_loader.boto3.client")
    def test_no_secret_string_returns_empty(self, mock_client_ctor) -> None:
        mock_client_ctor.return_value.get_secret_value.return_value = {"SecretBinary": b"x"}
        assert get_secret_from_aws("my-secret") == ""

    @patch("shared_utils.config_loader.boto3.client")
    def test_exception_returns_empty(self, mock_client_ctor) -> None:
        mock_client_ctor.side_effect = Exception("no credentials")
        assert get_secret_from_aws("my-secret") == ""


# ---------------------------------------------------------------------------
# get_settings
# ---------------------------------------------------------------------------


class TestGetSettings:
    def setup_method(self) -> None:
        get_settings.cache_clear()

    def teardown_method(self) -> None:
        get_settings.cache_clear()

    def test_cached(self) -> None:
        with patch.dict(os.environ, {"ENVIRONMENT": "staging"}):
            first = get_settings()
            second = get_settings()
        assert first is second
        assert first.environment == "staging"

    @patch("shared_utils.config_loader.get_secret_from_aws", return_value="sk-from-secrets")
    def test_openai_key_fetched_from_secrets_manager(self, mock_fetch) -> None:
        env = {"EMBED_PROVIDER": "openai", "OPENAI_SECRET_NAME": "portfolio/openai"}
        with patch.dict(os.environ, env):
            os.environ.pop("OPENAI_API_KEY", None)
            settings = get_settings()
            assert settings.openai_api_key == "sk-from-secrets"
        mock_fetch.assert_called_once_with("portfolio/openai", settings.bedrock_region)

    @patch("shared_utils.config_loader.get_secret_from_aws")
    def test_no_secret_lookup_for_hashing(self, mock_fetch) -> None:
        with patch.dict(os.environ, {"EMBED_PROVIDER": "hashing"}):
            get_settings()
        mock_fetch.assert_not_called()
