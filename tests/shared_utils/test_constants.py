"""
Tests for shared_utils.constants.

Validates enum membership and the public strings the search client relies
on, so that accidental edits are caught.
"""

from shared_utils.constants import (
    APIEndpoints,
    Defaults,
    EmbeddingProvider,
    Environment,
    ErrorCode,
    ErrorMessages,
    LogScope,
    SourceID,
)


class TestEnvironment:
    def test_values(self) -> None:
        assert {e.value for e in Environment} == {"development", "staging", "production"}


class TestEmbeddingProvider:
    def test_values(self) -> None:
        assert EmbeddingProvider.LOCAL.value == "local"
        assert EmbeddingProvider.HASHING.value == "hashing"
        assert EmbeddingProvider.OPENAI.value == "openai"
        assert EmbeddingProvider.BEDROCK.value == "bedrock"

    def test_member_count(self) -> None:
        assert len(EmbeddingProvider) == 4


class TestErrorMessages:
    def test_exact_client_strings(self) -> None:
        assert ErrorMessages.QUERY_REQUIRED == 'Query parameter "q" is required.'
        assert ErrorMessages.NOT_READY == "Search is not ready yet."
        assert ErrorMessages.EMBEDDING_UNAVAILABLE == "Search is temporarily unavailable."


class TestErrorCode:
    def test_search_codes(self) -> None:
        for name in (
            "SOURCE_UNAVAILABLE",
            "EMBEDDING_FAILED",
            "EMBEDDING_UNAVAILABLE",
            "EMPTY_QUERY",
            "NOT_READY",
            "DIMENSION_MISMATCH",
            "INVALID_STATE_TRANSITION",
        ):
            assert ErrorCode[name].value == name

    def test_str_enum(self) -> None:
        assert ErrorCode.NOT_READY == "NOT_READY"


class TestDefaults:
    def test_debounce_respects_floor(self) -> None:
        assert Defaults.SEARCH_DEBOUNCE_MS >= Defaults.MIN_SEARCH_DEBOUNCE_MS == 100

    def test_search_defaults(self) -> None:
        assert Defaults.SEARCH_TOP_K >= 1
        assert Defaults.INGEST_MAX_WORKERS >= 1
        assert Defaults.QUERY_EMBED_TIMEOUT_S > 0


class TestRoutes:
    def test_paths(self) -> None:
        assert APIEndpoints.SEARCH == "/api/search"
        assert APIEndpoints.HEALTH == "/health"
        assert APIEndpoints.CONTENT.format(source_id=SourceID.BLOG) == "/api/blog"

    def test_scopes_are_unique(self) -> None:
        scopes = [v for k, v in vars(LogScope).items() if not k.startswith("_")]
        assert len(scopes) == len(set(scopes))
