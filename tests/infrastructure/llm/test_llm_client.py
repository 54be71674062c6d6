"""Tests for LLMClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from litellm.exceptions import AuthenticationError, RateLimitError

from paper.config import LLMConfig
from paper.infrastructure.llm import (
    LLMAuthenticationError,
    LLMClient,
    LLMError,
    LLMRateLimitError,
)

MESSAGES = [{"role": "user", "content": "Hello"}]


class TestLLMClient:
    """LLMClient tests."""

    @pytest.fixture
    def config(self) -> LLMConfig:
        """Create LLM config."""
        return LLMConfig(model="gpt-4o-mini", temperature=0.3, max_tokens=1500)

    @pytest.fixture
    def client(self, config: LLMConfig) -> LLMClient:
        """Create LLMClient instance."""
        return LLMClient(config)

    @pytest.fixture
    def mock_response(self) -> MagicMock:
        """Create mock LiteLLM response."""
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = "## 💬 **Main Discussion Points**"
        return response

    async def test_complete_success(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test successful completion."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            result = await client.complete(MESSAGES)

        assert result == "## 💬 **Main Discussion Points**"
        mock_completion.assert_awaited_once()

    async def test_complete_applies_config(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test that config parameters are applied."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES)

        call_kwargs = mock_completion.await_args.kwargs
        assert call_kwargs["model"] == "gpt-4o-mini"
        assert call_kwargs["temperature"] == 0.3
        assert call_kwargs["max_tokens"] == 1500
        assert call_kwargs["messages"] == MESSAGES

    async def test_complete_kwargs_override(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test that kwargs can override config."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES, max_tokens=20)

        assert mock_completion.await_args.kwargs["max_tokens"] == 20

    async def test_empty_response(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        mock_response.choices[0].message.content = ""
        with patch("litellm.acompletion", new=AsyncMock(return_value=mock_response)):
            with pytest.raises(LLMError, match="Empty response"):
                await client.complete(MESSAGES)

    async def test_complete_authentication_error(self, client: LLMClient) -> None:
        """Test that authentication errors are converted."""
        error = AuthenticationError(
            message="Invalid API key", llm_provider="openai", model="gpt-4o-mini"
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMAuthenticationError):
                await client.complete(MESSAGES)

    async def test_complete_rate_limit_error(self, client: LLMClient) -> None:
        """Test that rate limit errors are converted."""
        error = RateLimitError(
            message="Rate limit exceeded", llm_provider="openai", model="gpt-4o-mini"
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMRateLimitError):
                await client.complete(MESSAGES)

    async def test_complete_generic_error(self, client: LLMClient) -> None:
        """Test that other errors are converted to LLMError."""
        with patch(
            "litellm.acompletion", new=AsyncMock(side_effect=Exception("Unknown error"))
        ):
            with pytest.raises(LLMError):
                await client.complete(MESSAGES)
