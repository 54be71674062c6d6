"""LLM integration."""

from paper.infrastructure.llm.client import LLMClient
from paper.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
)
from paper.infrastructure.llm.summary_gateway import LLMSummaryGateway, clean_title

__all__ = [
    "LLMAuthenticationError",
    "LLMClient",
    "LLMError",
    "LLMRateLimitError",
    "LLMSummaryGateway",
    "clean_title",
]
