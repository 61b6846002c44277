"""Unified LLM client factory and manager.

Provides a unified interface for interacting with different LLM providers
(Gemini, OpenRouter) with provider selection based on configuration.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from app.core.config import settings
from app.core.exceptions import APIClientError, ConfigurationError
from app.core.llm_client import GeminiClient, OpenRouterClient
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    GEMINI = "gemini"
    OPENROUTER = "openrouter"


class UnifiedLLMClient:
    """Unified LLM client that wraps different providers.

    Provides a consistent interface regardless of the underlying provider,
    allowing switching between Gemini and OpenRouter.
    """

    def __init__(
        self,
        provider: Union[str, LLMProvider],
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout: int = 60,
        max_retries: int = 1,
        fallback_to_gemini: bool = False,
        gemini_api_key: Optional[str] = None,
        gemini_model: Optional[str] = None,
    ):
        """Initialize unified LLM client.

        Args:
            provider: LLM provider to use ("gemini" or "openrouter")
            api_key: API key for the primary provider
            model: Model name to use
            base_url: Optional base URL (for OpenRouter)
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts per call
            fallback_to_gemini: If True, fallback to Gemini on OpenRouter failure
            gemini_api_key: Gemini API key (required if fallback_to_gemini=True)
            gemini_model: Gemini model name (for fallback)
        """
        self.provider = LLMProvider(provider)
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self.fallback_to_gemini = fallback_to_gemini
        self.fallback_client = None

        if self.provider == LLMProvider.GEMINI:
            self.client = GeminiClient(
                api_key=api_key,
                model=model,
                timeout=timeout,
                max_retries=max_retries
            )
            LOGGER.info(f"Initialized unified LLM with Gemini provider (model: {model})")

        elif self.provider == LLMProvider.OPENROUTER:
            self.client = OpenRouterClient(
                api_key=api_key,
                model=model,
                base_url=base_url or DEFAULT_OPENROUTER_URL,
                timeout=timeout,
                max_retries=max_retries
            )

            if fallback_to_gemini:
                if not gemini_api_key:
                    raise ValueError("gemini_api_key required when fallback_to_gemini=True")
                self.fallback_client = GeminiClient(
                    api_key=gemini_api_key,
                    model=gemini_model or DEFAULT_GEMINI_MODEL,
                    timeout=timeout,
                    max_retries=max_retries
                )
                LOGGER.info(
                    f"Initialized unified LLM with OpenRouter provider (model: {model}) "
                    f"and Gemini fallback (model: {gemini_model})"
                )
            else:
                LOGGER.info(f"Initialized unified LLM with OpenRouter provider (model: {model})")

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate content using the configured LLM provider.

        Args:
            contents: Input content (string or list of parts)
            system_instruction: Optional system instruction
            generation_config: Optional generation config (temperature, etc.)

        Returns:
            Generated text response

        Raises:
            APIClientError: If generation fails
        """
        try:
            return await self.client.generate_content(
                contents=contents,
                system_instruction=system_instruction,
                generation_config=generation_config
            )
        except Exception as e:
            if not self.fallback_client:
                raise

            LOGGER.warning(
                f"Primary provider ({self.provider.value}) failed, attempting Gemini fallback: {e}"
            )
            try:
                return await self.fallback_client.generate_content(
                    contents=contents,
                    system_instruction=system_instruction,
                    generation_config=generation_config
                )
            except Exception as fallback_error:
                LOGGER.error(f"Fallback to Gemini also failed: {fallback_error}")
                raise APIClientError(
                    f"Both primary ({self.provider.value}) and fallback (Gemini) failed",
                    original_error=fallback_error,
                ) from fallback_error


def create_llm_client_from_settings(
    provider: str,
    gemini_api_key: str = "",
    gemini_model: str = DEFAULT_GEMINI_MODEL,
    openrouter_api_key: str = "",
    openrouter_api_url: str = DEFAULT_OPENROUTER_URL,
    openrouter_model: str = "google/gemini-2.0-flash-001",
    timeout: int = 90,
    max_retries: int = 1,
    enable_fallback: bool = False,
) -> UnifiedLLMClient:
    """Create a unified LLM client from configuration settings.

    Selects the API key, model, and base URL that belong to the provider.

    Args:
        provider: LLM provider to use ("gemini" or "openrouter")
        gemini_api_key: Gemini API key (required if provider="gemini")
        gemini_model: Gemini model name
        openrouter_api_key: OpenRouter API key (required if provider="openrouter")
        openrouter_api_url: OpenRouter API URL
        openrouter_model: OpenRouter model name
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts per call
        enable_fallback: If True, enable Gemini fallback for OpenRouter

    Returns:
        UnifiedLLMClient instance configured with the specified provider

    Raises:
        ConfigurationError: If the API key for the selected provider is missing
        ValueError: If the provider is not supported
    """
    provider_enum = LLMProvider(provider.lower())

    if provider_enum == LLMProvider.GEMINI:
        if not gemini_api_key or not gemini_api_key.strip():
            raise ConfigurationError(
                "gemini_api_key required when provider='gemini'. "
                "Please set GEMINI_API_KEY environment variable."
            )
        return UnifiedLLMClient(
            provider=provider_enum,
            api_key=gemini_api_key.strip(),
            model=gemini_model,
            timeout=timeout,
            max_retries=max_retries,
        )

    if not openrouter_api_key or not openrouter_api_key.strip():
        raise ConfigurationError(
            "openrouter_api_key required when provider='openrouter'. "
            "Please set OPENROUTER_API_KEY environment variable."
        )

    fallback_gemini_key = None
    if enable_fallback and gemini_api_key and gemini_api_key.strip():
        fallback_gemini_key = gemini_api_key.strip()

    return UnifiedLLMClient(
        provider=provider_enum,
        api_key=openrouter_api_key.strip(),
        model=openrouter_model,
        base_url=openrouter_api_url,
        timeout=timeout,
        max_retries=max_retries,
        fallback_to_gemini=fallback_gemini_key is not None,
        gemini_api_key=fallback_gemini_key,
        gemini_model=gemini_model if fallback_gemini_key else None,
    )
