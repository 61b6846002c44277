"""Base extractor interface for structured document extraction.

This module defines the abstract base class that the analysis extractors
implement. An extractor formats a fixed prompt around the document text,
asks the text-generation service for JSON of a declared shape, and validates
the reply against a pydantic model.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import ExtractionUnavailableError
from app.core.unified_llm import UnifiedLLMClient
from app.prompts.analysis_prompts import SCHEMA_INSTRUCTION
from app.utils.json_parser import parse_json_safely
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)

ResultT = TypeVar("ResultT")


class BaseExtractor(ABC, Generic[ResultT]):
    """Abstract base class for document extractors.

    Subclasses provide:
    - ``operation_name``: label used in logs and errors
    - ``response_model``: pydantic model the reply must validate against
    - ``get_extraction_prompt()``: template with a ``{document_text}`` slot
    - ``to_result()``: projection of the validated model to the return value

    Every call is a single, uncached request to the text-generation service.
    Any failure surfaces as ExtractionUnavailableError.

    Attributes:
        client: UnifiedLLMClient (or any object with ``generate_content``)
        temperature: Sampling temperature sent with every request
        max_output_tokens: Optional cap on generated tokens
    """

    operation_name: str = "extraction"
    response_model: Type[BaseModel]

    def __init__(
        self,
        llm_client: UnifiedLLMClient,
        temperature: float = 0.2,
        max_output_tokens: Optional[int] = None,
    ):
        """Initialize base extractor.

        Args:
            llm_client: Text-generation client
            temperature: Sampling temperature
            max_output_tokens: Optional cap on generated tokens
        """
        self.client = llm_client
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.logger = LOGGER

    @abstractmethod
    def get_extraction_prompt(self) -> str:
        """Get the prompt template for this extractor.

        Returns:
            str: Template containing a ``{document_text}`` placeholder
        """

    @abstractmethod
    def to_result(self, payload: BaseModel) -> ResultT:
        """Project the validated response model to the extractor's result."""

    def build_prompt(self, text: str) -> str:
        """Interpolate the document text and append the expected JSON schema."""
        schema = json.dumps(self.response_model.model_json_schema(by_alias=True), indent=2)
        return (
            self.get_extraction_prompt().format(document_text=text)
            + SCHEMA_INSTRUCTION.format(schema=schema)
        )

    def _generation_config(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "temperature": self.temperature,
            "response_mime_type": "application/json",
            "response_schema": self.response_model,
        }
        if self.max_output_tokens:
            config["max_output_tokens"] = self.max_output_tokens
        return config

    async def extract(self, text: str) -> ResultT:
        """Run the extraction against the document text.

        Args:
            text: Document text

        Returns:
            The extractor's structured result

        Raises:
            ExtractionUnavailableError: If the service call fails or the reply
                is empty, unparseable, or does not match the response model
        """
        self.logger.debug(
            f"Starting {self.operation_name}",
            extra={"document_chars": len(text)},
        )

        try:
            response_text = await self.client.generate_content(
                contents=self.build_prompt(text),
                generation_config=self._generation_config(),
            )
        except Exception as e:
            raise ExtractionUnavailableError(
                self.operation_name, f"text-generation call failed: {e}", original_error=e
            ) from e

        payload = self._parse_response(response_text)

        self.logger.info(
            f"{self.operation_name} completed",
            extra={"response_chars": len(response_text)},
        )
        return self.to_result(payload)

    def _parse_response(self, response_text: Optional[str]) -> BaseModel:
        """Parse and validate the raw model reply.

        Args:
            response_text: Raw text returned by the service

        Returns:
            Validated instance of ``response_model``

        Raises:
            ExtractionUnavailableError: If the reply is unusable
        """
        parsed = parse_json_safely(response_text)

        if parsed is None:
            self.logger.warning(
                f"{self.operation_name}: no usable JSON payload",
                extra={"response": (response_text or "")[:500]},
            )
            raise ExtractionUnavailableError(self.operation_name, "no usable payload returned")

        try:
            return self.response_model.model_validate(parsed)
        except PydanticValidationError as e:
            self.logger.warning(
                f"{self.operation_name}: payload does not match {self.response_model.__name__}",
                extra={"errors": e.errors(include_url=False)},
            )
            raise ExtractionUnavailableError(
                self.operation_name,
                f"payload does not match {self.response_model.__name__}",
                original_error=e,
            ) from e
