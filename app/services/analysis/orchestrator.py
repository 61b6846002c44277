"""Document Analysis Orchestrator - fans out the three extraction operations.

This service coordinates one analysis request:
1. Starts summary, key-information and character extraction concurrently
2. Waits for every operation to settle
3. Folds each outcome into the combined result through the field policy table
4. Logs failures instead of raising them

The orchestrator never fails a request because an operation failed; the
result is degraded per field instead.
"""

from typing import Any, Dict, Mapping, Optional, Sequence

from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.core.unified_llm import UnifiedLLMClient, create_llm_client_from_settings
from app.schemas.analysis import CombinedAnalysis
from app.services.analysis.fan_out import gather_settled
from app.services.analysis.policy import DEFAULT_FIELD_POLICIES, FieldPolicy
from app.services.extraction import (
    BaseExtractor,
    CharacterExtractor,
    KeyInformationExtractor,
    SummaryExtractor,
)
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


def build_default_extractors(
    llm_client: UnifiedLLMClient,
    temperature: float = 0.2,
) -> Dict[str, BaseExtractor]:
    """Create the three extractors keyed by the output field they fill."""
    return {
        "summary": SummaryExtractor(llm_client, temperature=temperature),
        "key_information": KeyInformationExtractor(llm_client, temperature=temperature),
        "identified_characters": CharacterExtractor(llm_client, temperature=temperature),
    }


class DocumentAnalysisOrchestrator:
    """Produces a CombinedAnalysis from document text.

    Attributes:
        extractors: Extraction operation per output field.
        policies: Field policy table applied when folding outcomes.
    """

    def __init__(
        self,
        llm_client: Optional[UnifiedLLMClient] = None,
        extractors: Optional[Mapping[str, BaseExtractor]] = None,
        policies: Sequence[FieldPolicy] = DEFAULT_FIELD_POLICIES,
    ):
        """Initialize the orchestrator.

        Args:
            llm_client: Text-generation client; built from settings when
                neither this nor ``extractors`` is given.
            extractors: Explicit extractor per output field.
            policies: Field policy table. Must cover exactly the extractor fields.

        Raises:
            ConfigurationError: If policies and extractors do not line up, or
                the provider API key is missing.
        """
        if extractors is None:
            client = llm_client or create_llm_client_from_settings(
                provider=settings.llm_provider,
                gemini_api_key=settings.gemini_api_key,
                gemini_model=settings.gemini_model,
                openrouter_api_key=settings.openrouter_api_key,
                openrouter_api_url=settings.openrouter_api_url,
                openrouter_model=settings.openrouter_model,
                timeout=settings.llm.timeout_seconds,
                max_retries=settings.llm.max_retries,
                enable_fallback=settings.enable_llm_fallback,
            )
            extractors = build_default_extractors(client, temperature=settings.llm.temperature)

        policy_fields = [policy.field for policy in policies]
        if sorted(policy_fields) != sorted(extractors):
            raise ConfigurationError(
                f"Field policies {policy_fields} do not match extractors {list(extractors)}"
            )

        self.extractors: Dict[str, BaseExtractor] = dict(extractors)
        self.policies = tuple(policies)
        self.logger = LOGGER

    async def analyze(self, document_text: str) -> CombinedAnalysis:
        """Run every extraction operation and assemble the combined result.

        Callers reject empty or whitespace-only text before calling this.

        Args:
            document_text: Document text

        Returns:
            CombinedAnalysis, degraded per field for any failed operation
        """
        self.logger.info(
            "Starting document analysis",
            extra={
                "document_chars": len(document_text),
                "operations": list(self.extractors),
            },
        )

        outcomes = await gather_settled(
            {
                field: extractor.extract(document_text)
                for field, extractor in self.extractors.items()
            }
        )

        values: Dict[str, Any] = {}
        failed = []
        for policy in self.policies:
            outcome = outcomes[policy.field]
            if not outcome.succeeded:
                failed.append(policy.field)
                self.logger.error(
                    f"Analysis operation '{policy.field}' failed, applying {policy.on_failure.value} policy",
                    exc_info=outcome.error,
                    extra={"operation": policy.field, "error": str(outcome.error)},
                )
            policy.apply(outcome, values)

        self.logger.info(
            "Document analysis completed",
            extra={"failed_operations": failed},
        )
        return CombinedAnalysis(**values)

    async def run_operation(self, field: str, document_text: str) -> Any:
        """Run a single extraction operation without the failure policy.

        Raises:
            KeyError: If no operation fills ``field``
            ExtractionUnavailableError: If the operation fails
        """
        return await self.extractors[field].extract(document_text)
