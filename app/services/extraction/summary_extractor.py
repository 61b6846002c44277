"""Narrative summary extractor."""

from app.prompts.analysis_prompts import NARRATIVE_SUMMARY_PROMPT
from app.schemas.analysis import NarrativeSummary
from app.services.extraction.base_extractor import BaseExtractor


class SummaryExtractor(BaseExtractor[str]):
    """Produces a concise narrative summary of the whole document."""

    operation_name = "narrative_summary"
    response_model = NarrativeSummary

    def get_extraction_prompt(self) -> str:
        return NARRATIVE_SUMMARY_PROMPT

    def to_result(self, payload: NarrativeSummary) -> str:
        return payload.summary
