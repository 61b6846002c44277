"""Keyword and important-point extractor."""

from app.prompts.analysis_prompts import KEY_INFORMATION_PROMPT
from app.schemas.analysis import KeyInformation
from app.services.extraction.base_extractor import BaseExtractor


class KeyInformationExtractor(BaseExtractor[KeyInformation]):
    """Extracts keywords and important points.

    Both lists keep the model's output order and are neither deduplicated
    nor normalized. Empty lists are a valid result.
    """

    operation_name = "key_information"
    response_model = KeyInformation

    def get_extraction_prompt(self) -> str:
        return KEY_INFORMATION_PROMPT

    def to_result(self, payload: KeyInformation) -> KeyInformation:
        return payload
