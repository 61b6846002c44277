"""Character identification extractor."""

from app.prompts.analysis_prompts import CHARACTER_IDENTIFICATION_PROMPT
from app.schemas.analysis import IdentifiedCharacters
from app.services.extraction.base_extractor import BaseExtractor


class CharacterExtractor(BaseExtractor[IdentifiedCharacters]):
    """Identifies characters with a short description of each."""

    operation_name = "character_identification"
    response_model = IdentifiedCharacters

    def get_extraction_prompt(self) -> str:
        return CHARACTER_IDENTIFICATION_PROMPT

    def to_result(self, payload: IdentifiedCharacters) -> IdentifiedCharacters:
        return payload
