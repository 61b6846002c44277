"""Extraction operations for document analysis.

Base classes:
- BaseExtractor: Abstract base class for all extractors

Extractors:
- SummaryExtractor: narrative summary
- KeyInformationExtractor: keywords and important points
- CharacterExtractor: identified characters
"""

from app.services.extraction.base_extractor import BaseExtractor
from app.services.extraction.character_extractor import CharacterExtractor
from app.services.extraction.key_information_extractor import KeyInformationExtractor
from app.services.extraction.summary_extractor import SummaryExtractor

__all__ = [
    "BaseExtractor",
    "CharacterExtractor",
    "KeyInformationExtractor",
    "SummaryExtractor",
]
