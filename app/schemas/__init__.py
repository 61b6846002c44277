from .analysis import (
    AnalyzeDocumentRequest,
    CharacterEntry,
    CombinedAnalysis,
    IdentifiedCharacters,
    KeyInformation,
    NarrativeSummary,
)

__all__ = [
    "AnalyzeDocumentRequest",
    "CharacterEntry",
    "CombinedAnalysis",
    "IdentifiedCharacters",
    "KeyInformation",
    "NarrativeSummary",
]
