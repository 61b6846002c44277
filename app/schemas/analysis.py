"""
Document Analysis Schema Definitions

Pydantic models shared by the extraction operations, the analysis
orchestrator and the HTTP API. Field names are snake_case in Python and
camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CharacterEntry(BaseModel):
    """A character identified in the document."""

    name: str = Field(..., description="The name of the character.")
    description: str = Field(..., description="A brief description of the character.")


class IdentifiedCharacters(BaseModel):
    """Characters identified in a document, in model output order."""

    characters: list[CharacterEntry] = Field(
        ..., description="The list of characters identified in the text."
    )


class KeyInformation(BaseModel):
    """Keywords and important points extracted from a document."""

    model_config = ConfigDict(populate_by_name=True)

    keywords: list[str] = Field(..., description="Keywords extracted from the text.")
    important_points: list[str] = Field(
        ...,
        alias="importantPoints",
        description="Important points extracted from the text.",
    )


class NarrativeSummary(BaseModel):
    """Structured output of the narrative summary prompt."""

    summary: str = Field(..., description="A concise narrative summary of the document.")

    @field_validator("summary")
    @classmethod
    def summary_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("summary must not be blank")
        return v


class AnalyzeDocumentRequest(BaseModel):
    """Request body carrying pasted document text."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "documentText": "Alice met Bob at the market. They discussed trade routes.",
            }
        },
    )

    document_text: str = Field(
        ...,
        alias="documentText",
        description="The text content of the document to analyze.",
    )

    @field_validator("document_text")
    @classmethod
    def document_text_not_blank(cls, v: str) -> str:
        """Reject empty or whitespace-only documents before analysis."""
        if not v.strip():
            raise ValueError("documentText must contain non-whitespace text")
        return v


class CombinedAnalysis(BaseModel):
    """Combined result of the three extraction operations.

    ``summary`` is always present. ``key_information`` and
    ``identified_characters`` are None when their extraction failed and are
    left out of the serialized response.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "summary": "Alice and Bob discuss trade at a market.",
                "keyInformation": {
                    "keywords": ["market", "trade routes"],
                    "importantPoints": ["Alice and Bob meet"],
                },
                "identifiedCharacters": {
                    "characters": [
                        {"name": "Alice", "description": "A trader at the market."},
                        {"name": "Bob", "description": "Alice's trading partner."},
                    ]
                },
            }
        },
    )

    summary: str = Field(..., description="A concise narrative summary of the document.")
    key_information: Optional[KeyInformation] = Field(
        default=None,
        alias="keyInformation",
        description="Extracted keywords and important points from the document.",
    )
    identified_characters: Optional[IdentifiedCharacters] = Field(
        default=None,
        alias="identifiedCharacters",
        description="Characters identified in the document, along with their descriptions.",
    )
