"""Tests for DocumentAnalysisOrchestrator fan-out and fail-soft assembly."""

import asyncio
import logging

import pytest
from unittest.mock import AsyncMock, Mock

from app.core.exceptions import APITimeoutError, ConfigurationError, ExtractionUnavailableError
from app.schemas.analysis import CombinedAnalysis, IdentifiedCharacters, KeyInformation
from app.services.analysis import (
    DEFAULT_FIELD_POLICIES,
    DocumentAnalysisOrchestrator,
    NO_SUMMARY_FALLBACK,
)


def _extractor(return_value=None, side_effect=None) -> Mock:
    extractor = Mock()
    extractor.extract = AsyncMock(return_value=return_value, side_effect=side_effect)
    return extractor


def _unavailable(operation: str) -> ExtractionUnavailableError:
    return ExtractionUnavailableError(operation, "text-generation call failed")


@pytest.fixture
def successful_extractors(sample_summary, sample_key_information, sample_characters):
    return {
        "summary": _extractor(sample_summary),
        "key_information": _extractor(sample_key_information),
        "identified_characters": _extractor(sample_characters),
    }


@pytest.mark.asyncio
async def test_all_operations_succeed_exact_union(
    successful_extractors,
    sample_document_text,
    sample_summary,
    sample_key_information,
    sample_characters,
):
    """All three mocked outputs land in their own fields, nothing dropped."""
    orchestrator = DocumentAnalysisOrchestrator(extractors=successful_extractors)

    result = await orchestrator.analyze(sample_document_text)

    assert result == CombinedAnalysis(
        summary=sample_summary,
        key_information=sample_key_information,
        identified_characters=sample_characters,
    )
    assert result.model_dump(by_alias=True, exclude_none=True) == {
        "summary": "Alice and Bob discuss trade at a market.",
        "keyInformation": {
            "keywords": ["market", "trade routes"],
            "importantPoints": ["Alice and Bob meet"],
        },
        "identifiedCharacters": {
            "characters": [
                {"name": "Alice", "description": "A trader who meets Bob at the market."},
                {"name": "Bob", "description": "Discusses trade routes with Alice."},
            ]
        },
    }
    for extractor in successful_extractors.values():
        extractor.extract.assert_awaited_once_with(sample_document_text)


@pytest.mark.asyncio
async def test_key_information_failure_is_omitted(
    successful_extractors, sample_document_text, sample_summary, sample_characters
):
    successful_extractors["key_information"] = _extractor(
        side_effect=_unavailable("key_information")
    )
    orchestrator = DocumentAnalysisOrchestrator(extractors=successful_extractors)

    result = await orchestrator.analyze(sample_document_text)

    assert result.key_information is None
    assert "keyInformation" not in result.model_dump(by_alias=True, exclude_none=True)
    assert result.summary == sample_summary
    assert result.identified_characters == sample_characters


@pytest.mark.asyncio
async def test_character_timeout_is_omitted(
    successful_extractors, sample_document_text, sample_summary, sample_key_information
):
    """Scenario: character identification times out while the others succeed."""
    timeout = APITimeoutError("Gemini request timed out")
    successful_extractors["identified_characters"] = _extractor(
        side_effect=ExtractionUnavailableError(
            "character_identification", "text-generation call failed", original_error=timeout
        )
    )
    orchestrator = DocumentAnalysisOrchestrator(extractors=successful_extractors)

    result = await orchestrator.analyze(sample_document_text)

    dumped = result.model_dump(by_alias=True, exclude_none=True)
    assert "identifiedCharacters" not in dumped
    assert dumped["summary"] == sample_summary
    assert dumped["keyInformation"] == sample_key_information.model_dump(by_alias=True)


@pytest.mark.asyncio
async def test_summary_failure_uses_fallback(
    successful_extractors, sample_document_text, sample_key_information, sample_characters
):
    successful_extractors["summary"] = _extractor(side_effect=_unavailable("narrative_summary"))
    orchestrator = DocumentAnalysisOrchestrator(extractors=successful_extractors)

    result = await orchestrator.analyze(sample_document_text)

    assert result.summary == NO_SUMMARY_FALLBACK
    assert result.key_information == sample_key_information
    assert result.identified_characters == sample_characters


@pytest.mark.asyncio
async def test_all_operations_fail_still_returns_result(sample_document_text):
    orchestrator = DocumentAnalysisOrchestrator(
        extractors={
            "summary": _extractor(side_effect=_unavailable("narrative_summary")),
            "key_information": _extractor(side_effect=RuntimeError("connection reset")),
            "identified_characters": _extractor(side_effect=asyncio.TimeoutError()),
        }
    )

    result = await orchestrator.analyze(sample_document_text)

    assert result.model_dump(by_alias=True, exclude_none=True) == {
        "summary": NO_SUMMARY_FALLBACK,
    }


@pytest.mark.asyncio
async def test_empty_results_are_kept_distinct_from_failure(sample_document_text, sample_summary):
    """Validly shaped but empty lists are present, not omitted."""
    orchestrator = DocumentAnalysisOrchestrator(
        extractors={
            "summary": _extractor(sample_summary),
            "key_information": _extractor(KeyInformation(keywords=[], important_points=[])),
            "identified_characters": _extractor(IdentifiedCharacters(characters=[])),
        }
    )

    result = await orchestrator.analyze(sample_document_text)

    assert result.key_information == KeyInformation(keywords=[], important_points=[])
    assert result.identified_characters == IdentifiedCharacters(characters=[])
    assert result.model_dump(by_alias=True, exclude_none=True) == {
        "summary": sample_summary,
        "keyInformation": {"keywords": [], "importantPoints": []},
        "identifiedCharacters": {"characters": []},
    }


@pytest.mark.asyncio
async def test_operations_run_concurrently(sample_document_text, sample_summary):
    """Each operation waits until all three have started; sequential runs would time out."""
    started = []
    all_started = asyncio.Event()

    def waiting_extractor(name, value):
        async def extract(text):
            started.append(name)
            if len(started) == 3:
                all_started.set()
            await asyncio.wait_for(all_started.wait(), timeout=1)
            return value

        extractor = Mock()
        extractor.extract = extract
        return extractor

    orchestrator = DocumentAnalysisOrchestrator(
        extractors={
            "summary": waiting_extractor("summary", sample_summary),
            "key_information": waiting_extractor(
                "key_information", KeyInformation(keywords=["k"], important_points=[])
            ),
            "identified_characters": waiting_extractor(
                "identified_characters", IdentifiedCharacters(characters=[])
            ),
        }
    )

    result = await orchestrator.analyze(sample_document_text)

    assert sorted(started) == ["identified_characters", "key_information", "summary"]
    assert result.summary == sample_summary
    assert result.key_information is not None
    assert result.identified_characters is not None


@pytest.mark.asyncio
async def test_failure_does_not_cancel_slower_operations(sample_document_text, sample_summary):
    async def slow_summary(text):
        await asyncio.sleep(0.01)
        return sample_summary

    summary_extractor = Mock()
    summary_extractor.extract = slow_summary

    orchestrator = DocumentAnalysisOrchestrator(
        extractors={
            "summary": summary_extractor,
            "key_information": _extractor(side_effect=_unavailable("key_information")),
            "identified_characters": _extractor(side_effect=_unavailable("character_identification")),
        }
    )

    result = await orchestrator.analyze(sample_document_text)

    assert result.summary == sample_summary


@pytest.mark.asyncio
async def test_failures_are_logged(successful_extractors, sample_document_text, caplog):
    successful_extractors["key_information"] = _extractor(
        side_effect=_unavailable("key_information")
    )
    orchestrator = DocumentAnalysisOrchestrator(extractors=successful_extractors)

    with caplog.at_level(logging.ERROR, logger="app.services.analysis.orchestrator"):
        await orchestrator.analyze(sample_document_text)

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "key_information" in errors[0].getMessage()
    assert errors[0].exc_info is not None


@pytest.mark.asyncio
async def test_run_operation_propagates_failure(successful_extractors, sample_document_text):
    successful_extractors["identified_characters"] = _extractor(
        side_effect=_unavailable("character_identification")
    )
    orchestrator = DocumentAnalysisOrchestrator(extractors=successful_extractors)

    with pytest.raises(ExtractionUnavailableError):
        await orchestrator.run_operation("identified_characters", sample_document_text)


def test_policies_must_match_extractors(successful_extractors):
    del successful_extractors["identified_characters"]

    with pytest.raises(ConfigurationError):
        DocumentAnalysisOrchestrator(
            extractors=successful_extractors, policies=DEFAULT_FIELD_POLICIES
        )


def test_builds_default_extractors_from_llm_client(mock_llm_client):
    orchestrator = DocumentAnalysisOrchestrator(llm_client=mock_llm_client)

    assert set(orchestrator.extractors) == {"summary", "key_information", "identified_characters"}
    assert all(extractor.client is mock_llm_client for extractor in orchestrator.extractors.values())
