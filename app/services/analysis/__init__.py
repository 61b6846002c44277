"""Document analysis orchestration.

- gather_settled / TaskOutcome: wait-all fan-out over named awaitables
- FieldPolicy / FailureAction: per-field degradation table
- DocumentAnalysisOrchestrator: fans out the extractors and folds the results
"""

from app.services.analysis.fan_out import TaskOutcome, gather_settled
from app.services.analysis.orchestrator import (
    DocumentAnalysisOrchestrator,
    build_default_extractors,
)
from app.services.analysis.policy import (
    DEFAULT_FIELD_POLICIES,
    NO_SUMMARY_FALLBACK,
    FailureAction,
    FieldPolicy,
)

__all__ = [
    "DEFAULT_FIELD_POLICIES",
    "DocumentAnalysisOrchestrator",
    "FailureAction",
    "FieldPolicy",
    "NO_SUMMARY_FALLBACK",
    "TaskOutcome",
    "build_default_extractors",
    "gather_settled",
]
