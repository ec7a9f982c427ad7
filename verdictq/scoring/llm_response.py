"""
Adapter from an LLM verdict payload to EvaluationResult.

The model scores the four motivation sub-scores; pattern repetition and
financial strain still come from history/budget context, and a vendor match
(when present) replaces the model's long-term utility with the rubric value.
The decision itself always goes through the same linear model as the
fallback, so LLM and fallback verdicts are directly comparable.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from verdictq.observability.logging import get_logger
from verdictq.observability.telemetry import counter
from verdictq.scoring.engine import (
    NO_BUDGET_EXPLANATION,
    NO_HISTORY_EXPLANATION,
    build_evaluation,
    build_score,
    build_vendor_utility_score,
)
from verdictq.scoring.types import (
    EvaluationResult,
    PurchaseInput,
    ScoreExplanation,
    ScoringOverrides,
)

logger = get_logger(__name__)

_CODE_FENCE_OPEN = re.compile(r"^```(?:json)?\n?")
_CODE_FENCE_CLOSE = re.compile(r"\n?```$")


class LLMResponseError(ValueError):
    """Raised when an LLM payload cannot be turned into an EvaluationResult."""


class SubScoreSchema(BaseModel):
    score: float = Field(ge=0.0, le=1.0)
    explanation: str


class VerdictResponseSchema(BaseModel):
    """Schema requested by prompts.USER_PROMPT_TEMPLATE."""

    model_config = ConfigDict(extra="ignore")

    value_conflict: SubScoreSchema
    emotional_impulse: SubScoreSchema
    long_term_utility: SubScoreSchema
    emotional_support: SubScoreSchema
    rationale: str


def _load_payload(response: str | dict[str, Any]) -> dict[str, Any]:
    if isinstance(response, dict):
        return response

    json_text = response.strip()
    if json_text.startswith("```"):
        json_text = _CODE_FENCE_OPEN.sub("", json_text)
        json_text = _CODE_FENCE_CLOSE.sub("", json_text)

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise LLMResponseError("verdict response is not valid JSON") from exc
    if not isinstance(data, dict):
        raise LLMResponseError("verdict response must be a JSON object")
    return data


def _as_explanation(sub_score: SubScoreSchema) -> ScoreExplanation:
    return build_score(sub_score.score, sub_score.explanation)


def evaluation_from_llm_response(
    purchase: PurchaseInput,
    response: str | dict[str, Any],
    overrides: ScoringOverrides | None = None,
) -> EvaluationResult:
    """
    Convert a model response into an EvaluationResult.

    Args:
        purchase: The purchase that was evaluated
        response: Raw model text (optionally fenced) or already-decoded JSON
        overrides: History/budget/vendor context used for the non-LLM sub-scores

    Raises:
        LLMResponseError: payload is not JSON or does not match the schema;
            callers route to score_purchase in that case.
    """
    overrides = overrides or ScoringOverrides()
    data = _load_payload(response)

    try:
        validated = VerdictResponseSchema.model_validate(data)
    except ValidationError as exc:
        counter("verdict.llm.schema_validation_failures")
        logger.warning("LLM verdict failed schema validation: %d errors", exc.error_count())
        raise LLMResponseError("verdict response failed schema validation") from exc

    long_term_utility = build_vendor_utility_score(overrides.vendor_match) or _as_explanation(
        validated.long_term_utility
    )

    result = build_evaluation(
        purchase=purchase,
        value_conflict=_as_explanation(validated.value_conflict),
        pattern_repetition=overrides.pattern_repetition
        or build_score(0.0, NO_HISTORY_EXPLANATION),
        emotional_impulse=_as_explanation(validated.emotional_impulse),
        financial_strain=overrides.financial_strain or build_score(0.0, NO_BUDGET_EXPLANATION),
        long_term_utility=long_term_utility,
        emotional_support=_as_explanation(validated.emotional_support),
        rationale=validated.rationale.strip(),
    )
    counter(f"verdict.llm.{result.outcome}")
    return result
