"""Builds Insight records from structured interpretation output.

Missing fields resolve to the shared defaults; fields that are present but
malformed are rejected, since a structured reply that contradicts itself is not
something the pipeline should silently repair.
"""

import math
from dataclasses import replace
from typing import Any

from portfolio_review.insights.defaults import (
    DEFAULT_ALLOCATION_PERCENT,
    DEFAULT_ANNUAL_RETURN,
    DEFAULT_ASSET_COUNT,
    DEFAULT_CURRENT_VALUE,
    DEFAULT_RISK_LEVEL,
    DEFAULT_SUMMARY,
)
from portfolio_review.insights.exceptions import InsightValidationError
from portfolio_review.insights.models import Allocation, Insight, RiskLevel
from portfolio_review.insights.text_parser import clean_recommendations

_RISK_ALIASES: dict[str, RiskLevel] = {
    "low": RiskLevel.LOW,
    "moderate": RiskLevel.MODERATE,
    "medium": RiskLevel.MODERATE,
    "high": RiskLevel.HIGH,
}
_ALLOCATION_FIELDS = ("equity", "debt", "cash", "others")


def validate_and_build(data: dict[str, Any]) -> Insight:
    """Validate a structured payload and build a finalized Insight.

    Accepts both camelCase (``currentValue``) and snake_case
    (``current_value``) keys.

    Raises:
        InsightValidationError: on any malformed field.
    """
    if not isinstance(data, dict):
        raise InsightValidationError("Structured insight must be an object")

    insight = Insight(
        summary=_build_summary(_pick(data, "summary")),
        current_value=_build_number(
            _pick(data, "currentValue", "current_value"),
            "currentValue",
            DEFAULT_CURRENT_VALUE,
            non_negative=True,
        ),
        annual_return=_build_number(
            _pick(data, "annualReturn", "annual_return"),
            "annualReturn",
            DEFAULT_ANNUAL_RETURN,
        ),
        risk_level=_build_risk_level(_pick(data, "riskLevel", "risk_level")),
        asset_count=_build_asset_count(_pick(data, "assetCount", "asset_count")),
        allocation=_build_allocation(data.get("allocation")),
        recommendations=_build_recommendations(data.get("recommendations")),
    )
    return finalize_insight(insight)


def finalize_insight(insight: Insight) -> Insight:
    """Apply the summary sentinel and recommendation limits to any Insight."""
    summary = insight.summary.strip() or DEFAULT_SUMMARY
    recommendations = clean_recommendations(insight.recommendations)
    if summary == insight.summary and recommendations == insight.recommendations:
        return insight
    return replace(insight, summary=summary, recommendations=recommendations)


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _build_summary(raw: Any) -> str:
    if raw is None:
        return DEFAULT_SUMMARY
    if not isinstance(raw, str):
        raise InsightValidationError("'summary' must be a string")
    return raw.strip() or DEFAULT_SUMMARY


def _coerce_number(raw: Any, field: str) -> float:
    if isinstance(raw, bool):
        raise InsightValidationError(f"'{field}' must be a number")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        cleaned = raw.strip().replace(",", "").rstrip("%").strip()
        try:
            value = float(cleaned)
        except ValueError as exc:
            raise InsightValidationError(f"'{field}' must be a number, got {raw!r}") from exc
    else:
        raise InsightValidationError(f"'{field}' must be a number")
    if not math.isfinite(value):
        raise InsightValidationError(f"'{field}' must be finite")
    return value


def _build_number(
    raw: Any,
    field: str,
    default: float,
    *,
    non_negative: bool = False,
) -> float:
    if raw is None:
        return default
    value = _coerce_number(raw, field)
    if non_negative and value < 0:
        raise InsightValidationError(f"'{field}' must be non-negative")
    return value


def _build_risk_level(raw: Any) -> RiskLevel:
    if raw is None:
        return DEFAULT_RISK_LEVEL
    if not isinstance(raw, str):
        raise InsightValidationError("'riskLevel' must be a string")
    # Unrecognized labels resolve to the default rather than failing.
    return _RISK_ALIASES.get(raw.strip().lower(), DEFAULT_RISK_LEVEL)


def _build_asset_count(raw: Any) -> int:
    if raw is None:
        return DEFAULT_ASSET_COUNT
    value = _coerce_number(raw, "assetCount")
    if value < 0 or not value.is_integer():
        raise InsightValidationError("'assetCount' must be a non-negative integer")
    return int(value)


def _build_allocation(raw: Any) -> Allocation:
    if raw is None:
        return Allocation()
    if not isinstance(raw, dict):
        raise InsightValidationError("'allocation' must be an object")
    percentages = {
        name: _build_number(
            raw.get(name),
            f"allocation.{name}",
            DEFAULT_ALLOCATION_PERCENT,
            non_negative=True,
        )
        for name in _ALLOCATION_FIELDS
    }
    return Allocation(**percentages)


def _build_recommendations(raw: Any) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise InsightValidationError("'recommendations' must be a list")
    for index, item in enumerate(raw):
        if not isinstance(item, str):
            raise InsightValidationError(
                f"Recommendation at index {index} must be a string"
            )
    return list(raw)
