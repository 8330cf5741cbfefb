"""Best-effort extraction of an Insight from free-form analysis text.

Every field is searched independently and the first match wins. Fields that
cannot be found fall back to the values in ``insights.defaults``. Parsing never
raises and performs no I/O, so a given input always yields the same Insight.
"""

import re
from typing import ClassVar

from portfolio_review.insights.defaults import (
    DEFAULT_ALLOCATION_PERCENT,
    DEFAULT_ANNUAL_RETURN,
    DEFAULT_ASSET_COUNT,
    DEFAULT_CURRENT_VALUE,
    DEFAULT_RISK_LEVEL,
    DEFAULT_SUMMARY,
    MAX_RECOMMENDATIONS,
    MIN_RECOMMENDATION_LENGTH,
)
from portfolio_review.insights.models import Allocation, Insight, RiskLevel

# A section header is a short capitalized phrase ending with a colon,
# optionally wrapped in markdown emphasis.
_HEADER = (
    r"[ \t]*(?:#+[ \t]*)?(?:\*\*)?"
    r"[A-Z][A-Za-z/&'()-]*(?:[ \t]+[A-Za-z/&'()-]+){0,3}"
    r"[ \t]*(?:\*\*)?[ \t]*:"
)
_NUMBERED_HEADER = r"[ \t]*(?:\d+[.)][ \t]*)?" + _HEADER
_BLOCK_END = r"(?=\n[ \t]*\n|\n{header}|\Z)"

_ALLOCATION_LABELS: dict[str, str] = {
    "equity": r"equity",
    "debt": r"debt",
    "cash": r"cash",
    "others": r"others?",
}

_ENUMERATION_RE = re.compile(r"^\s*(?:\d+[.)]|\(\d+\)|[-*•+])\s+")


class TextInsightParser:
    """Maps unstructured analysis text to a fully populated Insight."""

    _SUMMARY_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"^[ \t]*(?:#+[ \t]*)?(?:\d+[.)][ \t]*)?(?:\*\*)?"
        r"(?i:(?:portfolio[ \t]+)?summary)(?:\*\*)?[ \t]*(?::|(?=\n))"
        r"[*]*[ \t]*(?P<body>.*?)"
        + _BLOCK_END.format(header=_NUMBERED_HEADER),
        re.S | re.M,
    )
    _CURRENT_VALUE_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"current\s+(?:portfolio\s+)?value(?:\s+estimate)?[*:\s\-]*"
        r"(?:is\s+|of\s+)?(?:approximately\s+|approx\.?\s+|about\s+|~\s*)?"
        r"(?:₹|rs\.?|inr|usd|\$|€|£)?\s*"
        r"(?P<number>\d[\d,]*(?:\.\d+)?)",
        re.I,
    )
    _ANNUAL_RETURN_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"annual(?:ized)?\s+returns?(?:\s+estimate)?[*:\s\-]*"
        r"(?:is\s+|of\s+)?(?:approximately\s+|approx\.?\s+|about\s+|~\s*)?"
        r"(?P<number>[-+]?\d+(?:\.\d+)?)\s*%",
        re.I,
    )
    _RISK_PREFIX: ClassVar[str] = (
        r"risk(?:\s+(?:level|profile|assessment|rating|category))?[*:\s\-]*(?:is\s+)?"
    )
    _RISK_LOW_RE: ClassVar[re.Pattern[str]] = re.compile(_RISK_PREFIX + r"low\b", re.I)
    _RISK_HIGH_RE: ClassVar[re.Pattern[str]] = re.compile(_RISK_PREFIX + r"high\b", re.I)
    _RISK_MODERATE_RE: ClassVar[re.Pattern[str]] = re.compile(
        _RISK_PREFIX + r"(?:moderate|medium)\b", re.I
    )
    _ASSET_COUNT_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?:number\s+of\s+(?:assets|funds|holdings)|\bfunds|\bholdings)[*: \t\-]*"
        r"(?P<count>\d+)\b(?![.,]\d|\s*%)",
        re.I,
    )
    _ALLOCATION_RES: ClassVar[dict[str, re.Pattern[str]]] = {
        name: re.compile(
            rf"\b{label}\b(?:\s+(?:funds?|allocation|exposure))?[*:\s\-(]*"
            r"(?P<number>\d+(?:\.\d+)?)\s*%",
            re.I,
        )
        for name, label in _ALLOCATION_LABELS.items()
    }
    _RECOMMENDATIONS_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?i:recommendations?)(?i:\s+for\s+improvement)?[*#]*[ \t]*(?::|(?=\n))[*]*"
        r"(?P<body>.*?)"
        + _BLOCK_END.format(header=_HEADER),
        re.S,
    )

    def parse(self, text: str) -> Insight:
        """Extract an Insight, resolving unmatched fields to their defaults."""
        insight, _ = self.parse_with_report(text)
        return insight

    def parse_with_report(self, text: str) -> tuple[Insight, list[str]]:
        """Extract an Insight and list the fields that fell back to defaults."""
        text = text or ""
        defaulted: list[str] = []

        summary = self._extract_summary(text)
        if summary is None:
            defaulted.append("summary")
            summary = DEFAULT_SUMMARY

        current_value = self._extract_number(self._CURRENT_VALUE_RE, text)
        if current_value is None:
            defaulted.append("current_value")
            current_value = DEFAULT_CURRENT_VALUE

        annual_return = self._extract_number(self._ANNUAL_RETURN_RE, text)
        if annual_return is None:
            defaulted.append("annual_return")
            annual_return = DEFAULT_ANNUAL_RETURN

        risk_level = self._extract_risk_level(text)
        if risk_level is None:
            defaulted.append("risk_level")
            risk_level = DEFAULT_RISK_LEVEL

        asset_count = self._extract_asset_count(text)
        if asset_count is None:
            defaulted.append("asset_count")
            asset_count = DEFAULT_ASSET_COUNT

        percentages: dict[str, float] = {}
        for name, pattern in self._ALLOCATION_RES.items():
            value = self._extract_number(pattern, text)
            if value is None:
                defaulted.append(f"allocation.{name}")
                value = DEFAULT_ALLOCATION_PERCENT
            percentages[name] = value

        recommendations = self._extract_recommendations(text)
        if not recommendations:
            defaulted.append("recommendations")

        insight = Insight(
            summary=summary,
            current_value=current_value,
            annual_return=annual_return,
            risk_level=risk_level,
            asset_count=asset_count,
            allocation=Allocation(**percentages),
            recommendations=recommendations,
        )
        return insight, defaulted

    def _extract_summary(self, text: str) -> str | None:
        match = self._SUMMARY_RE.search(text)
        if match is None:
            return None
        summary = " ".join(match.group("body").split()).strip("*# ")
        return summary or None

    @staticmethod
    def _extract_number(pattern: re.Pattern[str], text: str) -> float | None:
        match = pattern.search(text)
        if match is None:
            return None
        return float(match.group("number").replace(",", ""))

    def _extract_risk_level(self, text: str) -> RiskLevel | None:
        if self._RISK_LOW_RE.search(text):
            return RiskLevel.LOW
        if self._RISK_HIGH_RE.search(text):
            return RiskLevel.HIGH
        if self._RISK_MODERATE_RE.search(text):
            return RiskLevel.MODERATE
        return None

    def _extract_asset_count(self, text: str) -> int | None:
        match = self._ASSET_COUNT_RE.search(text)
        if match is None:
            return None
        return int(match.group("count"))

    def _extract_recommendations(self, text: str) -> list[str]:
        match = self._RECOMMENDATIONS_RE.search(text)
        if match is None:
            return []
        return clean_recommendations(match.group("body").splitlines())


def clean_recommendations(lines: list[str]) -> list[str]:
    """Strip enumeration markers, drop short lines, keep the first few.

    Shared by the text parser and the structured-result validator so both
    paths apply the same length and count limits.
    """
    cleaned: list[str] = []
    for line in lines:
        item = _ENUMERATION_RE.sub("", line.replace("**", "")).strip()
        if len(item) <= MIN_RECOMMENDATION_LENGTH:
            continue
        cleaned.append(item)
        if len(cleaned) == MAX_RECOMMENDATIONS:
            break
    return cleaned


_DEFAULT_PARSER = TextInsightParser()


def parse_insight_text(text: str) -> Insight:
    """Parse analysis text with a shared parser instance."""
    return _DEFAULT_PARSER.parse(text)
