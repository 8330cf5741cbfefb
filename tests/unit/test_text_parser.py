"""Tests for the free-text insight parser."""

from portfolio_review.insights.defaults import DEFAULT_SUMMARY, MAX_RECOMMENDATIONS
from portfolio_review.insights.models import Allocation, RiskLevel
from portfolio_review.insights.text_parser import (
    TextInsightParser,
    clean_recommendations,
    parse_insight_text,
)

_ALL_FIELDS = [
    "summary",
    "current_value",
    "annual_return",
    "risk_level",
    "asset_count",
    "allocation.equity",
    "allocation.debt",
    "allocation.cash",
    "allocation.others",
    "recommendations",
]

_RECOMMENDATION_LINES = [
    "Increase allocation to large cap index funds",
    "Reduce exposure to sector specific themes",
    "Build an emergency reserve in liquid instruments",
    "Review expense ratios across all schemes",
    "Add an international equity component",
    "Move idle savings into short duration debt",
    "Automate monthly contributions via SIP",
    "Revisit the asset mix every twelve months",
]


class TestDefaults:
    def test_empty_text_yields_all_defaults(self) -> None:
        insight = parse_insight_text("")
        assert insight.summary == DEFAULT_SUMMARY
        assert insight.current_value == 0.0
        assert insight.annual_return == 0.0
        assert insight.risk_level is RiskLevel.MODERATE
        assert insight.asset_count == 0
        assert insight.allocation == Allocation()
        assert insight.recommendations == []

    def test_unrelated_text_never_raises(self) -> None:
        insight = parse_insight_text("lorem ipsum %%% 12 ### ::: \n\n\t")
        assert insight.summary == DEFAULT_SUMMARY
        assert insight.recommendations == []

    def test_none_is_treated_as_empty(self) -> None:
        insight = parse_insight_text(None)  # type: ignore[arg-type]
        assert insight.summary == DEFAULT_SUMMARY

    def test_report_lists_every_defaulted_field(self) -> None:
        _insight, defaulted = TextInsightParser().parse_with_report("")
        assert defaulted == _ALL_FIELDS

    def test_report_omits_found_fields(self) -> None:
        _insight, defaulted = TextInsightParser().parse_with_report("Annual return: 9.5%")
        assert "annual_return" not in defaulted
        assert set(defaulted) == set(_ALL_FIELDS) - {"annual_return"}

    def test_parse_is_deterministic(self) -> None:
        text = "Summary: Steady growth.\n\nRisk level: High\nEquity: 70%"
        assert parse_insight_text(text) == parse_insight_text(text)


class TestFieldExtraction:
    def test_extracts_core_fields(self) -> None:
        text = (
            "Summary: A conservative portfolio focused on capital preservation.\n"
            "\n"
            "Current Value: ₹150,000\n"
            "Annual Return: 8%\n"
            "Risk Level: Low\n"
            "Equity: 45%\n"
        )
        insight = parse_insight_text(text)
        assert insight.summary == "A conservative portfolio focused on capital preservation."
        assert insight.current_value == 150000.0
        assert insight.annual_return == 8.0
        assert insight.risk_level is RiskLevel.LOW
        assert insight.allocation.equity == 45.0
        assert insight.allocation.debt == 0.0
        assert insight.asset_count == 0

    def test_current_value_with_currency_and_decimals(self) -> None:
        insight = parse_insight_text("Current portfolio value is $1,234.56 today")
        assert insight.current_value == 1234.56

    def test_negative_annual_return(self) -> None:
        insight = parse_insight_text("Annualized return of -3.2% over the period")
        assert insight.annual_return == -3.2

    def test_high_risk(self) -> None:
        insight = parse_insight_text("Risk Profile: High")
        assert insight.risk_level is RiskLevel.HIGH

    def test_medium_risk_maps_to_moderate(self) -> None:
        _insight, defaulted = TextInsightParser().parse_with_report("The risk is medium.")
        assert "risk_level" not in defaulted

    def test_asset_count(self) -> None:
        insight = parse_insight_text("Number of funds: 12")
        assert insight.asset_count == 12

    def test_asset_count_ignores_decimals_and_percentages(self) -> None:
        assert parse_insight_text("Holdings: 3.5 units").asset_count == 0
        assert parse_insight_text("Equity funds 45% of total").asset_count == 0

    def test_annual_return_with_approx_qualifier(self) -> None:
        assert parse_insight_text("Annual return of approx 8%").annual_return == 8.0
        assert parse_insight_text("Annual returns: approx. 11.5%").annual_return == 11.5

    def test_allocation_fields(self) -> None:
        text = "Allocation:\nEquity: 60%\nDebt: 25.5%\nCash: 4.5%\nOther: 10%"
        allocation = parse_insight_text(text).allocation
        assert allocation == Allocation(equity=60.0, debt=25.5, cash=4.5, others=10.0)

    def test_allocation_is_not_normalized(self) -> None:
        allocation = parse_insight_text("Equity: 80%\nDebt: 40%").allocation
        assert allocation.equity + allocation.debt == 120.0


class TestSummary:
    def test_stops_at_numbered_header(self) -> None:
        text = (
            "1. Summary: The portfolio is well diversified\n"
            "across equity and debt.\n"
            "2. Current Value: 250000\n"
        )
        insight = parse_insight_text(text)
        assert insight.summary == "The portfolio is well diversified across equity and debt."
        assert insight.current_value == 250000.0

    def test_markdown_header(self) -> None:
        text = "**Summary:** Growth oriented allocation.\n\nRisk: High"
        assert parse_insight_text(text).summary == "Growth oriented allocation."

    def test_empty_summary_falls_back(self) -> None:
        _insight, defaulted = TextInsightParser().parse_with_report("Summary:\n\nRisk: Low")
        assert "summary" in defaulted

    def test_ignores_summary_mentioned_in_prose(self) -> None:
        text = (
            "Here is a summary of your portfolio analysis.\n\n"
            "Portfolio Summary: Well diversified across equity and debt.\n"
        )
        assert parse_insight_text(text).summary == "Well diversified across equity and debt."

    def test_prose_only_summary_mention_falls_back(self) -> None:
        _insight, defaulted = TextInsightParser().parse_with_report(
            "This summary covers three funds held since 2019."
        )
        assert "summary" in defaulted


class TestRecommendations:
    def test_numbered_list_is_capped(self) -> None:
        body = "\n".join(f"{i}. {line}" for i, line in enumerate(_RECOMMENDATION_LINES, 1))
        insight = parse_insight_text(f"Recommendations:\n{body}\n")
        assert insight.recommendations == _RECOMMENDATION_LINES[:MAX_RECOMMENDATIONS]

    def test_bullets_bold_and_short_items(self) -> None:
        text = (
            "**Recommendations:**\n"
            "- **Rebalance** towards debt instruments\n"
            "* Short\n"
            "• Add an international equity fund for diversification\n"
        )
        insight = parse_insight_text(text)
        assert insight.recommendations == [
            "Rebalance towards debt instruments",
            "Add an international equity fund for diversification",
        ]

    def test_block_ends_at_blank_line(self) -> None:
        text = (
            "Recommendations for improvement:\n"
            "1. Diversify into index funds gradually\n"
            "\n"
            "This closing paragraph is not a recommendation."
        )
        insight = parse_insight_text(text)
        assert insight.recommendations == ["Diversify into index funds gradually"]

    def test_block_ends_at_next_header(self) -> None:
        text = (
            "Recommendations:\n"
            "- Consolidate overlapping mid cap schemes\n"
            "Risk Level: High\n"
        )
        insight = parse_insight_text(text)
        assert insight.recommendations == ["Consolidate overlapping mid cap schemes"]
        assert insight.risk_level is RiskLevel.HIGH

    def test_numbers_in_list_are_not_asset_counts(self) -> None:
        text = "Recommendations:\n1. Switch to direct plan funds\n2. Review quarterly\n"
        assert parse_insight_text(text).asset_count == 0

    def test_items_starting_with_numbers_are_kept_whole(self) -> None:
        text = (
            "Recommendations:\n"
            "1. 10-year government bonds would add stability\n"
            "2. 3-5 funds overlap heavily and should be merged\n"
        )
        assert parse_insight_text(text).recommendations == [
            "10-year government bonds would add stability",
            "3-5 funds overlap heavily and should be merged",
        ]


class TestCleanRecommendations:
    def test_strips_markers_and_drops_short_lines(self) -> None:
        lines = ["1) Keep a six month buffer", "(2) ok", "- Trim the small cap tilt", ""]
        assert clean_recommendations(lines) == [
            "Keep a six month buffer",
            "Trim the small cap tilt",
        ]

    def test_length_boundary(self) -> None:
        assert clean_recommendations(["a" * 10, "b" * 11]) == ["b" * 11]

    def test_caps_count(self) -> None:
        lines = [f"Recommendation number {i}" for i in range(10)]
        assert len(clean_recommendations(lines)) == MAX_RECOMMENDATIONS

    def test_strips_only_one_marker(self) -> None:
        lines = ["- 10-year bonds would add stability", "10-year bonds would add stability"]
        assert clean_recommendations(lines) == [
            "10-year bonds would add stability",
            "10-year bonds would add stability",
        ]
