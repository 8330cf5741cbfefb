from portfolio_review.insights.models import Allocation, Insight, RiskLevel


class TestInsightToDict:
    def test_camel_case_shape(self) -> None:
        insight = Insight(
            summary="Balanced",
            current_value=1000.0,
            annual_return=7.5,
            risk_level=RiskLevel.HIGH,
            asset_count=4,
            allocation=Allocation(equity=70.0, debt=30.0),
            recommendations=["Keep a cash buffer of six months"],
        )
        assert insight.to_dict() == {
            "summary": "Balanced",
            "currentValue": 1000.0,
            "annualReturn": 7.5,
            "riskLevel": "High",
            "assetCount": 4,
            "allocation": {"equity": 70.0, "debt": 30.0, "cash": 0.0, "others": 0.0},
            "recommendations": ["Keep a cash buffer of six months"],
        }

    def test_recommendations_are_copied(self) -> None:
        insight = Insight(summary="Balanced", recommendations=["Keep a cash buffer"])
        insight.to_dict()["recommendations"].append("mutated")
        assert insight.recommendations == ["Keep a cash buffer"]
