"""Fallback values used whenever an Insight field cannot be determined.

Both the free-text parser and the structured validator resolve missing fields
from this module only.
"""

from portfolio_review.insights.models import RiskLevel

DEFAULT_SUMMARY = "Analysis completed"
DEFAULT_CURRENT_VALUE = 0.0
DEFAULT_ANNUAL_RETURN = 0.0
DEFAULT_RISK_LEVEL = RiskLevel.MODERATE
DEFAULT_ASSET_COUNT = 0
DEFAULT_ALLOCATION_PERCENT = 0.0

MAX_RECOMMENDATIONS = 6
# Recommendations must be strictly longer than this after marker stripping.
MIN_RECOMMENDATION_LENGTH = 10
