"""Insight generation and progress analytics."""

from .insights import InsightGenerator, best_category
from .aggregator import AnalyticsAggregator, subtract_months

__all__ = ["AnalyticsAggregator", "InsightGenerator", "best_category", "subtract_months"]
