"""
Interview Tracker: interview practice with scored answers and progress analytics.

Answers are evaluated by an AI backend when one is configured and by a keyword
heuristic otherwise. Scored sessions are aggregated into per-category, per-role
and monthly statistics with generated insights.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
