"""
Behavioral Insights Engine Package

Rule-based insights for the analytics report.
"""
from core.behavioral.insights_engine import (
    InsightType,
    Insight,
    generate_insights,
)

__all__ = [
    'InsightType',
    'Insight',
    'generate_insights',
]
