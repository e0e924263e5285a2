"""
Behavioral Insights Engine

Rule-based insights for the analytics report. Purely deterministic: each
rule compares one metric against a static threshold.
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional

from core.utils.constants import (
    PRAYER_CHAMPION_THRESHOLD,
    STRONG_STREAK_THRESHOLD,
    HIGH_COMPLETION_THRESHOLD,
    LOW_COMPLETION_THRESHOLD,
    PATTERN_MIN_SAMPLE,
)


class InsightType(Enum):
    """Types of insights, rendered with different accents by the client"""
    ACHIEVEMENT = "achievement"
    POSITIVE = "positive"
    IMPROVEMENT = "improvement"
    PATTERN = "pattern"


@dataclass
class Insight:
    """
    A single insight card.

    Attributes:
        insight_type: InsightType
        title: Short headline
        description: One-sentence explanation with the evidence
        icon: Client icon name
        value: Optional headline figure ("92.0%", "8 days")
    """
    insight_type: InsightType
    title: str
    description: str
    icon: str
    value: Optional[str] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['type'] = data.pop('insight_type').value
        if data['value'] is None:
            del data['value']
        return data


def _format_hour(hour: int) -> str:
    suffix = 'AM' if hour < 12 else 'PM'
    display = hour % 12 or 12
    return f"{display} {suffix}"


def generate_insights(
    completion_rate: float,
    streak: int,
    prayer_consistency: float,
    patterns: Optional[Dict] = None
) -> List[Dict]:
    """
    Build the insight list in a fixed order.

    Args:
        completion_rate: Task completion percentage
        streak: Current completion streak in days
        prayer_consistency: Prayer completion percentage this month
        patterns: Report patterns block (best_weekday, best_hour, sample_size)

    Returns:
        List of insight dicts; never empty
    """
    insights: List[Insight] = []

    if prayer_consistency >= PRAYER_CHAMPION_THRESHOLD:
        insights.append(Insight(
            insight_type=InsightType.ACHIEVEMENT,
            title='Prayer Consistency Champion',
            description=(
                f"You've maintained {prayer_consistency:.1f}% prayer consistency - "
                f"fantastic spiritual discipline!"
            ),
            icon='award',
            value=f"{prayer_consistency:.1f}%",
        ))

    if streak >= STRONG_STREAK_THRESHOLD:
        insights.append(Insight(
            insight_type=InsightType.ACHIEVEMENT,
            title='Strong Streak!',
            description=f"You're on a {streak}-day streak! Keep up the excellent consistency.",
            icon='star',
            value=f"{streak} days",
        ))

    if completion_rate >= HIGH_COMPLETION_THRESHOLD:
        insights.append(Insight(
            insight_type=InsightType.POSITIVE,
            title='High Completion Rate',
            description=f"You're completing {completion_rate:.1f}% of your tasks. Excellent productivity!",
            icon='trending',
        ))
    elif completion_rate < LOW_COMPLETION_THRESHOLD:
        insights.append(Insight(
            insight_type=InsightType.IMPROVEMENT,
            title='Task Management Opportunity',
            description=(
                'Consider breaking down tasks into smaller, more manageable pieces '
                'to improve completion rate.'
            ),
            icon='target',
        ))

    if patterns and patterns.get('sample_size', 0) >= PATTERN_MIN_SAMPLE:
        weekday = patterns.get('best_weekday')
        hour = patterns.get('best_hour')
        if weekday is not None and hour is not None:
            insights.append(Insight(
                insight_type=InsightType.PATTERN,
                title='Peak Productivity',
                description=(
                    f"You finish the most tasks on {weekday}s, "
                    f"usually around {_format_hour(hour)}."
                ),
                icon='clock',
                value=weekday,
            ))

    if not insights:
        insights.append(Insight(
            insight_type=InsightType.POSITIVE,
            title='Keep Building Momentum',
            description='Stay consistent with your tasks and prayers to unlock more achievements.',
            icon='clock',
        ))

    return [insight.to_dict() for insight in insights]
