"""
Goal Service

Goals carry numeric progress toward a target and complete themselves
once progress reaches it.
"""
from typing import Dict, List

from django.db import transaction

from core.models import Goal
from core.exceptions import ResourceNotFoundError
from core.helpers.cache_helpers import invalidate_user_cache
from core.serializers import GoalCreateSerializer, GoalUpdateSerializer, validate_or_raise
from core.utils.logging_utils import log_with_context


def serialize_goal(goal: Goal) -> Dict:
    return {
        'id': goal.id,
        'title': goal.title,
        'description': goal.description,
        'category': goal.category,
        'target': goal.target,
        'progress': goal.progress,
        'deadline': goal.deadline.isoformat() if goal.deadline else None,
        'completed': goal.completed,
        'created_at': goal.created_at.isoformat() if goal.created_at else None,
        'updated_at': goal.updated_at.isoformat() if goal.updated_at else None,
    }


class GoalService:
    """Manage goal CRUD and progress-driven completion."""

    def _get_owned_goal(self, user, goal_id: str) -> Goal:
        try:
            return Goal.objects.get(id=goal_id, user=user)
        except Goal.DoesNotExist:
            raise ResourceNotFoundError('Goal', goal_id)

    def list_goals(self, user) -> List[Dict]:
        return [serialize_goal(g) for g in Goal.objects.filter(user=user).order_by('-created_at')]

    def create_goal(self, user, data: Dict) -> Dict:
        """
        Raises:
            ValidationError: If title, category or target is missing or invalid
        """
        validated = validate_or_raise(GoalCreateSerializer, data)
        goal = Goal.objects.create(
            user=user,
            title=validated['title'],
            description=validated.get('description'),
            category=validated['category'],
            target=validated['target'],
            deadline=validated.get('deadline'),
            progress=0,
            completed=False,
        )
        invalidate_user_cache(user.id, 'stats', 'analytics')
        log_with_context('info', 'Goal created', user_id=user.id, goal_id=goal.id)
        return serialize_goal(goal)

    @transaction.atomic
    def update_goal(self, user, goal_id: str, data: Dict) -> Dict:
        """
        Partial update.

        Progress at or past the stored target marks the goal completed;
        an explicit ``completed`` in the payload is applied after that.
        """
        goal = self._get_owned_goal(user, goal_id)
        validated = validate_or_raise(GoalUpdateSerializer, data, partial=True)
        stored_target = goal.target

        for field in ('title', 'description', 'category', 'target', 'deadline'):
            if field in validated:
                setattr(goal, field, validated[field])

        if 'progress' in validated:
            goal.progress = validated['progress']
            if goal.progress >= stored_target:
                goal.completed = True

        if 'completed' in validated:
            goal.completed = validated['completed']

        goal.save()
        invalidate_user_cache(user.id, 'stats', 'analytics')

        if goal.completed:
            log_with_context('info', 'Goal completed', user_id=user.id, goal_id=goal.id)

        return serialize_goal(goal)

    def delete_goal(self, user, goal_id: str) -> Dict:
        goal = self._get_owned_goal(user, goal_id)
        goal.delete()
        invalidate_user_cache(user.id, 'stats', 'analytics')
        return {'id': goal_id}
