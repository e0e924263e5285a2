"""
Task Management Service

Centralizes all task-related business logic from views.
Provides clean interface for task operations with proper validation and error handling.
"""
import logging
import math
from typing import Dict, Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.models import Task, Category
from core.helpers.cache_helpers import (
    get_user_cached, set_user_cached, invalidate_user_cache, TASK_NAMESPACES
)
from core.exceptions import TaskNotFoundError, ResourceNotFoundError, ValidationError
from core.utils.constants import (
    TASK_STATUS_CHOICES,
    TASK_STATUS_COMPLETED,
    TASK_PRIORITY_CHOICES,
    ENERGY_LEVEL_CHOICES,
    MIN_ESTIMATED_TIME,
    MAX_ESTIMATED_TIME,
)
from core.utils.logging_utils import log_with_context
from core.utils.pagination_helpers import paginate, page_metadata
from core.utils.time_utils import parse_datetime

logger = logging.getLogger(__name__)


def _iso(value):
    return value.isoformat() if value else None


def serialize_category(category: Optional[Category]) -> Optional[Dict]:
    if category is None:
        return None
    return {
        'id': category.id,
        'name': category.name,
        'color': category.color,
        'icon': category.icon,
    }


def serialize_task(task: Task) -> Dict:
    return {
        'id': task.id,
        'title': task.title,
        'description': task.description,
        'status': task.status,
        'priority': task.priority,
        'urgent': task.urgent,
        'important': task.important,
        'estimated_time': task.estimated_time,
        'energy_level': task.energy_level,
        'due_date': _iso(task.due_date),
        'completed_at': _iso(task.completed_at),
        'ai_suggested': task.ai_suggested,
        'ai_reason': task.ai_reason,
        'category': serialize_category(task.category),
        'goal_id': task.goal_id,
        'subtasks': [
            {'id': s.id, 'title': s.title, 'completed': s.completed}
            for s in task.subtasks.all()
        ],
        'created_at': _iso(task.created_at),
        'updated_at': _iso(task.updated_at),
    }


def clamp_estimated_time(value) -> Optional[int]:
    """Clamp minutes to [1, 1440]; anything non-numeric becomes None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return int(max(MIN_ESTIMATED_TIME, min(MAX_ESTIMATED_TIME, value)))


def normalize_status(value) -> Optional[str]:
    """Upper-cased status when valid, otherwise None (caller ignores it)."""
    if not isinstance(value, str):
        return None
    status = value.strip().upper()
    return status if status in TASK_STATUS_CHOICES else None


def _normalize_choice(value, choices) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip().upper()
    return value if value in choices else None


def _clean_text(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


class TaskService:
    """
    Service for managing task operations.

    Every lookup is scoped to the requesting user; another user's task is
    indistinguishable from a missing one.
    """

    def _get_owned_task(self, user, task_id: str) -> Task:
        try:
            return Task.objects.select_related('category').get(id=task_id, user=user)
        except Task.DoesNotExist:
            raise TaskNotFoundError(task_id)

    def _get_owned_category(self, user, category_id: str) -> Category:
        try:
            return Category.objects.get(id=category_id, user=user)
        except Category.DoesNotExist:
            raise ResourceNotFoundError('Category', category_id)

    def list_tasks(self, user, page=1, limit=20) -> Dict:
        """
        Paginated task list, most pressing first.

        Returns:
            {'tasks': [...], 'pagination': {...}}
        """
        page, limit, skip = paginate(page, limit)

        cached = get_user_cached('tasks', user.id, page, limit)
        if cached is not None:
            return cached

        qs = (
            Task.objects.filter(user=user)
            .select_related('category')
            .prefetch_related('subtasks')
            .order_by(
                '-urgent',
                '-important',
                F('due_date').asc(nulls_last=True),
                '-created_at',
            )
        )
        total = qs.count()
        tasks = [serialize_task(t) for t in qs[skip:skip + limit]]

        result = {
            'tasks': tasks,
            'pagination': page_metadata(page, limit, total),
        }
        set_user_cached('tasks', user.id, result, page, limit)
        return result

    def get_task(self, user, task_id: str) -> Dict:
        return serialize_task(self._get_owned_task(user, task_id))

    @transaction.atomic
    def create_task(self, user, data: Dict) -> Dict:
        """
        Create a task from loosely typed client input.

        Raises:
            ValidationError: If title is missing or blank
            ResourceNotFoundError: If category_id is not the user's
        """
        title = data.get('title')
        if not isinstance(title, str) or not title.strip():
            raise ValidationError('title', 'Task title is required')

        task = Task(
            user=user,
            title=title.strip(),
            description=_clean_text(data.get('description')),
            urgent=bool(data.get('urgent')),
            important=bool(data.get('important')),
            due_date=parse_datetime(data.get('due_date')),
            estimated_time=clamp_estimated_time(data.get('estimated_time')),
            energy_level=_normalize_choice(data.get('energy_level'), ENERGY_LEVEL_CHOICES),
            ai_suggested=bool(data.get('ai_suggested', False)),
            ai_reason=_clean_text(data.get('ai_reason')),
        )

        priority = _normalize_choice(data.get('priority'), TASK_PRIORITY_CHOICES)
        if priority:
            task.priority = priority

        status = normalize_status(data.get('status'))
        if status:
            task.status = status
            if status == TASK_STATUS_COMPLETED:
                task.completed_at = timezone.now()

        if data.get('category_id'):
            task.category = self._get_owned_category(user, data['category_id'])

        task.save()

        invalidate_user_cache(user.id, *TASK_NAMESPACES)
        log_with_context('info', 'Task created', user_id=user.id, task_id=task.id)

        return serialize_task(task)

    @transaction.atomic
    def update_task(self, user, task_id: str, data: Dict) -> Dict:
        """
        Partial update. Only keys present in ``data`` are touched.

        Status changes stamp or clear completed_at; an explicit
        ``completed_at`` in the payload is applied last and wins.
        """
        task = self._get_owned_task(user, task_id)

        if 'title' in data and isinstance(data['title'], str):
            task.title = data['title'].strip() or task.title

        if 'description' in data:
            description = data['description']
            task.description = description.strip() if isinstance(description, str) else None

        if 'status' in data:
            status = normalize_status(data['status'])
            if status:
                task.status = status
                task.completed_at = timezone.now() if status == TASK_STATUS_COMPLETED else None

        if 'completed_at' in data:
            task.completed_at = parse_datetime(data['completed_at'])

        if 'urgent' in data:
            task.urgent = bool(data['urgent'])
        if 'important' in data:
            task.important = bool(data['important'])

        if 'due_date' in data:
            task.due_date = parse_datetime(data['due_date'])

        if 'category_id' in data:
            category_id = data['category_id']
            task.category = self._get_owned_category(user, category_id) if category_id else None

        if 'estimated_time' in data:
            task.estimated_time = clamp_estimated_time(data['estimated_time'])

        if 'energy_level' in data:
            task.energy_level = _normalize_choice(data['energy_level'], ENERGY_LEVEL_CHOICES)

        if 'priority' in data:
            priority = _normalize_choice(data['priority'], TASK_PRIORITY_CHOICES)
            if priority:
                task.priority = priority

        task.save()

        invalidate_user_cache(user.id, *TASK_NAMESPACES)
        log_with_context('info', 'Task updated', user_id=user.id, task_id=task.id,
                         status=task.status)

        return serialize_task(task)

    @transaction.atomic
    def delete_task(self, user, task_id: str) -> Dict:
        task = self._get_owned_task(user, task_id)
        info = {'id': task.id, 'title': task.title}
        task.delete()

        invalidate_user_cache(user.id, *TASK_NAMESPACES)
        log_with_context('info', 'Task deleted', user_id=user.id, task_id=info['id'])

        return info
