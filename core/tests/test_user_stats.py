"""
User Stats Tests

Test IDs: STATS-001 to STATS-008
Coverage: StatsService, /api/user/stats/
"""
from datetime import date, datetime, timedelta

import pytest
from django.utils import timezone
from freezegun import freeze_time

from core.services.goal_service import GoalService
from core.services.stats_service import StatsService
from core.services.task_service import TaskService
from core.tests.factories import TaskFactory, GoalFactory

TODAY = date(2024, 6, 12)  # Wednesday; the week began Sunday 9 June


def at(day, hour=9):
    return timezone.make_aware(datetime(day.year, day.month, day.day, hour, 0))


@pytest.mark.django_db
@freeze_time('2024-06-12 15:00:00')
class TestUserStats:

    def test_STATS_001_empty_user(self, user):
        stats = StatsService.compute_user_stats(user)

        assert stats == {
            'streak': 0,
            'productivity_score': 0,
            'tasks_completed': 0,
            'total_tasks': 0,
            'weekly_goals': 0,
            'completed_goals': 0,
            'completion_rate': 0,
            'achievements': [],
        }

    def test_STATS_002_streak_and_score(self, user):
        for offset in (0, 1, 2):
            TaskFactory.completed(user, completed_at=at(TODAY - timedelta(days=offset)))
        TaskFactory.create(user)

        stats = StatsService.compute_user_stats(user)

        assert stats['streak'] == 3
        assert stats['tasks_completed'] == 3
        assert stats['total_tasks'] == 4
        assert stats['completion_rate'] == 75
        # 75 + 3 * 2
        assert stats['productivity_score'] == 81

    def test_STATS_003_no_grace_for_today(self, user):
        """Unlike the analytics report, nothing completed today means no streak."""
        for offset in (1, 2, 3):
            TaskFactory.completed(user, completed_at=at(TODAY - timedelta(days=offset)))

        assert StatsService.compute_user_stats(user)['streak'] == 0

    def test_STATS_004_score_capped(self, user):
        for offset in range(15):
            TaskFactory.completed(user, completed_at=at(TODAY - timedelta(days=offset)))

        stats = StatsService.compute_user_stats(user)

        assert stats['streak'] == 15
        assert stats['productivity_score'] == 100

    def test_STATS_005_weekly_goals_since_sunday(self, user):
        GoalFactory.create(user, created_at=at(date(2024, 6, 9), 0))
        GoalFactory.create(user, created_at=at(date(2024, 6, 11)), completed=True)
        # Saturday belongs to the previous week
        GoalFactory.create(user, created_at=at(date(2024, 6, 8), 23), completed=True)

        stats = StatsService.compute_user_stats(user)

        assert stats['weekly_goals'] == 2
        assert stats['completed_goals'] == 1

    def test_STATS_006_cached_until_task_change(self, user):
        assert StatsService.get_user_stats(user)['total_tasks'] == 0

        # Direct ORM writes bypass invalidation
        TaskFactory.create(user)
        assert StatsService.get_user_stats(user)['total_tasks'] == 0

        TaskService().create_task(user, {'title': 'Counted'})
        assert StatsService.get_user_stats(user)['total_tasks'] == 2

    def test_STATS_007_goal_writes_invalidate(self, user):
        assert StatsService.get_user_stats(user)['weekly_goals'] == 0

        GoalService().create_goal(user, {'title': 'Read daily', 'category': 'personal', 'target': 5})

        assert StatsService.get_user_stats(user)['weekly_goals'] == 1

    def test_STATS_008_endpoint(self, authenticated_client, user):
        TaskFactory.completed(user, completed_at=at(TODAY))

        response = authenticated_client.get('/api/user/stats/')

        body = response.json()
        assert response.status_code == 200
        assert body['data']['streak'] == 1
        assert body['data']['completion_rate'] == 100

    def test_STATS_009_endpoint_requires_auth(self, api_client):
        response = api_client.get('/api/user/stats/')

        assert response.status_code == 401
        assert response.json()['error']['code'] == 'UNAUTHORIZED'
