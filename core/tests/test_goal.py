"""
Goals & Progress Tests

Test IDs: GOAL-001 to GOAL-010
Coverage: /api/goals/, /api/goals/{id}/

These tests cover:
- Goal CRUD operations
- Progress-driven completion
- Category validation
"""
from core.models import Goal
from core.tests.base import BaseAPITestCase
from core.tests.factories import GoalFactory, UserFactory


class GoalCreateTests(BaseAPITestCase):

    def test_GOAL_001_create_goal(self):
        response = self.post('/api/goals/', {
            'title': 'Memorize Surah Mulk',
            'category': 'ibadah',
            'target': '30',
            'deadline': '2030-01-01T00:00:00Z',
        })

        goal = self.assertSuccess(response, 201)['data']['goal']
        self.assertEqual(goal['category'], 'IBADAH')
        self.assertEqual(goal['target'], 30)
        self.assertEqual(goal['progress'], 0)
        self.assertFalse(goal['completed'])
        self.assertTrue(goal['deadline'].startswith('2030-01-01'))

    def test_GOAL_002_required_fields(self):
        self.assertValidationError(self.post('/api/goals/', {'category': 'WORK', 'target': 3}), field='title')
        self.assertValidationError(self.post('/api/goals/', {'title': 'x', 'target': 3}), field='category')
        self.assertValidationError(self.post('/api/goals/', {'title': 'x', 'category': 'WORK'}), field='target')

    def test_GOAL_003_invalid_category(self):
        response = self.post('/api/goals/', {'title': 'x', 'category': 'HOBBY', 'target': 3})
        self.assertValidationError(response, field='category')

    def test_GOAL_004_list_newest_first(self):
        GoalFactory.create(self.user, title='first')
        GoalFactory.create(self.user, title='second')
        GoalFactory.create(UserFactory.create(), title='foreign')

        data = self.assertSuccess(self.get('/api/goals/'))
        titles = [g['title'] for g in data['data']['goals']]

        self.assertEqual(sorted(titles), ['first', 'second'])


class GoalUpdateTests(BaseAPITestCase):

    def test_GOAL_005_progress_reaching_target_completes(self):
        goal = GoalFactory.create(self.user, target=10)

        body = self.assertSuccess(self.patch(f'/api/goals/{goal.id}/', {'progress': 10}))

        self.assertTrue(body['data']['goal']['completed'])
        self.assertEqual(body['feedback']['type'], 'celebration')

    def test_GOAL_006_progress_below_target(self):
        goal = GoalFactory.create(self.user, target=10)

        data = self.assertSuccess(self.patch(f'/api/goals/{goal.id}/', {'progress': 4}))['data']

        self.assertEqual(data['goal']['progress'], 4)
        self.assertFalse(data['goal']['completed'])

    def test_GOAL_007_explicit_completed_applied_last(self):
        goal = GoalFactory.create(self.user, target=10)

        data = self.assertSuccess(self.patch(
            f'/api/goals/{goal.id}/', {'progress': 12, 'completed': False}
        ))['data']

        self.assertFalse(data['goal']['completed'])

    def test_GOAL_008_compares_against_stored_target(self):
        """GOAL-008: A target raised in the same request does not move the bar."""
        goal = GoalFactory.create(self.user, target=10)

        data = self.assertSuccess(self.patch(
            f'/api/goals/{goal.id}/', {'progress': 15, 'target': 20}
        ))['data']

        self.assertTrue(data['goal']['completed'])
        self.assertEqual(data['goal']['target'], 20)

    def test_GOAL_009_not_owned(self):
        goal = GoalFactory.create(UserFactory.create())
        self.assertNotFound(self.patch(f'/api/goals/{goal.id}/', {'progress': 1}))

    def test_GOAL_010_delete(self):
        goal = GoalFactory.create(self.user)
        self.assertSuccess(self.delete(f'/api/goals/{goal.id}/'))
        self.assertFalse(Goal.objects.filter(pk=goal.pk).exists())
