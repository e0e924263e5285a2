"""
Adhkar Tests

Test IDs: ADHKAR-001 to ADHKAR-013
Coverage: /api/adhkar/, /api/adhkar/list/, /api/adhkar/statistics/
"""
from datetime import date

import pytest
from freezegun import freeze_time

from core.models import AdhkarProgress
from core.services.adhkar_service import AdhkarService
from core.tests.factories import AdhkarFactory

TODAY = date(2024, 6, 12)


@pytest.mark.django_db
class TestAdhkarCatalog:

    def test_ADHKAR_001_full_catalog_is_public(self, api_client):
        response = api_client.get('/api/adhkar/list/')

        assert response.status_code == 200
        catalog = response.json()['data']['adhkar']
        assert list(catalog) == ['morning', 'evening', 'after_prayer', 'general']
        assert [a['id'] for a in catalog['morning']] == ['morning_1', 'morning_2', 'morning_3', 'morning_4']
        assert catalog['after_prayer'][2]['target'] == 34

    def test_ADHKAR_002_single_category(self, api_client):
        response = api_client.get('/api/adhkar/list/?category=evening')

        catalog = response.json()['data']['adhkar']
        assert list(catalog) == ['evening']
        assert [a['target'] for a in catalog['evening']] == [1, 3, 100]

    def test_ADHKAR_003_unknown_category(self, api_client):
        response = api_client.get('/api/adhkar/list/?category=night')

        assert response.status_code == 400
        assert 'category' in response.json()['error']['details']


@pytest.mark.django_db
@freeze_time('2024-06-12 15:00:00')
class TestAdhkarProgress:

    def test_ADHKAR_004_record_below_target(self, authenticated_client, user):
        response = authenticated_client.post('/api/adhkar/', {
            'adhkar_id': 'morning_3', 'category': 'morning', 'count': 40, 'target': 100,
        }, format='json')

        assert response.status_code == 200
        progress = response.json()['data']['progress']
        assert progress['count'] == 40
        assert progress['completed'] is False
        assert progress['adhkar_name'] == 'morning_3'
        assert progress['date'] == '2024-06-12'

    def test_ADHKAR_005_same_day_is_upsert(self, authenticated_client, user):
        payload = {'adhkar_id': 'general_2', 'adhkar_name': 'Astaghfirullah', 'category': 'general', 'target': 100}
        authenticated_client.post('/api/adhkar/', {**payload, 'count': 60}, format='json')

        response = authenticated_client.post('/api/adhkar/', {**payload, 'count': 100}, format='json')

        assert response.json()['data']['progress']['completed'] is True
        assert response.json()['feedback']['animation'] == 'checkmark'
        row = AdhkarProgress.objects.get(user=user)
        assert row.count == 100
        assert row.adhkar_name == 'Astaghfirullah'

    @pytest.mark.parametrize('payload,field', [
        ({'category': 'morning', 'count': 1, 'target': 1}, 'adhkar_id'),
        ({'adhkar_id': 'x', 'category': 'night', 'count': 1, 'target': 1}, 'category'),
        ({'adhkar_id': 'x', 'category': 'morning', 'count': -1, 'target': 1}, 'count'),
        ({'adhkar_id': 'x', 'category': 'morning', 'count': 1, 'target': 0}, 'target'),
        ({'adhkar_id': 'x', 'category': 'morning', 'target': 1}, 'count'),
    ])
    def test_ADHKAR_006_validation(self, authenticated_client, payload, field):
        response = authenticated_client.post('/api/adhkar/', payload, format='json')

        assert response.status_code == 400
        assert field in response.json()['error']['details']
        assert AdhkarProgress.objects.count() == 0

    def test_ADHKAR_007_progress_for_day_and_category(self, authenticated_client, user, other_user):
        AdhkarFactory.create(user, TODAY, 'morning_1', 'morning', count=1, target=1)
        AdhkarFactory.create(user, TODAY, 'evening_1', 'evening', count=1, target=1)
        AdhkarFactory.create(user, date(2024, 6, 11), 'morning_2', 'morning', count=1, target=1)
        AdhkarFactory.create(other_user, TODAY, 'morning_4', 'morning')

        today = authenticated_client.get('/api/adhkar/').json()['data']['progress']
        assert [p['adhkar_id'] for p in today] == ['evening_1', 'morning_1']

        morning = authenticated_client.get('/api/adhkar/?date=2024-06-12&category=morning')
        assert [p['adhkar_id'] for p in morning.json()['data']['progress']] == ['morning_1']

        yesterday = authenticated_client.get('/api/adhkar/?date=2024-06-11')
        assert [p['adhkar_id'] for p in yesterday.json()['data']['progress']] == ['morning_2']

    def test_ADHKAR_008_bad_date(self, authenticated_client):
        response = authenticated_client.get('/api/adhkar/?date=12-06-2024')

        assert response.status_code == 400
        assert 'date' in response.json()['error']['details']

    def test_ADHKAR_009_requires_auth(self, api_client):
        assert api_client.get('/api/adhkar/').status_code == 401
        assert api_client.get('/api/adhkar/statistics/').status_code == 401


@pytest.mark.django_db
@freeze_time('2024-06-12 15:00:00')
class TestAdhkarStatistics:

    def test_ADHKAR_010_statistics(self, user):
        AdhkarFactory.create(user, TODAY, 'morning_3', 'morning')
        AdhkarFactory.create(user, TODAY, 'evening_1', 'evening', count=0, target=1)
        AdhkarFactory.create(user, date(2024, 6, 11), 'general_1', 'general')
        for day in (7, 8, 9):
            AdhkarFactory.create(user, date(2024, 6, day), 'after_prayer_1', 'after_prayer', count=33, target=33)
        # Outside the 30-day window
        AdhkarFactory.create(user, date(2024, 5, 1), 'general_2', 'general')

        stats = AdhkarService().statistics(user)

        assert stats['total_completions'] == 5
        assert stats['category_completions'] == {
            'morning': 1, 'evening': 0, 'after_prayer': 3, 'general': 1,
        }
        assert stats['current_streak'] == 2
        assert stats['longest_streak'] == 3
        assert stats['completion_rate'] == 83
        assert stats['last_7_days'] == [False, True, True, True, False, True, True]
        assert len(stats['last_30_days']) == 30
        assert stats['last_30_days'][0] == {'date': '2024-05-14', 'completed': 0, 'total': 0}
        assert stats['last_30_days'][-1] == {'date': '2024-06-12', 'completed': 1, 'total': 2}

    def test_ADHKAR_011_streak_survives_empty_today(self, user):
        AdhkarFactory.create(user, date(2024, 6, 10), 'general_1', 'general')
        AdhkarFactory.create(user, date(2024, 6, 11), 'general_1', 'general')

        assert AdhkarService().statistics(user)['current_streak'] == 2

    def test_ADHKAR_012_incomplete_day_breaks_streak(self, user):
        AdhkarFactory.create(user, TODAY, 'general_1', 'general')
        AdhkarFactory.create(user, date(2024, 6, 11), 'general_1', 'general', count=5, target=100)
        AdhkarFactory.create(user, date(2024, 6, 10), 'general_1', 'general')

        stats = AdhkarService().statistics(user)

        assert stats['current_streak'] == 1
        assert stats['longest_streak'] == 1

    def test_ADHKAR_013_endpoint_empty_user(self, authenticated_client):
        response = authenticated_client.get('/api/adhkar/statistics/')

        assert response.status_code == 200
        stats = response.json()['data']['statistics']
        assert stats['total_completions'] == 0
        assert stats['completion_rate'] == 0
        assert stats['current_streak'] == 0
        assert stats['last_7_days'] == [False] * 7
