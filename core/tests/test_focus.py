"""
Focus Session Tests

Test IDs: FOCUS-001 to FOCUS-018
Coverage: /api/focus/, /api/focus/settings/
"""
from datetime import datetime, timedelta

from django.utils import timezone
from freezegun import freeze_time

from core.models import FocusSession, FocusSettings
from core.tests.base import BaseAPITestCase
from core.tests.factories import FocusSessionFactory, UserFactory

NOW = timezone.make_aware(datetime(2024, 6, 12, 15, 0))


@freeze_time('2024-06-12 15:00:00')
class FocusRecordTests(BaseAPITestCase):

    def test_FOCUS_001_record_session(self):
        response = self.post('/api/focus/', {
            'duration': 25, 'session_type': 'focus', 'task_title': '  Draft essay  ',
        })

        session = self.assertSuccess(response, 201)['data']['session']
        self.assertEqual(session['duration'], 25)
        self.assertEqual(session['task_title'], 'Draft essay')
        self.assertTrue(session['completed'])
        self.assertTrue(session['date'].startswith('2024-06-12T15:00'))

    def test_FOCUS_002_blank_title_is_null(self):
        response = self.post('/api/focus/', {'duration': 5, 'session_type': 'shortBreak', 'task_title': '   '})
        self.assertIsNone(self.assertSuccess(response, 201)['data']['session']['task_title'])

    def test_FOCUS_003_duration_bounds(self):
        self.assertValidationError(self.post('/api/focus/', {'duration': 0}), field='duration')
        self.assertValidationError(self.post('/api/focus/', {'duration': 1441}), field='duration')
        self.assertSuccess(self.post('/api/focus/', {'duration': 1440}), 201)

    def test_FOCUS_004_unknown_type(self):
        response = self.post('/api/focus/', {'duration': 10, 'session_type': 'nap'})
        self.assertValidationError(response, field='session_type')

    def test_FOCUS_005_future_completion_rejected(self):
        response = self.post('/api/focus/', {'duration': 10, 'completed_at': '2024-06-13T00:00:00Z'})
        self.assertValidationError(response, field='completed_at')
        self.assertEqual(FocusSession.objects.count(), 0)

    def test_FOCUS_006_past_completion_kept(self):
        response = self.post('/api/focus/', {'duration': 10, 'completed_at': '2024-06-10T08:00:00Z'})
        session = self.assertSuccess(response, 201)['data']['session']
        self.assertTrue(session['date'].startswith('2024-06-10T08:00'))


@freeze_time('2024-06-12 15:00:00')
class FocusStatsTests(BaseAPITestCase):

    def test_FOCUS_007_empty_stats(self):
        stats = self.assertSuccess(self.get('/api/focus/'))['data']

        self.assertEqual(stats['today'], {'focus_time': 0, 'sessions': 0})
        self.assertEqual(stats['week']['avg_daily_focus_time'], 0)
        self.assertEqual(stats['all_time']['current_streak'], 0)
        self.assertEqual(len(stats['last_7_days']), 7)
        self.assertEqual(len(stats['last_30_days']), 30)
        self.assertEqual(stats['type_breakdown'], [])

    def test_FOCUS_008_windows_and_averages(self):
        FocusSessionFactory.create(self.user, duration=30, date=NOW - timedelta(hours=1))
        FocusSessionFactory.create(self.user, duration=40, date=NOW - timedelta(days=3))
        FocusSessionFactory.create(self.user, duration=50, date=NOW - timedelta(days=20))
        FocusSessionFactory.create(self.user, duration=60, date=NOW - timedelta(days=90))
        # Incomplete sessions never count
        FocusSessionFactory.create(self.user, duration=99, completed=False)

        stats = self.assertSuccess(self.get('/api/focus/'))['data']

        self.assertEqual(stats['today'], {'focus_time': 30, 'sessions': 1})
        self.assertEqual(stats['week']['focus_time'], 70)
        self.assertEqual(stats['week']['sessions'], 2)
        self.assertEqual(stats['week']['avg_daily_focus_time'], 10)
        self.assertEqual(stats['week']['avg_daily_sessions'], 0.3)
        self.assertEqual(stats['month']['focus_time'], 120)
        self.assertEqual(stats['month']['avg_daily_focus_time'], 4)
        self.assertEqual(stats['month']['avg_daily_sessions'], 0.1)
        self.assertEqual(stats['all_time']['total_sessions'], 4)
        self.assertEqual(stats['all_time']['total_focus_time'], 180)

    def test_FOCUS_009_streaks(self):
        for offset in (0, 1, 2, 5, 6, 7, 8):
            FocusSessionFactory.create(self.user, date=NOW - timedelta(days=offset))
        # A second session on the same day counts once
        FocusSessionFactory.create(self.user, date=NOW - timedelta(days=1, hours=2))

        all_time = self.assertSuccess(self.get('/api/focus/'))['data']['all_time']

        self.assertEqual(all_time['current_streak'], 3)
        self.assertEqual(all_time['longest_streak'], 4)

    def test_FOCUS_010_breakdowns(self):
        FocusSessionFactory.create(self.user, duration=25, session_type='focus')
        FocusSessionFactory.create(self.user, duration=5, session_type='shortBreak')
        FocusSessionFactory.create(self.user, duration=25, session_type='focus', date=NOW - timedelta(days=1))

        stats = self.assertSuccess(self.get('/api/focus/'))['data']

        self.assertEqual(stats['last_7_days'][-1], {'date': '2024-06-12', 'sessions': 2, 'focus_time': 30})
        self.assertEqual(stats['last_7_days'][-2], {'date': '2024-06-11', 'sessions': 1, 'focus_time': 25})
        self.assertEqual(stats['type_breakdown'], [
            {'type': 'focus', 'count': 2, 'total_time': 50},
            {'type': 'shortBreak', 'count': 1, 'total_time': 5},
        ])

    def test_FOCUS_011_recording_refreshes_stats(self):
        self.assertEqual(self.assertSuccess(self.get('/api/focus/'))['data']['today']['sessions'], 0)

        self.post('/api/focus/', {'duration': 15})

        self.assertEqual(self.assertSuccess(self.get('/api/focus/'))['data']['today']['sessions'], 1)

    def test_FOCUS_012_other_users_sessions_ignored(self):
        FocusSessionFactory.create(UserFactory.create(), duration=45)
        stats = self.assertSuccess(self.get('/api/focus/'))['data']
        self.assertEqual(stats['all_time']['total_sessions'], 0)


class FocusSettingsTests(BaseAPITestCase):

    def test_FOCUS_013_defaults_on_first_read(self):
        settings = self.assertSuccess(self.get('/api/focus/settings/'))['data']['settings']

        self.assertEqual(settings, {
            'focus_duration': 25,
            'short_break_duration': 5,
            'long_break_duration': 15,
            'auto_start_breaks': False,
            'auto_start_focus': False,
            'enable_music': True,
            'music_volume': 50,
        })
        self.assertTrue(FocusSettings.objects.filter(user=self.user).exists())

    def test_FOCUS_014_partial_update(self):
        response = self.post('/api/focus/settings/', {'focus_duration': 50, 'enable_music': False})

        settings = self.assertSuccess(response)['data']['settings']
        self.assertEqual(settings['focus_duration'], 50)
        self.assertFalse(settings['enable_music'])
        self.assertEqual(settings['short_break_duration'], 5)

        again = self.assertSuccess(self.patch('/api/focus/settings/', {'music_volume': 0}))['data']['settings']
        self.assertEqual(again['focus_duration'], 50)
        self.assertEqual(again['music_volume'], 0)

    def test_FOCUS_015_bounds(self):
        for field, bad in [
            ('focus_duration', 0), ('focus_duration', 121),
            ('short_break_duration', 31), ('long_break_duration', 61),
            ('music_volume', -1), ('music_volume', 101),
        ]:
            self.assertValidationError(self.post('/api/focus/settings/', {field: bad}), field=field)

        self.assertSuccess(self.post('/api/focus/settings/', {'focus_duration': 120, 'long_break_duration': 60}))

    def test_FOCUS_016_out_of_range_leaves_settings_untouched(self):
        self.post('/api/focus/settings/', {'focus_duration': 45})

        self.assertValidationError(self.put('/api/focus/settings/', {'focus_duration': 30, 'music_volume': 500}),
                                   field='music_volume')

        self.assertEqual(FocusSettings.objects.get(user=self.user).focus_duration, 45)

    def test_FOCUS_017_empty_update_rejected(self):
        self.assertValidationError(self.post('/api/focus/settings/', {}), field='settings')

    def test_FOCUS_018_settings_are_per_user(self):
        other = UserFactory.create()
        FocusSettings.objects.create(user=other, focus_duration=90)

        settings = self.assertSuccess(self.get('/api/focus/settings/'))['data']['settings']

        self.assertEqual(settings['focus_duration'], 25)
