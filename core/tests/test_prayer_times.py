"""
Prayer Times, Qibla & Next Prayer Tests

Outbound HTTP is mocked at requests.get.
"""
from datetime import date, datetime
from unittest.mock import patch, MagicMock

import pytest
import requests
from django.utils import timezone
from freezegun import freeze_time

from core.exceptions import ExternalServiceError, ExternalServiceTimeout, ValidationError
from core.services import prayer_times_service
from core.services.prayer_times_service import (
    calculate_qibla_direction,
    fetch_prayer_times,
    format_time,
    next_prayer,
    prayer_times_or_default,
    validate_coordinates,
)
from core.utils.constants import DEFAULT_PRAYER_TIMES


def aladhan_payload(**timing_overrides):
    timings = {
        'Fajr': '04:12 (EEST)',
        'Sunrise': '05:40 (EEST)',
        'Dhuhr': '12:51 (EEST)',
        'Asr': '16:30 (EEST)',
        'Maghrib': '20:01 (EEST)',
        'Isha': '21:29 (EEST)',
    }
    timings.update(timing_overrides)
    return {
        'code': 200,
        'status': 'OK',
        'data': {
            'timings': timings,
            'date': {
                'readable': '12 Jun 2024',
                'hijri': {'date': '06-12-1445', 'month': {'en': 'Dhū al-Ḥijjah'}, 'year': '1445'},
            },
        },
    }


def mock_response(payload, status_error=None):
    response = MagicMock()
    response.json.return_value = payload
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


class TestFormatting:

    @pytest.mark.parametrize('raw,expected', [
        ('05:12 (EET)', '05:12'),
        ('05:12:30', '05:12'),
        ('17:03', '17:03'),
        ('', None),
        (None, None),
    ])
    def test_format_time(self, raw, expected):
        assert format_time(raw) == expected

    def test_validate_coordinates_accepts_strings(self):
        assert validate_coordinates('21.5', '-0.1') == (21.5, -0.1)

    def test_validate_coordinates_accepts_zero(self):
        assert validate_coordinates(0, 0) == (0.0, 0.0)

    @pytest.mark.parametrize('lat,lon', [
        (None, 10), ('abc', 10), (91, 0), (0, -181), ('nan', 0),
    ])
    def test_validate_coordinates_rejects(self, lat, lon):
        with pytest.raises(ValidationError):
            validate_coordinates(lat, lon)


class TestQibla:

    def test_new_york(self):
        assert calculate_qibla_direction(40.7128, -74.0060) == 58

    def test_london(self):
        assert calculate_qibla_direction(51.5074, -0.1278) == 119

    def test_result_in_range(self):
        for lat, lon in [(-33.87, 151.21), (35.68, 139.69), (-1.29, 36.82)]:
            assert 0 <= calculate_qibla_direction(lat, lon) < 360


class TestNextPrayer:

    def test_next_prayer_later_today(self):
        now = timezone.make_aware(datetime(2024, 6, 12, 13, 40))
        result = next_prayer(DEFAULT_PRAYER_TIMES, now)

        assert result == {'name': 'Asr', 'time': '15:45', 'time_until': '2h 5m'}

    def test_minutes_only(self):
        now = timezone.make_aware(datetime(2024, 6, 12, 18, 0))
        assert next_prayer(DEFAULT_PRAYER_TIMES, now)['time_until'] == '15m'

    def test_after_isha_is_tomorrow(self):
        now = timezone.make_aware(datetime(2024, 6, 12, 22, 0))
        result = next_prayer(DEFAULT_PRAYER_TIMES, now)

        assert result == {'name': 'Fajr', 'time': '05:30', 'time_until': 'Tomorrow'}

    def test_exact_prayer_time_moves_on(self):
        now = timezone.make_aware(datetime(2024, 6, 12, 12, 30))
        assert next_prayer(DEFAULT_PRAYER_TIMES, now)['name'] == 'Asr'


@pytest.mark.django_db
class TestFetchPrayerTimes:

    @patch('core.services.prayer_times_service.requests.get')
    def test_fetch_formats_times(self, mock_get):
        mock_get.return_value = mock_response(aladhan_payload())

        times = fetch_prayer_times(30.0, 31.2, day=date(2024, 6, 12))

        assert times['fajr'] == '04:12'
        assert times['isha'] == '21:29'
        assert times['sunrise'] == '05:40'
        assert times['date'] == '12 Jun 2024'
        assert times['hijri_date'] == '06-12-1445 Dhū al-Ḥijjah 1445'

        url = mock_get.call_args[0][0]
        params = mock_get.call_args[1]['params']
        assert url.endswith('/timings/12-06-2024')
        assert params['method'] == 2
        assert params['school'] == 0

    @patch('core.services.prayer_times_service.requests.get')
    def test_fetch_is_cached(self, mock_get):
        mock_get.return_value = mock_response(aladhan_payload())

        fetch_prayer_times(30.0, 31.2, day=date(2024, 6, 12))
        fetch_prayer_times(30.0, 31.2, day=date(2024, 6, 12))

        assert mock_get.call_count == 1

    @patch('core.services.prayer_times_service.requests.get')
    def test_missing_sunrise_defaults(self, mock_get):
        payload = aladhan_payload()
        del payload['data']['timings']['Sunrise']
        del payload['data']['date']['hijri']
        mock_get.return_value = mock_response(payload)

        times = fetch_prayer_times(30.0, 31.2, day=date(2024, 6, 12))

        assert times['sunrise'] == '06:30'
        assert times['hijri_date'] == 'Unknown'

    @patch('core.services.prayer_times_service.requests.get')
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout('slow')

        with pytest.raises(ExternalServiceTimeout):
            fetch_prayer_times(30.0, 31.2, day=date(2024, 6, 12))

    @patch('core.services.prayer_times_service.requests.get')
    def test_http_error(self, mock_get):
        mock_get.return_value = mock_response({}, status_error=requests.HTTPError('500'))

        with pytest.raises(ExternalServiceError):
            fetch_prayer_times(30.0, 31.2, day=date(2024, 6, 12))

    @patch('core.services.prayer_times_service.requests.get')
    def test_malformed_payload(self, mock_get):
        mock_get.return_value = mock_response({'data': {'no_timings': True}})

        with pytest.raises(ExternalServiceError):
            fetch_prayer_times(30.0, 31.2, day=date(2024, 6, 12))

    @freeze_time('2024-06-12 10:00:00')
    @patch('core.services.prayer_times_service.requests.get')
    def test_default_fallback(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('offline')

        times = prayer_times_or_default(30.0, 31.2)

        assert times['source'] == 'default'
        assert times['fajr'] == '05:30'
        assert times['sunrise'] == '06:45'
        assert times['date'] == '2024-06-12'

    def test_fallback_still_validates(self):
        with pytest.raises(ValidationError):
            prayer_times_or_default(100, 0)


@pytest.mark.django_db
class TestPrayerTimesEndpoints:

    @patch('core.services.prayer_times_service.requests.get')
    def test_fetch_endpoint_proxies(self, mock_get, api_client):
        mock_get.return_value = mock_response(aladhan_payload())

        response = api_client.get(
            '/api/prayer-times/fetch/?latitude=30&longitude=31.2&day=12&month=6&year=2024&school=1'
        )

        assert response.status_code == 200
        assert response.json()['data']['asr'] == '16:30'
        assert mock_get.call_args[1]['params']['school'] == 1

    @patch('core.services.prayer_times_service.requests.get')
    def test_fetch_endpoint_upstream_timeout(self, mock_get, api_client):
        mock_get.side_effect = requests.Timeout()

        response = api_client.get('/api/prayer-times/fetch/?latitude=30&longitude=31.2')

        assert response.status_code == 504
        assert response.json()['error']['code'] == 'UPSTREAM_TIMEOUT'

    def test_fetch_endpoint_bad_coordinates(self, api_client):
        response = api_client.get('/api/prayer-times/fetch/?latitude=north&longitude=31.2')
        assert response.status_code == 400

    def test_fetch_endpoint_bad_date(self, api_client):
        response = api_client.get('/api/prayer-times/fetch/?latitude=30&longitude=31&day=31&month=2&year=2024')
        assert response.status_code == 400

    @patch('core.services.prayer_times_service.requests.get')
    def test_widget_falls_back(self, mock_get, api_client):
        mock_get.side_effect = requests.ConnectionError()

        response = api_client.get('/api/prayer-times/?latitude=51.5074&longitude=-0.1278')

        data = response.json()['data']
        assert response.status_code == 200
        assert data['prayer_times']['source'] == 'default'
        assert data['qibla_direction'] == 119
        assert data['location']['latitude'] == 51.5074
        assert set(data['next_prayer']) == {'name', 'time', 'time_until'}

    @patch('core.services.prayer_times_service.requests.get')
    def test_widget_uses_saved_location(self, mock_get, authenticated_client, user):
        from core.models import UserPreferences
        UserPreferences.objects.create(user=user, latitude=40.7128, longitude=-74.0060, location='New York')
        mock_get.return_value = mock_response(aladhan_payload())

        response = authenticated_client.get('/api/prayer-times/')

        data = response.json()['data']
        assert data['location']['name'] == 'New York'
        assert data['qibla_direction'] == 58
        assert data['prayer_times']['source'] == 'aladhan'

    def test_widget_requires_coordinates(self, api_client):
        assert api_client.get('/api/prayer-times/').status_code == 400

    def test_qibla_endpoint(self, api_client):
        response = api_client.get('/api/qibla/?latitude=40.7128&longitude=-74.0060')

        assert response.status_code == 200
        assert response.json()['data']['direction'] == 58


def test_service_name_in_errors():
    err = ExternalServiceError(prayer_times_service.SERVICE_NAME, 'boom')
    assert 'Prayer times service' in str(err)
