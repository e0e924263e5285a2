from datetime import date, datetime, timezone as dt_timezone

import pytest
from django.utils import timezone
from freezegun import freeze_time

from core.utils import time_utils
from core.utils.pagination_helpers import paginate, page_metadata


class TestPagination:

    @pytest.mark.parametrize('page,limit,expected', [
        (1, 20, (1, 20, 0)),
        ('3', '10', (3, 10, 20)),
        (0, 20, (1, 20, 0)),
        (-5, 20, (1, 20, 0)),
        (2, 500, (2, 100, 100)),
        (1, 0, (1, 1, 0)),
        ('abc', 'xyz', (1, 20, 0)),
        ('2.7', '15.9', (2, 15, 15)),
        ('nan', 'inf', (1, 20, 0)),
        (None, None, (1, 20, 0)),
        ('1e30', 20, (100000, 20, 1999980)),
        (10 ** 40, 100, (100000, 100, 9999900)),
    ])
    def test_paginate(self, page, limit, expected):
        assert paginate(page, limit) == expected

    def test_page_metadata(self):
        assert page_metadata(2, 10, 35) == {
            'current_page': 2,
            'total_pages': 4,
            'total_count': 35,
            'limit': 10,
            'has_next_page': True,
            'has_previous_page': True,
        }

    def test_page_metadata_last_and_empty(self):
        last = page_metadata(4, 10, 35)
        assert last['has_next_page'] is False

        empty = page_metadata(1, 20, 0)
        assert empty['total_pages'] == 0
        assert empty['has_next_page'] is False
        assert empty['has_previous_page'] is False


class TestTimeUtils:

    @pytest.mark.parametrize('day,expected', [
        (date(2024, 6, 12), date(2024, 6, 9)),   # Wednesday
        (date(2024, 6, 9), date(2024, 6, 9)),    # Sunday
        (date(2024, 6, 15), date(2024, 6, 9)),   # Saturday
        (date(2024, 3, 2), date(2024, 2, 25)),   # across a month
    ])
    def test_week_start_is_sunday(self, day, expected):
        assert time_utils.week_start(day) == expected

    def test_day_bounds(self):
        start, end = time_utils.day_bounds(date(2024, 6, 12))

        assert start == datetime(2024, 6, 12, tzinfo=dt_timezone.utc)
        assert end == datetime(2024, 6, 13, tzinfo=dt_timezone.utc)

    def test_last_n_days(self):
        assert time_utils.last_n_days(3, date(2024, 3, 1)) == [
            date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)
        ]

    @freeze_time('2024-06-12 23:30:00')
    def test_today_follows_current_timezone(self):
        assert time_utils.today() == date(2024, 6, 12)
        with timezone.override('Asia/Tokyo'):
            assert time_utils.today() == date(2024, 6, 13)

    def test_local_date(self):
        stamp = datetime(2024, 6, 12, 22, 0, tzinfo=dt_timezone.utc)

        assert time_utils.local_date(stamp) == date(2024, 6, 12)
        with timezone.override('Asia/Karachi'):
            assert time_utils.local_date(stamp) == date(2024, 6, 13)
        assert time_utils.local_date(None) is None

    def test_month_helpers(self):
        assert time_utils.month_start(date(2024, 6, 12)) == date(2024, 6, 1)
        assert time_utils.add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert time_utils.add_months(date(2024, 6, 1), -2) == date(2024, 4, 1)

    @pytest.mark.parametrize('value,expected', [
        ('2024-06-12', date(2024, 6, 12)),
        ('2024-06-12T10:00:00Z', date(2024, 6, 12)),
        (date(2024, 1, 1), date(2024, 1, 1)),
        ('', None),
        (None, None),
        ('12/06/2024', None),
        ('2024-02-30', None),
    ])
    def test_parse_date(self, value, expected):
        assert time_utils.parse_date(value) == expected

    def test_parse_datetime_z_suffix(self):
        parsed = time_utils.parse_datetime('2024-06-12T10:30:00Z')
        assert parsed == datetime(2024, 6, 12, 10, 30, tzinfo=dt_timezone.utc)

    def test_parse_datetime_naive_is_made_aware(self):
        parsed = time_utils.parse_datetime('2024-06-12')

        assert timezone.is_aware(parsed)
        assert parsed == datetime(2024, 6, 12, tzinfo=dt_timezone.utc)

    def test_parse_datetime_rejects_garbage(self):
        assert time_utils.parse_datetime('tomorrow') is None
        assert time_utils.parse_datetime(None) is None
