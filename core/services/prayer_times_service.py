"""
Prayer Times Service

Proxies the Aladhan timings API, computes the Qibla bearing and works out
which prayer comes next.

Timetables are cached for an hour per (location, day, school) since they
only change daily.
"""
import logging
import math
from datetime import date, datetime
from typing import Dict, Optional

import requests
from django.conf import settings
from django.utils import timezone

from core.exceptions import ExternalServiceError, ExternalServiceTimeout, ValidationError
from core.helpers.cache_helpers import cache_result
from core.utils.constants import (
    DEFAULT_PRAYER_TIMES,
    PRAYER_SCHEDULE_ORDER,
    PRAYER_CALC_METHOD,
    KAABA_LATITUDE,
    KAABA_LONGITUDE,
)
from core.utils.time_utils import today as local_today

logger = logging.getLogger(__name__)

SERVICE_NAME = 'Prayer times service'
PRAYER_TIMES_CACHE_TIMEOUT = 3600


def validate_coordinates(latitude, longitude):
    """
    Parse and range-check coordinates.

    Returns:
        (lat, lon) as floats

    Raises:
        ValidationError: If either value is missing, non-numeric or out of range
    """
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError('coordinates', 'Valid latitude and longitude are required')

    if math.isnan(lat) or math.isnan(lon):
        raise ValidationError('coordinates', 'Valid latitude and longitude are required')

    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise ValidationError(
            'coordinates',
            'Coordinates out of valid range (-90 to 90 for latitude, -180 to 180 for longitude)'
        )
    return lat, lon


def format_time(value: Optional[str]) -> Optional[str]:
    """'05:12 (EET)' or '05:12:30' -> '05:12'"""
    if not value:
        return None
    clean = value.split(' ')[0]
    parts = clean.split(':')
    if len(parts) < 2:
        return clean
    return f"{parts[0]}:{parts[1]}"


@cache_result(timeout=PRAYER_TIMES_CACHE_TIMEOUT, key_prefix='prayer_times')
def _request_timings(lat: float, lon: float, day_str: str, school: int) -> Dict:
    url = f"{settings.PRAYER_TIMES_API_URL.rstrip('/')}/timings/{day_str}"
    params = {
        'latitude': lat,
        'longitude': lon,
        'method': PRAYER_CALC_METHOD,
        'school': school,
    }

    try:
        response = requests.get(
            url,
            params=params,
            headers={'Accept': 'application/json', 'User-Agent': 'DailyPriority/1.0'},
            timeout=settings.PRAYER_TIMES_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
    except requests.Timeout:
        logger.warning(f"Prayer times request timed out: {url}")
        raise ExternalServiceTimeout(SERVICE_NAME)
    except requests.RequestException as e:
        logger.warning(f"Prayer times request failed: {e}")
        raise ExternalServiceError(SERVICE_NAME, str(e))
    except ValueError:
        raise ExternalServiceError(SERVICE_NAME, 'response was not valid JSON')

    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict) or not isinstance(data.get('timings'), dict):
        raise ExternalServiceError(SERVICE_NAME, 'unexpected response structure')

    return data


def fetch_prayer_times(latitude, longitude, day: Optional[date] = None, school=0) -> Dict:
    """
    Today's (or ``day``'s) timetable for a location.

    Returns:
        {'fajr': 'HH:MM', ..., 'sunrise': 'HH:MM', 'date': str, 'hijri_date': str}

    Raises:
        ValidationError: Bad coordinates
        ExternalServiceTimeout: Upstream did not answer in time
        ExternalServiceError: Upstream failed or returned an unexpected body
    """
    lat, lon = validate_coordinates(latitude, longitude)
    try:
        school = int(school)
    except (TypeError, ValueError):
        school = 0
    day = day or local_today()
    day_str = f"{day.day:02d}-{day.month:02d}-{day.year}"

    data = _request_timings(lat, lon, day_str, school)
    timings = data['timings']
    date_info = data.get('date') or {}

    times = {}
    for name in PRAYER_SCHEDULE_ORDER:
        formatted = format_time(timings.get(name.capitalize()))
        if formatted is None:
            raise ExternalServiceError(SERVICE_NAME, f'missing {name.capitalize()} time')
        times[name] = formatted
    times['sunrise'] = format_time(timings.get('Sunrise') or '06:30')

    hijri = date_info.get('hijri')
    if hijri:
        times['hijri_date'] = f"{hijri.get('date')} {hijri.get('month', {}).get('en')} {hijri.get('year')}"
    else:
        times['hijri_date'] = 'Unknown'
    times['date'] = date_info.get('readable') or 'Unknown'

    return times


def prayer_times_or_default(latitude, longitude, day: Optional[date] = None) -> Dict:
    """
    Like fetch_prayer_times, but falls back to a static timetable when the
    upstream service is unavailable. Coordinate errors still raise.
    """
    validate_coordinates(latitude, longitude)
    try:
        times = fetch_prayer_times(latitude, longitude, day)
        times['source'] = 'aladhan'
        return times
    except ExternalServiceError as e:
        logger.warning(f"Using default prayer times: {e}")
        times = dict(DEFAULT_PRAYER_TIMES)
        times['date'] = (day or local_today()).isoformat()
        times['hijri_date'] = 'Unknown'
        times['source'] = 'default'
        return times


def calculate_qibla_direction(latitude, longitude) -> int:
    """Initial great-circle bearing to the Kaaba in whole degrees [0, 360)."""
    lat, lon = validate_coordinates(latitude, longitude)

    lat1 = math.radians(lat)
    lat2 = math.radians(KAABA_LATITUDE)
    delta_lon = math.radians(KAABA_LONGITUDE - lon)

    x = math.sin(delta_lon) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(delta_lon)

    bearing = (math.degrees(math.atan2(x, y)) + 360) % 360
    return int(round(bearing)) % 360


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(':')[:2]
    return int(hours) * 60 + int(minutes)


def next_prayer(times: Dict, now: Optional[datetime] = None) -> Dict:
    """
    First prayer strictly after ``now`` (local wall clock).

    Returns:
        {'name': 'Asr', 'time': '15:45', 'time_until': '2h 5m'}; when the
        day's prayers are over, Fajr with time_until 'Tomorrow'.
    """
    now = timezone.localtime(now) if now else timezone.localtime()
    current = now.hour * 60 + now.minute

    for name in PRAYER_SCHEDULE_ORDER:
        prayer_time = times[name]
        diff = _minutes(prayer_time) - current
        if diff > 0:
            hours, minutes = divmod(diff, 60)
            time_until = f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"
            return {'name': name.capitalize(), 'time': prayer_time, 'time_until': time_until}

    first = PRAYER_SCHEDULE_ORDER[0]
    return {'name': first.capitalize(), 'time': times[first], 'time_until': 'Tomorrow'}
