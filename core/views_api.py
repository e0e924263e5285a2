"""
Daily Priority - JSON API Views
Thin HTTP layer over core.services
"""
import json
import logging
import time
from datetime import date
from functools import wraps

from django.conf import settings
from django.core.cache import cache
from django.core.serializers.json import DjangoJSONEncoder
from django.db import connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_GET

from .exceptions import ValidationError
from .services.task_service import TaskService
from .services.category_service import CategoryService
from .services.habit_service import HabitService
from .services.journal_service import JournalService
from .services.goal_service import GoalService
from .services.prayer_service import PrayerService, parse_days
from .services.focus_service import FocusService
from .services.adhkar_service import AdhkarService
from .services.calendar_service import CalendarService
from .services.analytics_service import AnalyticsService
from .services.stats_service import StatsService
from .services.dashboard_service import DashboardService
from .services.preferences_service import PreferencesService
from .services.export_service import ExportService
from .services.import_service import ImportService
from .services import prayer_times_service
from .utils.response_helpers import UXResponse, get_completion_message
from .utils.error_handlers import handle_service_errors

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed

# Initialize logger for this module
logger = logging.getLogger(__name__)


def require_auth(view_func):
    """
    Decorator to ensure user is logged in for API endpoints.
    Supports both Session (Browser) and JWT (Mobile) authentication.
    Returns 401 JSON instead of redirecting to login page.

    Note: This decorator also exempts the view from CSRF checks since
    API clients use JWT tokens instead of CSRF tokens.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        # 1. Existing session auth
        if request.user.is_authenticated:
            return view_func(request, *args, **kwargs)

        # 2. Bearer token
        auth_header = request.headers.get('Authorization')
        if auth_header and auth_header.startswith('Bearer '):
            try:
                auth_result = JWTAuthentication().authenticate(request)
                if auth_result:
                    request.user, _ = auth_result
                    return view_func(request, *args, **kwargs)
            except (InvalidToken, TokenError, AuthenticationFailed) as e:
                return JsonResponse({
                    'success': False,
                    'error': {
                        'message': f'Invalid token: {str(e)}',
                        'code': 'INVALID_TOKEN',
                        'retry': False
                    }
                }, status=401)

        # 3. No valid auth found
        return JsonResponse({
            'success': False,
            'error': {
                'message': 'Authentication required',
                'code': 'UNAUTHORIZED',
                'retry': True
            }
        }, status=401)

    return csrf_exempt(_wrapped_view)


def _json_body(request) -> dict:
    """Request body as a dict; an empty body reads as {}."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except UnicodeDecodeError:
        raise ValidationError('body', 'Invalid JSON body')
    if not isinstance(data, dict):
        raise ValidationError('body', 'Expected a JSON object')
    return data


# Initialize Services
task_service = TaskService()
category_service = CategoryService()
habit_service = HabitService()
journal_service = JournalService()
goal_service = GoalService()
prayer_service = PrayerService()
focus_service = FocusService()
adhkar_service = AdhkarService()
calendar_service = CalendarService()


# ============================================================================
# TASK ENDPOINTS
# ============================================================================

@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_tasks(request):
    """
    GET  /api/tasks/?page=1&limit=20
    POST /api/tasks/
    """
    if request.method == 'GET':
        result = task_service.list_tasks(
            request.user,
            page=request.GET.get('page', 1),
            limit=request.GET.get('limit', 20),
        )
        return UXResponse.success(message='Tasks loaded', data=result, feedback={'type': 'none'})

    task = task_service.create_task(request.user, _json_body(request))
    return UXResponse.success(
        message='Task created',
        data={'task': task},
        feedback={'type': 'success', 'haptic': 'success', 'toast': True},
        status=201
    )


@require_auth
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
@handle_service_errors
def api_task_detail(request, task_id):
    if request.method == 'GET':
        return UXResponse.success(
            message='Task loaded',
            data={'task': task_service.get_task(request.user, task_id)},
            feedback={'type': 'none'}
        )

    if request.method == 'DELETE':
        info = task_service.delete_task(request.user, task_id)
        return UXResponse.success(
            message='Task deleted',
            data={**info, 'deleted': True},
            feedback={'type': 'info', 'message': 'Task deleted', 'haptic': 'light', 'toast': True}
        )

    updated = task_service.update_task(request.user, task_id, _json_body(request))
    feedback = {'type': 'success', 'haptic': 'light', 'toast': True}
    if updated['status'] == 'COMPLETED':
        feedback['message'] = get_completion_message('COMPLETED')
        feedback['animation'] = 'checkmark'
    return UXResponse.success(message='Task updated successfully', data={'task': updated}, feedback=feedback)


@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_categories(request):
    if request.method == 'GET':
        return UXResponse.success(
            message='Categories loaded',
            data={'categories': category_service.list_categories(request.user)},
            feedback={'type': 'none'}
        )

    category = category_service.create_category(request.user, _json_body(request))
    return UXResponse.success(message='Category created', data={'category': category}, status=201)


# ============================================================================
# HABIT ENDPOINTS
# ============================================================================

@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_habits(request):
    if request.method == 'GET':
        return UXResponse.success(
            message='Habits loaded',
            data={'habits': habit_service.list_habits(request.user)},
            feedback={'type': 'none'}
        )

    habit = habit_service.create_habit(request.user, _json_body(request))
    return UXResponse.success(message='Habit created', data={'habit': habit}, status=201)


@require_auth
@require_http_methods(['PUT', 'PATCH', 'DELETE'])
@handle_service_errors
def api_habit_detail(request, habit_id):
    if request.method == 'DELETE':
        info = habit_service.delete_habit(request.user, habit_id)
        return UXResponse.success(
            message='Habit deleted',
            data={**info, 'deleted': True},
            feedback={'type': 'info', 'message': 'Habit deleted', 'haptic': 'light', 'toast': True}
        )

    habit = habit_service.update_habit(request.user, habit_id, _json_body(request))
    return UXResponse.success(message='Habit updated', data={'habit': habit})


@require_auth
@require_http_methods(['POST'])
@handle_service_errors
def api_habit_complete(request, habit_id):
    """Toggle a habit's completion for a day (defaults to today)."""
    result = habit_service.toggle_completion(request.user, habit_id, _json_body(request))

    if result['completed']:
        feedback = {
            'type': 'success',
            'message': get_completion_message('COMPLETED'),
            'haptic': 'success',
            'animation': 'checkmark',
            'toast': True,
        }
        if result['streak'] and result['streak'] % 7 == 0:
            feedback = UXResponse.celebration(f"{result['streak']} day streak!", animation='confetti')
        message = 'Habit completed'
    else:
        feedback = {'type': 'info', 'haptic': 'light', 'toast': True, 'message': 'Completion removed'}
        message = 'Completion removed'

    return UXResponse.success(message=message, data=result, feedback=feedback)


# ============================================================================
# JOURNAL ENDPOINTS
# ============================================================================

@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_journal(request):
    if request.method == 'GET':
        return UXResponse.success(
            message='Journal loaded',
            data={'entries': journal_service.list_entries(request.user)},
            feedback={'type': 'none'}
        )

    entry = journal_service.create_entry(request.user, _json_body(request))
    return UXResponse.success(message='Journal entry saved', data={'entry': entry}, status=201)


@require_auth
@require_http_methods(['PUT', 'PATCH', 'DELETE'])
@handle_service_errors
def api_journal_detail(request, entry_id):
    if request.method == 'DELETE':
        info = journal_service.delete_entry(request.user, entry_id)
        return UXResponse.success(message='Journal entry deleted', data={**info, 'deleted': True})

    entry = journal_service.update_entry(request.user, entry_id, _json_body(request))
    return UXResponse.success(message='Journal entry updated', data={'entry': entry})


# ============================================================================
# GOAL ENDPOINTS
# ============================================================================

@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_goals(request):
    if request.method == 'GET':
        return UXResponse.success(
            message='Goals loaded',
            data={'goals': goal_service.list_goals(request.user)},
            feedback={'type': 'none'}
        )

    goal = goal_service.create_goal(request.user, _json_body(request))
    return UXResponse.success(message='Goal created', data={'goal': goal}, status=201)


@require_auth
@require_http_methods(['PUT', 'PATCH', 'DELETE'])
@handle_service_errors
def api_goal_detail(request, goal_id):
    if request.method == 'DELETE':
        info = goal_service.delete_goal(request.user, goal_id)
        return UXResponse.success(message='Goal deleted', data={**info, 'deleted': True})

    goal = goal_service.update_goal(request.user, goal_id, _json_body(request))
    if goal['completed']:
        return UXResponse.success(
            message='Goal updated',
            data={'goal': goal},
            feedback=UXResponse.celebration('Goal achieved!', animation='confetti')
        )
    return UXResponse.success(message='Goal updated', data={'goal': goal})


# ============================================================================
# PRAYER ENDPOINTS
# ============================================================================

@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_prayer_track(request):
    """
    GET  /api/prayers/track/?date=YYYY-MM-DD
    GET  /api/prayers/track/?start_date=...&end_date=...
    POST /api/prayers/track/  {date, prayer_name, completed, on_time}
    """
    if request.method == 'GET':
        logs = prayer_service.list_logs(
            request.user,
            date=request.GET.get('date'),
            start_date=request.GET.get('start_date'),
            end_date=request.GET.get('end_date'),
        )
        return UXResponse.success(message='Prayer logs loaded', data={'prayers': logs}, feedback={'type': 'none'})

    log = prayer_service.track(request.user, _json_body(request))
    return UXResponse.success(
        message='Prayer tracked',
        data={'prayer': log},
        feedback={'type': 'success', 'haptic': 'success', 'toast': True}
    )


@require_auth
@require_GET
@handle_service_errors
def api_prayer_stats(request):
    days = parse_days(request.GET.get('days'))
    stats = prayer_service.stats(request.user, days)
    return UXResponse.success(message='Prayer stats loaded', data=stats, feedback={'type': 'none'})


def _coordinates_from_request(request):
    """Query-string coordinates, or the saved ones for a signed-in user."""
    latitude = request.GET.get('latitude')
    longitude = request.GET.get('longitude')
    location = None

    if (latitude is None or longitude is None) and request.user.is_authenticated:
        prefs = PreferencesService.get_or_create(request.user)
        if prefs.latitude is not None and prefs.longitude is not None:
            latitude, longitude, location = prefs.latitude, prefs.longitude, prefs.location

    return latitude, longitude, location


def _requested_day(request):
    """``day``/``month``/``year`` query params as a date, or None for today."""
    parts = [request.GET.get(k) for k in ('year', 'month', 'day')]
    if not any(parts):
        return None
    try:
        return date(*(int(p) for p in parts))
    except (TypeError, ValueError):
        raise ValidationError('date', 'day, month and year must form a valid date')


@require_GET
@handle_service_errors
def api_prayer_times_fetch(request):
    """Proxy to the Aladhan timings endpoint. No fallback."""
    latitude, longitude, _ = _coordinates_from_request(request)
    times = prayer_times_service.fetch_prayer_times(
        latitude, longitude,
        day=_requested_day(request),
        school=request.GET.get('school', 0),
    )
    return UXResponse.success(message='Prayer times loaded', data=times, feedback={'type': 'none'})


@require_GET
@handle_service_errors
def api_prayer_times(request):
    """Prayer widget: today's times (with fallback), Qibla and the next prayer."""
    latitude, longitude, location = _coordinates_from_request(request)
    lat, lon = prayer_times_service.validate_coordinates(latitude, longitude)

    times = prayer_times_service.prayer_times_or_default(lat, lon)
    return UXResponse.success(
        message='Prayer times loaded',
        data={
            'prayer_times': times,
            'location': {'latitude': lat, 'longitude': lon, 'name': location},
            'qibla_direction': prayer_times_service.calculate_qibla_direction(lat, lon),
            'next_prayer': prayer_times_service.next_prayer(times),
        },
        feedback={'type': 'none'}
    )


@require_GET
@handle_service_errors
def api_qibla(request):
    latitude, longitude, _ = _coordinates_from_request(request)
    lat, lon = prayer_times_service.validate_coordinates(latitude, longitude)
    return UXResponse.success(
        message='Qibla direction calculated',
        data={
            'latitude': lat,
            'longitude': lon,
            'direction': prayer_times_service.calculate_qibla_direction(lat, lon),
        },
        feedback={'type': 'none'}
    )


# ============================================================================
# ADHKAR ENDPOINTS
# ============================================================================

@require_GET
@handle_service_errors
def api_adhkar_list(request):
    """GET /api/adhkar/list/?category=morning"""
    catalog = AdhkarService.catalog(request.GET.get('category'))
    return UXResponse.success(message='Adhkar loaded', data={'adhkar': catalog}, feedback={'type': 'none'})


@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_adhkar(request):
    """
    GET  /api/adhkar/?date=YYYY-MM-DD&category=morning
    POST /api/adhkar/  {adhkar_id, adhkar_name, category, count, target}
    """
    if request.method == 'GET':
        progress = adhkar_service.get_progress(
            request.user,
            date=request.GET.get('date'),
            category=request.GET.get('category'),
        )
        return UXResponse.success(message='Adhkar progress loaded', data={'progress': progress},
                                  feedback={'type': 'none'})

    progress = adhkar_service.record_progress(request.user, _json_body(request))
    if progress['completed']:
        feedback = {'type': 'success', 'haptic': 'success', 'toast': True, 'animation': 'checkmark'}
    else:
        feedback = {'type': 'none', 'haptic': 'light'}
    return UXResponse.success(message='Adhkar progress saved', data={'progress': progress}, feedback=feedback)


@require_auth
@require_GET
@handle_service_errors
def api_adhkar_statistics(request):
    stats = adhkar_service.statistics(request.user)
    return UXResponse.success(message='Adhkar statistics loaded', data={'statistics': stats},
                              feedback={'type': 'none'})


# ============================================================================
# FOCUS ENDPOINTS
# ============================================================================

@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_focus(request):
    if request.method == 'GET':
        return UXResponse.success(
            message='Focus stats loaded',
            data=focus_service.get_stats(request.user),
            feedback={'type': 'none'}
        )

    session = focus_service.record_session(request.user, _json_body(request))
    return UXResponse.success(
        message='Focus session recorded',
        data={'session': session},
        feedback={'type': 'success', 'haptic': 'success', 'toast': True, 'animation': 'checkmark'},
        status=201
    )


@require_auth
@require_http_methods(['GET', 'POST', 'PUT', 'PATCH'])
@handle_service_errors
def api_focus_settings(request):
    """
    GET            /api/focus/settings/
    POST/PUT/PATCH /api/focus/settings/  (partial)
    """
    if request.method == 'GET':
        return UXResponse.success(
            message='Focus settings loaded',
            data={'settings': focus_service.get_settings(request.user)},
            feedback={'type': 'none'}
        )

    settings_data = focus_service.update_settings(request.user, _json_body(request))
    return UXResponse.success(
        message='Focus settings saved',
        data={'settings': settings_data},
        feedback={'type': 'success', 'haptic': 'light', 'toast': True}
    )


# ============================================================================
# ANALYTICS / STATS / DASHBOARD
# ============================================================================

@require_auth
@require_GET
@handle_service_errors
def api_analytics(request):
    report = AnalyticsService.get_report(request.user)
    return UXResponse.success(message='Analytics loaded', data=report, feedback={'type': 'none'})


@require_auth
@require_GET
@handle_service_errors
def api_user_stats(request):
    stats = StatsService.get_user_stats(request.user)
    return UXResponse.success(message='Stats loaded', data=stats, feedback={'type': 'none'})


@require_auth
@require_GET
@handle_service_errors
def api_dashboard_data(request):
    data = DashboardService.get_dashboard_data(request.user)
    return UXResponse.success(message='Dashboard loaded', data=data, feedback={'type': 'none'})


# ============================================================================
# CALENDAR, SETTINGS, EXPORT, IMPORT
# ============================================================================

@require_auth
@require_http_methods(['GET', 'POST'])
@handle_service_errors
def api_events(request):
    if request.method == 'GET':
        events = calendar_service.list_events(
            request.user,
            start=request.GET.get('start'),
            end=request.GET.get('end'),
        )
        return UXResponse.success(message='Events loaded', data={'events': events}, feedback={'type': 'none'})

    event = calendar_service.create_event(request.user, _json_body(request))
    return UXResponse.success(message='Event created', data={'event': event}, status=201)


@require_auth
@require_http_methods(['GET', 'PUT', 'PATCH'])
@handle_service_errors
def api_user_settings(request):
    """
    GET       /api/user/settings/
    PUT/PATCH /api/user/settings/
    """
    if request.method == 'GET':
        prefs = PreferencesService.get_preferences(request.user)
        return UXResponse.success(message='Settings loaded', data={'settings': prefs}, feedback={'type': 'none'})

    prefs = PreferencesService.update_preferences(request.user, _json_body(request))
    return UXResponse.success(
        message='Settings saved',
        data={'settings': prefs},
        feedback={'type': 'success', 'haptic': 'light', 'toast': True}
    )


@require_auth
@require_GET
@handle_service_errors
def api_user_export(request):
    """Download everything the user owns as a JSON file."""
    exporter = ExportService(request.user)
    response = JsonResponse(exporter.export_all(), encoder=DjangoJSONEncoder)
    response['Content-Disposition'] = f'attachment; filename="{exporter.export_filename()}"'
    return response


@require_auth
@require_http_methods(['POST'])
@handle_service_errors
def api_user_import(request):
    """Restore a file produced by /api/user/export/ into this account."""
    stats = ImportService(request.user).import_backup(_json_body(request))
    return UXResponse.success(
        message='Backup imported',
        data={'stats': stats},
        feedback={'type': 'success', 'haptic': 'success', 'toast': True},
        status=201
    )


# ============================================================================
# HEALTH CHECK ENDPOINT (Load Balancer Integration)
# ============================================================================

@require_GET
def api_health(request):
    """
    Health check endpoint for load balancers and monitoring.

    GET /api/health/

    Returns 200 if healthy, 503 if unhealthy.
    Does not require authentication.
    """
    health_status = {
        'status': 'healthy',
        'timestamp': timezone.now().isoformat(),
        'version': getattr(settings, 'APP_VERSION', '1.0.0'),
        'checks': {}
    }

    # Database check
    db_start = time.time()
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        health_status['checks']['database'] = {
            'status': 'ok',
            'latency_ms': round((time.time() - db_start) * 1000, 2)
        }
    except Exception as e:
        logger.error(f"Health check database failure: {e}")
        health_status['status'] = 'unhealthy'
        health_status['checks']['database'] = {
            'status': 'error',
            'error': str(e)
        }

    # Cache check
    cache_start = time.time()
    try:
        cache.set('health_check', 'ok', 10)
        if cache.get('health_check') == 'ok':
            health_status['checks']['cache'] = {
                'status': 'ok',
                'latency_ms': round((time.time() - cache_start) * 1000, 2)
            }
        else:
            health_status['checks']['cache'] = {'status': 'degraded'}
    except Exception as e:
        logger.warning(f"Health check cache failure: {e}")
        health_status['checks']['cache'] = {'status': 'unavailable'}

    status_code = 200 if health_status['status'] == 'healthy' else 503
    return JsonResponse(health_status, status=status_code)
