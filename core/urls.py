from django.urls import path
from django.http import JsonResponse
from . import views_api


def root_info(request):
    """API index for clients hitting the bare host."""
    return JsonResponse({
        'success': True,
        'message': 'Daily Priority API',
        'version': '1.0',
        'endpoints': {
            'tasks': '/api/tasks/',
            'analytics': '/api/analytics/',
            'dashboard': '/api/dashboard/data/',
            'health': '/api/health/',
        },
        'authenticated': request.user.is_authenticated
    })


urlpatterns = [
    path('', root_info, name='root'),

    # =========================================================================
    # PLANNING
    # =========================================================================
    path('api/tasks/', views_api.api_tasks, name='api_tasks'),
    path('api/tasks/<str:task_id>/', views_api.api_task_detail, name='api_task_detail'),
    path('api/categories/', views_api.api_categories, name='api_categories'),
    path('api/goals/', views_api.api_goals, name='api_goals'),
    path('api/goals/<str:goal_id>/', views_api.api_goal_detail, name='api_goal_detail'),
    path('api/events/', views_api.api_events, name='api_events'),

    # =========================================================================
    # HABITS, JOURNAL, FOCUS
    # =========================================================================
    path('api/habits/', views_api.api_habits, name='api_habits'),
    path('api/habits/<str:habit_id>/', views_api.api_habit_detail, name='api_habit_detail'),
    path('api/habits/<str:habit_id>/complete/', views_api.api_habit_complete, name='api_habit_complete'),
    path('api/journal/', views_api.api_journal, name='api_journal'),
    path('api/journal/<str:entry_id>/', views_api.api_journal_detail, name='api_journal_detail'),
    path('api/focus/', views_api.api_focus, name='api_focus'),
    path('api/focus/settings/', views_api.api_focus_settings, name='api_focus_settings'),

    # =========================================================================
    # PRAYERS & ADHKAR
    # =========================================================================
    path('api/prayers/track/', views_api.api_prayer_track, name='api_prayer_track'),
    path('api/prayers/stats/', views_api.api_prayer_stats, name='api_prayer_stats'),
    path('api/prayer-times/', views_api.api_prayer_times, name='api_prayer_times'),
    path('api/prayer-times/fetch/', views_api.api_prayer_times_fetch, name='api_prayer_times_fetch'),
    path('api/qibla/', views_api.api_qibla, name='api_qibla'),
    path('api/adhkar/', views_api.api_adhkar, name='api_adhkar'),
    path('api/adhkar/list/', views_api.api_adhkar_list, name='api_adhkar_list'),
    path('api/adhkar/statistics/', views_api.api_adhkar_statistics, name='api_adhkar_statistics'),

    # =========================================================================
    # REPORTING
    # =========================================================================
    path('api/analytics/', views_api.api_analytics, name='api_analytics'),
    path('api/user/stats/', views_api.api_user_stats, name='api_user_stats'),
    path('api/dashboard/data/', views_api.api_dashboard_data, name='api_dashboard_data'),

    # =========================================================================
    # ACCOUNT
    # =========================================================================
    path('api/user/settings/', views_api.api_user_settings, name='api_user_settings'),
    path('api/user/export/', views_api.api_user_export, name='api_user_export'),
    path('api/user/import/', views_api.api_user_import, name='api_user_import'),

    # Health Check (no auth required)
    path('api/health/', views_api.api_health, name='api_health'),
]
