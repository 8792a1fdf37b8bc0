"""
Premise Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("records", views.records_list_view),
    path("records/grant", views.records_grant_view),
    path("records/export", views.records_export_view),
    path("records/<str:record_id>/extend", views.records_extend_view),
    path("records/<str:record_id>/revoke", views.records_revoke_view),
    path("records/<str:record_id>/reinstate", views.records_reinstate_view),
    path("records/<str:record_id>/check-out", views.records_check_out_view),
    path("records/<str:record_id>/approve", views.records_approve_view),
    path("records/<str:record_id>/deny", views.records_deny_view),
    path("dashboard", views.dashboard_view),
    path("dashboard/zones", views.zones_view),
    path("dashboard/briefing", views.briefing_view),
    path("people", views.people_list_view),
    path("people/register", views.people_register_view),
    path("people/<str:person_id>/blacklist", views.people_blacklist_view),
    path("people/<str:person_id>/reinstate", views.people_reinstate_view),
    path("sessions", views.sessions_list_view),
    path("sessions/create", views.sessions_create_view),
    path(
        "sessions/<str:session_id>/registrations",
        views.session_registrations_view,
    ),
]
