from django.urls import path

from exhibitions.handlers import (
    ActiveCheckInsView,
    AnalyticsView,
    ApprovalPreviewView,
    AttendanceStatsView,
    EventActionView,
    EventDetailView,
    EventListView,
    PendingEventListView,
    SchoolLeaderboardView,
    StallLeaderboardView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/pending", PendingEventListView.as_view(), name="event-pending"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/approval-preview",
        ApprovalPreviewView.as_view(),
        name="event-approval-preview",
    ),
    path("events/<str:event_id>/analytics", AnalyticsView.as_view(), name="event-analytics"),
    path(
        "events/<str:event_id>/leaderboard/stalls",
        StallLeaderboardView.as_view(),
        name="stall-leaderboard",
    ),
    path(
        "events/<str:event_id>/leaderboard/schools",
        SchoolLeaderboardView.as_view(),
        name="school-leaderboard",
    ),
    path(
        "events/<str:event_id>/check-ins/stats",
        AttendanceStatsView.as_view(),
        name="check-in-stats",
    ),
    path(
        "events/<str:event_id>/check-ins/active",
        ActiveCheckInsView.as_view(),
        name="check-in-active",
    ),
    path("events/<str:event_id>/<slug:action>", EventActionView.as_view(), name="event-action"),
]
