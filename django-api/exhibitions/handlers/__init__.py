from exhibitions.handlers.views import (
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

__all__ = [
    "ActiveCheckInsView",
    "AnalyticsView",
    "ApprovalPreviewView",
    "AttendanceStatsView",
    "EventActionView",
    "EventDetailView",
    "EventListView",
    "PendingEventListView",
    "SchoolLeaderboardView",
    "StallLeaderboardView",
]
