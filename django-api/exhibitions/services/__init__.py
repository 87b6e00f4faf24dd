from exhibitions.services.analytics_service import AnalyticsReport, AnalyticsService
from exhibitions.services.event_service import EventService

__all__ = ["AnalyticsReport", "AnalyticsService", "EventService"]
