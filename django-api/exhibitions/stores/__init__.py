from exhibitions.stores.interfaces import AnalyticsStore, AuditSink, EventStore

__all__ = ["AnalyticsStore", "AuditSink", "EventStore"]
