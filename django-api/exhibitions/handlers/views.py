"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses (see handlers/errors.py)
- Never contain business logic
- Never expose internal error details
"""

from django.apps import apps
from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from exhibitions import cache as cache_keys
from exhibitions.domain import LifecycleAction
from exhibitions.handlers.errors import error_body
from exhibitions.handlers.permissions import HasExhibitionRole, actor_for
from exhibitions.handlers.serializers import (
    AnalyticsReportSerializer,
    ApprovalPreviewSerializer,
    AttendanceStatsSerializer,
    EventCreateSerializer,
    EventListQuerySerializer,
    EventSerializer,
    EventUpdateSerializer,
    LimitQuerySerializer,
    RejectSerializer,
    SchoolStandingSerializer,
    SessionSerializer,
    StallLeaderboardSerializer,
)

# Actions reachable through POST /events/{id}/{action}. Cancel is DELETE.
ROUTED_ACTIONS = {
    action.value: action
    for action in (
        LifecycleAction.SUBMIT,
        LifecycleAction.APPROVE,
        LifecycleAction.REJECT,
        LifecycleAction.ACTIVATE,
        LifecycleAction.COMPLETE,
        LifecycleAction.ARCHIVE,
    )
}

REPLAY_MARKERS = {
    LifecycleAction.APPROVE: "already_approved",
    LifecycleAction.REJECT: "already_rejected",
}


def _event_service():
    return apps.get_app_config("exhibitions").event_service


def _analytics_service():
    return apps.get_app_config("exhibitions").analytics_service


def _cache_ttl() -> int:
    return apps.get_app_config("exhibitions").core_config.analytics_cache_ttl


def _validation_error(errors) -> Response:
    body = error_body("VALIDATION_ERROR", "Invalid request data")
    body["error"]["fields"] = errors
    return Response(body, status=status.HTTP_400_BAD_REQUEST)


def _limit(request: Request) -> tuple[int | None, Response | None]:
    query = LimitQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return None, _validation_error(query.errors)
    return query.validated_data.get("limit"), None


class ExhibitionView(APIView):
    permission_classes = [HasExhibitionRole]


class EventListView(ExhibitionView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        query = EventListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return _validation_error(query.errors)
        events = _event_service().list_events(actor_for(request), query.to_filter())
        return Response(EventSerializer(events, many=True).data)

    def post(self, request: Request) -> Response:
        payload = EventCreateSerializer(data=request.data)
        if not payload.is_valid():
            return _validation_error(payload.errors)
        event = _event_service().create_event(actor_for(request), payload.validated_data)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class PendingEventListView(ExhibitionView):
    """Handler for GET /api/events/pending"""

    def get(self, request: Request) -> Response:
        events = _event_service().list_pending(actor_for(request))
        return Response(EventSerializer(events, many=True).data)


class EventDetailView(ExhibitionView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}

    DELETE cancels the event; rows are never removed.
    """

    def get(self, request: Request, event_id: str) -> Response:
        event = _event_service().get_event(actor_for(request), event_id)
        return Response(EventSerializer(event).data)

    def patch(self, request: Request, event_id: str) -> Response:
        payload = EventUpdateSerializer(data=request.data, partial=True)
        if not payload.is_valid():
            return _validation_error(payload.errors)
        event = _event_service().update_event(actor_for(request), event_id, payload.validated_data)
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        result = _event_service().cancel(actor_for(request), event_id)
        return Response(
            {
                "event": EventSerializer(result.event).data,
                "previous_status": result.previous_status.value,
            }
        )


class EventActionView(ExhibitionView):
    """Handler for POST /api/events/{event_id}/{action}"""

    def post(self, request: Request, event_id: str, action: str) -> Response:
        lifecycle_action = ROUTED_ACTIONS.get(action)
        if lifecycle_action is None:
            return Response(
                error_body("UNKNOWN_ACTION", f"Unknown action: {action}"),
                status=status.HTTP_404_NOT_FOUND,
            )

        reason = None
        if lifecycle_action is LifecycleAction.REJECT:
            payload = RejectSerializer(data=request.data)
            if not payload.is_valid():
                return _validation_error(payload.errors)
            reason = payload.validated_data["rejection_reason"]

        result = _event_service().perform(actor_for(request), event_id, lifecycle_action, reason=reason)
        body = {
            "event": EventSerializer(result.event).data,
            "previous_status": result.previous_status.value,
        }
        marker = REPLAY_MARKERS.get(lifecycle_action)
        if marker is not None:
            body[marker] = result.replayed
        return Response(body)


class ApprovalPreviewView(ExhibitionView):
    """Handler for GET /api/events/{event_id}/approval-preview"""

    def get(self, request: Request, event_id: str) -> Response:
        preview = _event_service().get_approval_preview(actor_for(request), event_id)
        return Response(ApprovalPreviewSerializer(preview).data)


class AnalyticsView(ExhibitionView):
    """Handler for GET /api/events/{event_id}/analytics

    The serialized report is cached per event. Access is checked on every
    request, before the cache is consulted.
    """

    def get(self, request: Request, event_id: str) -> Response:
        service = _analytics_service()
        event = service.authorize(actor_for(request), event_id)
        data = cache.get_or_set(
            cache_keys.analytics_key(event.id.value),
            lambda: AnalyticsReportSerializer(service.build_report(event)).data,
            _cache_ttl(),
        )
        return Response(data)


class StallLeaderboardView(ExhibitionView):
    """Handler for GET /api/events/{event_id}/leaderboard/stalls"""

    def get(self, request: Request, event_id: str) -> Response:
        limit, error = _limit(request)
        if error is not None:
            return error
        board = _analytics_service().stall_leaderboard(actor_for(request), event_id, limit)
        return Response(StallLeaderboardSerializer(board).data)


class SchoolLeaderboardView(ExhibitionView):
    """Handler for GET /api/events/{event_id}/leaderboard/schools"""

    def get(self, request: Request, event_id: str) -> Response:
        limit, error = _limit(request)
        if error is not None:
            return error
        standings = _analytics_service().school_leaderboard(actor_for(request), event_id, limit)
        return Response({"top_schools": SchoolStandingSerializer(standings, many=True).data})


class AttendanceStatsView(ExhibitionView):
    """Handler for GET /api/events/{event_id}/check-ins/stats"""

    def get(self, request: Request, event_id: str) -> Response:
        service = _analytics_service()
        event = service.authorize(actor_for(request), event_id)
        data = cache.get_or_set(
            cache_keys.attendance_key(event.id.value),
            lambda: AttendanceStatsSerializer(service.build_attendance(event)).data,
            _cache_ttl(),
        )
        return Response(data)


class ActiveCheckInsView(ExhibitionView):
    """Handler for GET /api/events/{event_id}/check-ins/active"""

    def get(self, request: Request, event_id: str) -> Response:
        sessions = _analytics_service().active_sessions(actor_for(request), event_id)
        return Response(
            {"count": len(sessions), "sessions": SessionSerializer(sessions, many=True).data}
        )
