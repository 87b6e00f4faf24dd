"""Serializers for request input and for transforming domain models to API responses."""

from decimal import Decimal

from rest_framework import serializers

from exhibitions.domain import EventFilter, EventStatus, EventType
from exhibitions.domain.models import EVENT_CODE_PATTERN


# Input


class EventCreateSerializer(serializers.Serializer):
    """Shape and type checks only; event invariants are enforced by the service."""

    name = serializers.CharField(max_length=255)
    code = serializers.RegexField(EVENT_CODE_PATTERN, max_length=64)
    description = serializers.CharField(allow_blank=True, default="")
    venue = serializers.CharField(max_length=255, allow_blank=True, default="")
    event_type = serializers.ChoiceField(choices=[t.value for t in EventType])
    price = serializers.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    currency = serializers.CharField(max_length=3, default="INR")
    max_capacity = serializers.IntegerField(allow_null=True, default=None)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    registration_start_date = serializers.DateTimeField()
    registration_end_date = serializers.DateTimeField()
    banner_image_url = serializers.URLField(max_length=500, allow_null=True, default=None)
    image_url = serializers.URLField(max_length=500, allow_null=True, default=None)

    def validate_event_type(self, value: str) -> EventType:
        return EventType(value)


class EventUpdateSerializer(EventCreateSerializer):
    """Use with ``partial=True``: only supplied fields are validated and returned."""


class RejectSerializer(serializers.Serializer):
    rejection_reason = serializers.CharField(allow_blank=True, trim_whitespace=True, default="")


class EventListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in EventStatus], required=False)
    event_type = serializers.ChoiceField(choices=[t.value for t in EventType], required=False)
    manager_id = serializers.UUIDField(required=False)

    def to_filter(self) -> EventFilter:
        data = self.validated_data
        return EventFilter(
            status=EventStatus(data["status"]) if "status" in data else None,
            event_type=EventType(data["event_type"]) if "event_type" in data else None,
            manager_id=data.get("manager_id"),
        )


class LimitQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False)


# Output


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    code = serializers.CharField()
    description = serializers.CharField()
    venue = serializers.CharField()
    event_type = serializers.CharField(source="event_type.value")
    price = serializers.DecimalField(max_digits=10, decimal_places=2, source="price.amount")
    currency = serializers.CharField()
    max_capacity = serializers.IntegerField(source="max_capacity.value", allow_null=True)
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    registration_start_date = serializers.DateTimeField()
    registration_end_date = serializers.DateTimeField()
    banner_image_url = serializers.CharField(allow_null=True)
    image_url = serializers.CharField(allow_null=True)
    created_by_id = serializers.UUIDField()
    status = serializers.CharField(source="status.value")
    approved_by_id = serializers.UUIDField(allow_null=True)
    approved_at = serializers.DateTimeField(allow_null=True)
    rejection_reason = serializers.CharField(allow_null=True)
    rejected_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class StallSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    stall_number = serializers.IntegerField()
    name = serializers.CharField()
    school_id = serializers.UUIDField(allow_null=True)
    school_name = serializers.CharField(allow_null=True)
    location = serializers.CharField()
    image_url = serializers.CharField(allow_null=True)
    is_active = serializers.BooleanField()


class VolunteerSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.CharField()
    phone = serializers.CharField()


class ApprovalPreviewSerializer(serializers.Serializer):
    event = EventSerializer()
    stalls = StallSerializer(many=True)
    volunteers = VolunteerSerializer(many=True)
    totals = serializers.SerializerMethodField()

    def get_totals(self, preview) -> dict[str, int]:
        return {"total_stalls": len(preview.stalls), "total_volunteers": len(preview.volunteers)}


class RankCountsSerializer(serializers.Serializer):
    rank_1_votes = serializers.IntegerField()
    rank_2_votes = serializers.IntegerField()
    rank_3_votes = serializers.IntegerField()
    total_votes = serializers.IntegerField()


class StallStandingSerializer(serializers.Serializer):
    position = serializers.IntegerField()
    stall = StallSerializer()
    ranking_stats = RankCountsSerializer(source="votes")
    weighted_score = serializers.IntegerField()


class SchoolStandingSerializer(serializers.Serializer):
    position = serializers.IntegerField()
    school_id = serializers.UUIDField()
    school_name = serializers.CharField()
    total_score = serializers.IntegerField(source="score")
    breakdown = RankCountsSerializer(source="votes")
    students_participated = serializers.IntegerField()
    stalls_ranked = serializers.IntegerField()


class RankingOverviewSerializer(serializers.Serializer):
    total_stalls_ranked = serializers.IntegerField()
    total_students_voted = serializers.IntegerField()
    breakdown = RankCountsSerializer(source="votes")


class StallLeaderboardSerializer(serializers.Serializer):
    top_stalls = StallStandingSerializer(source="standings", many=True)
    overall_stats = RankingOverviewSerializer(source="overview")


class FeedbackSummarySerializer(serializers.Serializer):
    total_feedbacks = serializers.IntegerField()
    average_rating = serializers.FloatField()
    rating_distribution = serializers.DictField(child=serializers.IntegerField())


class StallBreakdownSerializer(serializers.Serializer):
    stall = StallSerializer()
    feedback = FeedbackSummarySerializer()
    ranking_position = serializers.IntegerField(allow_null=True)
    ranking_stats = RankCountsSerializer(source="votes")
    weighted_score = serializers.IntegerField()


class RegistrationCountsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    paid = serializers.IntegerField()
    attended = serializers.IntegerField()


class AttendanceStatsSerializer(serializers.Serializer):
    total_scans = serializers.IntegerField()
    total_check_ins = serializers.IntegerField()
    total_check_outs = serializers.IntegerField()
    active_check_ins = serializers.IntegerField()
    completed_check_ins = serializers.IntegerField()
    average_duration_minutes = serializers.FloatField()


class VolunteerProductivitySerializer(serializers.Serializer):
    volunteer = VolunteerSerializer()
    total_scans = serializers.IntegerField()
    total_checkins = serializers.IntegerField()
    total_checkouts = serializers.IntegerField()
    first_scan_time = serializers.DateTimeField(allow_null=True)
    last_scan_time = serializers.DateTimeField(allow_null=True)
    active_hours = serializers.FloatField()
    average_scans_per_hour = serializers.FloatField()


class SessionSerializer(serializers.Serializer):
    student_id = serializers.UUIDField()
    stall_id = serializers.UUIDField()
    check_in_at = serializers.DateTimeField()
    check_out_at = serializers.DateTimeField(allow_null=True)
    duration_minutes = serializers.FloatField()


class AnalyticsReportSerializer(serializers.Serializer):
    event = EventSerializer()
    registrations = RegistrationCountsSerializer()
    revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    feedback = FeedbackSummarySerializer()
    top_stalls = StallStandingSerializer(many=True)
    top_schools = SchoolStandingSerializer(many=True)
    stalls = StallBreakdownSerializer(many=True)
    volunteers = VolunteerProductivitySerializer(many=True)
    check_in_out = AttendanceStatsSerializer()
