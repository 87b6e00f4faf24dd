"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from exhibitions.domain.value_objects import CheckType, EventStatus, EventType


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.value) for member in enum_cls]


class School(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    school_name = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["school_name"]

    def __str__(self) -> str:
        return self.school_name


class Admin(models.Model):
    """Platform administrator profile attached to an auth user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="exhibition_admin"
    )
    full_name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.full_name


class EventManager(models.Model):
    """Event manager profile attached to an auth user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="event_manager"
    )
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32, blank=True)
    organization = models.CharField(max_length=255, blank=True)
    is_approved_by_admin = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    approved_by_admin = models.ForeignKey(
        Admin, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.full_name


class Volunteer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    full_name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.full_name


class Student(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    full_name = models.CharField(max_length=255)
    registration_no = models.CharField(max_length=64, unique=True)
    email = models.EmailField(blank=True)
    school = models.ForeignKey(
        School, on_delete=models.SET_NULL, null=True, blank=True, related_name="students"
    )
    has_completed_ranking = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.registration_no})"


class Event(models.Model):
    """Persistence model for events. Rows are never deleted; see CANCELLED."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_name = models.CharField(max_length=255)
    event_code = models.CharField(max_length=64, unique=True)
    description = models.TextField(blank=True)
    venue = models.CharField(max_length=255, blank=True)
    event_type = models.CharField(max_length=8, choices=_choices(EventType))
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, default="INR")
    max_capacity = models.PositiveIntegerField(null=True, blank=True)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    registration_start_date = models.DateTimeField()
    registration_end_date = models.DateTimeField()
    banner_image_url = models.URLField(max_length=500, blank=True, null=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    created_by_manager = models.ForeignKey(
        EventManager, on_delete=models.PROTECT, related_name="events"
    )
    status = models.CharField(
        max_length=20, choices=_choices(EventStatus), default=EventStatus.DRAFT.value
    )
    approved_by_admin = models.ForeignKey(
        Admin, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    admin_approved_at = models.DateTimeField(null=True, blank=True)
    admin_rejection_reason = models.TextField(null=True, blank=True)
    admin_rejected_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date", "-created_at"]
        indexes = [
            models.Index(fields=["status"], name="event_status_idx"),
            models.Index(fields=["created_by_manager", "status"], name="event_manager_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event_name} [{self.event_code}]"


class Stall(models.Model):
    """Exhibitor booth. Vote counters are a cache of the ranking rows."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="stalls")
    school = models.ForeignKey(
        School, on_delete=models.SET_NULL, null=True, blank=True, related_name="stalls"
    )
    stall_number = models.PositiveIntegerField()
    stall_name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    rank_1_votes = models.PositiveIntegerField(default=0)
    rank_2_votes = models.PositiveIntegerField(default=0)
    rank_3_votes = models.PositiveIntegerField(default=0)
    weighted_score = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["stall_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "stall_number"], name="unique_stall_number_per_event"
            ),
        ]

    def __str__(self) -> str:
        return f"#{self.stall_number} {self.stall_name}"


class EventVolunteer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="volunteer_assignments")
    volunteer = models.ForeignKey(
        Volunteer, on_delete=models.CASCADE, related_name="event_assignments"
    )
    assigned_location = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "volunteer"], name="unique_volunteer_per_event"
            ),
        ]


class Ranking(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="rankings")
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="rankings")
    stall = models.ForeignKey(Stall, on_delete=models.CASCADE, related_name="rankings")
    rank = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(3)]
    )
    percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["student", "stall", "event"], name="unique_student_stall_ranking"
            ),
        ]
        indexes = [
            models.Index(fields=["event", "stall"], name="ranking_event_stall_idx"),
        ]


class CheckInOut(models.Model):
    """One badge scan. Duplicates and out-of-order rows are tolerated."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="scans")
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="scans")
    stall = models.ForeignKey(Stall, on_delete=models.CASCADE, related_name="scans")
    scanned_by_volunteer = models.ForeignKey(
        Volunteer, on_delete=models.SET_NULL, null=True, blank=True, related_name="scans"
    )
    check_type = models.CharField(max_length=10, choices=_choices(CheckType))
    check_time = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["check_time"]
        indexes = [
            models.Index(fields=["event", "check_time"], name="scan_event_time_idx"),
        ]


class Registration(models.Model):
    PAYMENT_STATUSES = ["PENDING", "COMPLETED", "FAILED", "REFUNDED"]
    ATTENDANCE_STATUSES = ["REGISTERED", "PRESENT", "ABSENT"]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="registrations")
    payment_status = models.CharField(
        max_length=10, choices=[(s, s) for s in PAYMENT_STATUSES], default="PENDING"
    )
    attendance_status = models.CharField(
        max_length=10, choices=[(s, s) for s in ATTENDANCE_STATUSES], default="REGISTERED"
    )
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "student"], name="unique_registration_per_event"
            ),
        ]


class Feedback(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="feedbacks")
    stall = models.ForeignKey(Stall, on_delete=models.CASCADE, related_name="feedbacks")
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="feedbacks")
    overall_rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)


class AuditLog(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_type = models.CharField(max_length=64)
    actor_id = models.UUIDField(null=True, blank=True)
    actor_role = models.CharField(max_length=20, blank=True)
    resource_type = models.CharField(max_length=32)
    resource_id = models.CharField(max_length=64)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["resource_type", "resource_id"], name="audit_resource_idx"),
        ]
