import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

EVENT_STATUSES = [
    ("DRAFT", "DRAFT"),
    ("PENDING_APPROVAL", "PENDING_APPROVAL"),
    ("APPROVED", "APPROVED"),
    ("REJECTED", "REJECTED"),
    ("ACTIVE", "ACTIVE"),
    ("COMPLETED", "COMPLETED"),
    ("ARCHIVED", "ARCHIVED"),
    ("CANCELLED", "CANCELLED"),
]


def _uuid_pk():
    return models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="School",
            fields=[
                ("id", _uuid_pk()),
                ("school_name", models.CharField(max_length=255, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["school_name"]},
        ),
        migrations.CreateModel(
            name="Admin",
            fields=[
                ("id", _uuid_pk()),
                ("full_name", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="exhibition_admin",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="EventManager",
            fields=[
                ("id", _uuid_pk()),
                ("full_name", models.CharField(max_length=255)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("organization", models.CharField(blank=True, max_length=255)),
                ("is_approved_by_admin", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "approved_by_admin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="exhibitions.admin",
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_manager",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Volunteer",
            fields=[
                ("id", _uuid_pk()),
                ("full_name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Student",
            fields=[
                ("id", _uuid_pk()),
                ("full_name", models.CharField(max_length=255)),
                ("registration_no", models.CharField(max_length=64, unique=True)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("has_completed_ranking", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "school",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="students",
                        to="exhibitions.school",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", _uuid_pk()),
                ("event_name", models.CharField(max_length=255)),
                ("event_code", models.CharField(max_length=64, unique=True)),
                ("description", models.TextField(blank=True)),
                ("venue", models.CharField(blank=True, max_length=255)),
                (
                    "event_type",
                    models.CharField(choices=[("FREE", "FREE"), ("PAID", "PAID")], max_length=8),
                ),
                ("price", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("currency", models.CharField(default="INR", max_length=3)),
                ("max_capacity", models.PositiveIntegerField(blank=True, null=True)),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                ("registration_start_date", models.DateTimeField()),
                ("registration_end_date", models.DateTimeField()),
                ("banner_image_url", models.URLField(blank=True, max_length=500, null=True)),
                ("image_url", models.URLField(blank=True, max_length=500, null=True)),
                (
                    "status",
                    models.CharField(choices=EVENT_STATUSES, default="DRAFT", max_length=20),
                ),
                ("admin_approved_at", models.DateTimeField(blank=True, null=True)),
                ("admin_rejection_reason", models.TextField(blank=True, null=True)),
                ("admin_rejected_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "approved_by_admin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="exhibitions.admin",
                    ),
                ),
                (
                    "created_by_manager",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="events",
                        to="exhibitions.eventmanager",
                    ),
                ),
            ],
            options={
                "ordering": ["-start_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="event_status_idx"),
                    models.Index(
                        fields=["created_by_manager", "status"], name="event_manager_status_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Stall",
            fields=[
                ("id", _uuid_pk()),
                ("stall_number", models.PositiveIntegerField()),
                ("stall_name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("image_url", models.URLField(blank=True, max_length=500, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("rank_1_votes", models.PositiveIntegerField(default=0)),
                ("rank_2_votes", models.PositiveIntegerField(default=0)),
                ("rank_3_votes", models.PositiveIntegerField(default=0)),
                ("weighted_score", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stalls",
                        to="exhibitions.event",
                    ),
                ),
                (
                    "school",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stalls",
                        to="exhibitions.school",
                    ),
                ),
            ],
            options={
                "ordering": ["stall_number"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "stall_number"), name="unique_stall_number_per_event"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventVolunteer",
            fields=[
                ("id", _uuid_pk()),
                ("assigned_location", models.CharField(blank=True, max_length=255)),
                ("is_active", models.BooleanField(default=True)),
                ("assigned_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="volunteer_assignments",
                        to="exhibitions.event",
                    ),
                ),
                (
                    "volunteer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_assignments",
                        to="exhibitions.volunteer",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "volunteer"), name="unique_volunteer_per_event"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Ranking",
            fields=[
                ("id", _uuid_pk()),
                (
                    "rank",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(3),
                        ]
                    ),
                ),
                (
                    "percentage",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rankings",
                        to="exhibitions.event",
                    ),
                ),
                (
                    "stall",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rankings",
                        to="exhibitions.stall",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rankings",
                        to="exhibitions.student",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("student", "stall", "event"), name="unique_student_stall_ranking"
                    ),
                ],
                "indexes": [
                    models.Index(fields=["event", "stall"], name="ranking_event_stall_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CheckInOut",
            fields=[
                ("id", _uuid_pk()),
                (
                    "check_type",
                    models.CharField(
                        choices=[("CHECK_IN", "CHECK_IN"), ("CHECK_OUT", "CHECK_OUT")],
                        max_length=10,
                    ),
                ),
                ("check_time", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="scans",
                        to="exhibitions.event",
                    ),
                ),
                (
                    "scanned_by_volunteer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="scans",
                        to="exhibitions.volunteer",
                    ),
                ),
                (
                    "stall",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="scans",
                        to="exhibitions.stall",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="scans",
                        to="exhibitions.student",
                    ),
                ),
            ],
            options={
                "ordering": ["check_time"],
                "indexes": [
                    models.Index(fields=["event", "check_time"], name="scan_event_time_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", _uuid_pk()),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("PENDING", "PENDING"),
                            ("COMPLETED", "COMPLETED"),
                            ("FAILED", "FAILED"),
                            ("REFUNDED", "REFUNDED"),
                        ],
                        default="PENDING",
                        max_length=10,
                    ),
                ),
                (
                    "attendance_status",
                    models.CharField(
                        choices=[
                            ("REGISTERED", "REGISTERED"),
                            ("PRESENT", "PRESENT"),
                            ("ABSENT", "ABSENT"),
                        ],
                        default="REGISTERED",
                        max_length=10,
                    ),
                ),
                ("amount_paid", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("registered_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="exhibitions.event",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="exhibitions.student",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "student"), name="unique_registration_per_event"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Feedback",
            fields=[
                ("id", _uuid_pk()),
                (
                    "overall_rating",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ]
                    ),
                ),
                ("comment", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedbacks",
                        to="exhibitions.event",
                    ),
                ),
                (
                    "stall",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedbacks",
                        to="exhibitions.stall",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedbacks",
                        to="exhibitions.student",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", _uuid_pk()),
                ("event_type", models.CharField(max_length=64)),
                ("actor_id", models.UUIDField(blank=True, null=True)),
                ("actor_role", models.CharField(blank=True, max_length=20)),
                ("resource_type", models.CharField(max_length=32)),
                ("resource_id", models.CharField(max_length=64)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["resource_type", "resource_id"], name="audit_resource_idx"),
                ],
            },
        ),
    ]
