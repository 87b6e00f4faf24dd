from django.contrib import admin

from exhibitions.models import (
    Admin,
    AuditLog,
    CheckInOut,
    Event,
    EventManager,
    EventVolunteer,
    Ranking,
    School,
    Stall,
    Student,
    Volunteer,
)


class StallInline(admin.TabularInline):
    model = Stall
    extra = 1
    readonly_fields = ["rank_1_votes", "rank_2_votes", "rank_3_votes", "weighted_score"]


class EventVolunteerInline(admin.TabularInline):
    model = EventVolunteer
    extra = 1


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["event_name", "event_code", "status", "start_date", "created_by_manager"]
    list_filter = ["status", "event_type"]
    search_fields = ["event_name", "event_code", "venue"]
    # Status moves only through the lifecycle endpoints.
    readonly_fields = [
        "status",
        "approved_by_admin",
        "admin_approved_at",
        "admin_rejection_reason",
        "admin_rejected_at",
    ]
    inlines = [StallInline, EventVolunteerInline]


@admin.register(Stall)
class StallAdmin(admin.ModelAdmin):
    list_display = ["stall_number", "stall_name", "event", "school", "weighted_score", "is_active"]
    list_filter = ["event", "is_active"]
    readonly_fields = ["rank_1_votes", "rank_2_votes", "rank_3_votes", "weighted_score"]


@admin.register(EventManager)
class EventManagerAdmin(admin.ModelAdmin):
    list_display = ["full_name", "organization", "is_approved_by_admin", "is_active"]
    list_filter = ["is_approved_by_admin", "is_active"]


@admin.register(Ranking)
class RankingAdmin(admin.ModelAdmin):
    list_display = ["event", "student", "stall", "rank"]
    list_filter = ["event", "rank"]


@admin.register(CheckInOut)
class CheckInOutAdmin(admin.ModelAdmin):
    list_display = ["event", "student", "stall", "check_type", "check_time"]
    list_filter = ["event", "check_type"]


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["event_type", "resource_type", "resource_id", "actor_role", "created_at"]
    list_filter = ["event_type", "resource_type"]


admin.site.register([Admin, School, Student, Volunteer])
