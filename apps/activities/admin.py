from django.contrib import admin
from .models import Activity, ActivityUser


class ActivityUserInline(admin.TabularInline):
    model = ActivityUser
    extra = 0
    raw_id_fields = ['user']
    readonly_fields = ['joined_at']


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_by', 'location', 'start_date', 'end_date', 'participant_count', 'created_at']
    list_filter = ['start_date', 'created_at']
    search_fields = ['name', 'description', 'location', 'created_by__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['created_by']
    date_hierarchy = 'created_at'
    inlines = [ActivityUserInline]

    def participant_count(self, obj):
        return obj.participants.count()
    participant_count.short_description = 'Participants'


@admin.register(ActivityUser)
class ActivityUserAdmin(admin.ModelAdmin):
    list_display = ['activity', 'user', 'is_admin', 'joined_at']
    list_filter = ['is_admin', 'joined_at']
    search_fields = ['activity__name', 'user__email']
    raw_id_fields = ['activity', 'user']
