from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['name', 'activity', 'status', 'priority', 'assigned_to', 'due_date', 'completed_at']
    list_filter = ['status', 'priority', 'due_date']
    search_fields = ['name', 'description', 'activity__name', 'assigned_to__email']
    readonly_fields = ['id', 'completed_at', 'created_at', 'updated_at']
    raw_id_fields = ['activity', 'assigned_to', 'created_by']
    date_hierarchy = 'created_at'
