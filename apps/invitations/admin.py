from django.contrib import admin
from .models import Invitation


@admin.register(Invitation)
class InvitationAdmin(admin.ModelAdmin):
    list_display = ['activity', 'invited_user', 'invited_by', 'status', 'created_at', 'responded_at']
    list_filter = ['status', 'created_at']
    search_fields = ['activity__name', 'invited_user__email', 'invited_by__email']
    readonly_fields = ['id', 'created_at', 'responded_at']
    raw_id_fields = ['activity', 'invited_by', 'invited_user']
