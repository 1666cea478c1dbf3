from django.contrib import admin
from .models import Expense, ExpenseShare


class ExpenseShareInline(admin.TabularInline):
    model = ExpenseShare
    extra = 0
    readonly_fields = ['id', 'user', 'share_amount', 'share_percentage', 'is_paid', 'paid_at', 'created_at']
    can_delete = False


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['name', 'activity', 'amount', 'currency', 'paid_by', 'split_type', 'expense_date']
    list_filter = ['split_type', 'currency', 'expense_date']
    search_fields = ['name', 'activity__name', 'paid_by__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['activity', 'task', 'paid_by']
    date_hierarchy = 'expense_date'
    inlines = [ExpenseShareInline]


@admin.register(ExpenseShare)
class ExpenseShareAdmin(admin.ModelAdmin):
    list_display = ['expense', 'user', 'share_amount', 'share_percentage', 'is_paid', 'paid_at']
    list_filter = ['is_paid']
    search_fields = ['expense__name', 'user__email']
    readonly_fields = ['id', 'created_at']
    raw_id_fields = ['expense', 'user']

    actions = ['mark_as_paid']

    @admin.action(description='Mark selected shares as paid')
    def mark_as_paid(self, request, queryset):
        count = 0
        for share in queryset:
            if share.mark_paid():
                count += 1
        self.message_user(request, f'Marked {count} share(s) as paid.')
