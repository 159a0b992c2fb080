# loans/admin.py

from django.contrib import admin
from .models import Collector, Loan, Payment, LoanHistory, LoanRemark


# =============================================================================
# COLLECTOR ADMIN
# =============================================================================

@admin.register(Collector)
class CollectorAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'created_at']
    search_fields = ['name', 'user__username']
    readonly_fields = ['created_at', 'updated_at']


# =============================================================================
# LOAN ADMIN
# =============================================================================

class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    can_delete = False
    fields = ['amount', 'payment_date', 'recorded_by']
    readonly_fields = ['amount', 'payment_date', 'recorded_by']

    def has_add_permission(self, request, obj=None):
        # Payments are recorded through PaymentService
        return False


@admin.register(Loan)
class LoanAdmin(admin.ModelAdmin):
    list_display = [
        'loan_code',
        'borrower_name',
        'collector',
        'month_reported',
        'due_date',
        'outstanding_balance',
        'amount_collected',
        'running_balance',
        'moving_status',
        'location_status',
        'overdue',
    ]
    list_filter = ['moving_status', 'location_status', 'collector', 'area']
    search_fields = ['loan_code', 'borrower_name', 'city', 'barangay']
    readonly_fields = ['running_balance', 'created_at', 'updated_at']
    inlines = [PaymentInline]

    @admin.display(boolean=True, description='Overdue')
    def overdue(self, obj):
        return obj.is_overdue

    fieldsets = (
        ('Account', {
            'fields': ('loan_code', 'borrower_name', 'collector', 'month_reported', 'due_date')
        }),
        ('Balances', {
            'fields': ('outstanding_balance', 'amount_collected', 'running_balance')
        }),
        ('Status', {
            'fields': ('moving_status', 'location_status')
        }),
        ('Location', {
            'fields': ('area', 'city', 'barangay', 'full_address'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(LoanHistory)
class LoanHistoryAdmin(admin.ModelAdmin):
    list_display = ['loan', 'field_name', 'old_value', 'new_value', 'changed_by', 'changed_at']
    list_filter = ['field_name']
    search_fields = ['loan__loan_code', 'loan__borrower_name']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(LoanRemark)
class LoanRemarkAdmin(admin.ModelAdmin):
    list_display = ['loan', 'user', 'priority', 'follow_up_date', 'is_read', 'created_at']
    list_filter = ['priority', 'is_read']
    search_fields = ['loan__loan_code', 'remark']
