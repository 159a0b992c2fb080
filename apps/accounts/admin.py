# accounts/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from .models import UserProfile


# =============================================================================
# USER PROFILE INLINE
# =============================================================================

class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    verbose_name = 'Profile'
    verbose_name_plural = 'Profile'
    fk_name = 'user'

    fieldsets = (
        ('Role & Approval', {
            'fields': ('full_name', 'role', 'status')
        }),
    )


# =============================================================================
# CUSTOM USER ADMIN
# =============================================================================

class CustomUserAdmin(BaseUserAdmin):
    inlines = [UserProfileInline]

    list_display = [
        'username',
        'full_name_display',
        'user_role',
        'approval_status',
        'is_active',
        'date_joined'
    ]

    def _profile(self, obj):
        return getattr(obj, 'profile', None)

    def full_name_display(self, obj):
        profile = self._profile(obj)
        return profile.full_name if profile else obj.get_full_name()
    full_name_display.short_description = 'Full Name'

    def user_role(self, obj):
        profile = self._profile(obj)
        return profile.get_role_display() if profile else '-'
    user_role.short_description = 'Role'

    def approval_status(self, obj):
        profile = self._profile(obj)
        return profile.get_status_display() if profile else '-'
    approval_status.short_description = 'Status'


admin.site.unregister(User)
admin.site.register(User, CustomUserAdmin)


# =============================================================================
# USER PROFILE ADMIN
# =============================================================================

@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'full_name', 'role', 'status', 'created_at']
    list_filter = ['role', 'status']
    search_fields = ['user__username', 'full_name']
    readonly_fields = ['created_at', 'updated_at']
    actions = ['approve_users', 'reject_users']

    def approve_users(self, request, queryset):
        updated = queryset.update(status=UserProfile.STATUS_ACTIVE)
        self.message_user(request, f'{updated} user(s) approved.')
    approve_users.short_description = 'Approve selected users'

    def reject_users(self, request, queryset):
        updated = queryset.update(status=UserProfile.STATUS_REJECTED)
        self.message_user(request, f'{updated} user(s) rejected.')
    reject_users.short_description = 'Reject selected users'
