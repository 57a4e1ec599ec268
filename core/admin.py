from django.contrib import admin, messages
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .accounts import upsert_role
from .models import (
    CandidateOnboardingRequest,
    LearningProgress,
    LearningRoadmap,
    MentorOnboardingRequest,
    MentorshipRequest,
    MilestoneComment,
    Profile,
    UserRole,
)
from .permissions import user_roles

User = get_user_model()


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    extra = 0
    max_num = 1


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0
    readonly_fields = ('created_at',)


class AppUserAdmin(DjangoUserAdmin):
    inlines = (ProfileInline, UserRoleInline)
    list_display = DjangoUserAdmin.list_display + ('app_roles',)
    actions = ('mark_as_admin_role',)

    @admin.display(description='Roles')
    def app_roles(self, obj):
        return ', '.join(user_roles(obj)) or '-'

    @admin.action(description='Grant admin role to selected users')
    def mark_as_admin_role(self, request, queryset):
        updated_count = 0
        for user in queryset:
            upsert_role(user, UserRole.ROLE_ADMIN)
            updated_count += 1
        self.message_user(
            request,
            f'{updated_count} user(s) updated with admin role.',
            level=messages.SUCCESS,
        )


try:
    admin.site.unregister(User)
except admin.sites.NotRegistered:
    pass
admin.site.register(User, AppUserAdmin)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'email', 'display_name', 'created_at')
    search_fields = ('email', 'display_name', 'user__username')


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ('user', 'role', 'created_at')
    list_filter = ('role',)
    search_fields = ('user__email', 'user__username')


class OnboardingRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'status', 'created_at', 'updated_at')
    list_filter = ('status',)
    search_fields = ('user__email',)
    actions = ('approve_requests', 'reject_requests')

    @admin.action(description='Approve selected onboarding requests')
    def approve_requests(self, request, queryset):
        updated = queryset.update(status=self.model.STATUS_APPROVED)
        self.message_user(request, f'{updated} request(s) approved.', level=messages.SUCCESS)

    @admin.action(description='Reject selected onboarding requests')
    def reject_requests(self, request, queryset):
        updated = queryset.update(status=self.model.STATUS_REJECTED)
        self.message_user(request, f'{updated} request(s) rejected.', level=messages.WARNING)


admin.site.register(CandidateOnboardingRequest, OnboardingRequestAdmin)
admin.site.register(MentorOnboardingRequest, OnboardingRequestAdmin)


@admin.register(MentorshipRequest)
class MentorshipRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'candidate', 'mentor', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('candidate__email', 'mentor__email', 'message')


@admin.register(LearningProgress)
class LearningProgressAdmin(admin.ModelAdmin):
    list_display = ('user', 'skill_name', 'progress_percentage', 'last_updated')
    search_fields = ('user__email', 'skill_name')


@admin.register(LearningRoadmap)
class LearningRoadmapAdmin(admin.ModelAdmin):
    list_display = ('title', 'mentor', 'candidate', 'created_at')
    search_fields = ('title', 'mentor__email', 'candidate__email')


@admin.register(MilestoneComment)
class MilestoneCommentAdmin(admin.ModelAdmin):
    list_display = ('id', 'roadmap', 'milestone_id', 'user', 'created_at')
    search_fields = ('comment', 'user__email', 'roadmap__title')
