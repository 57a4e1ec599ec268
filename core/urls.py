from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api_views import (
    AccessCheckView,
    AdminAnalyticsView,
    AdminDashboardView,
    AdminMentorshipRequestListView,
    AdminOnboardingDecisionView,
    AdminOnboardingQueueView,
    AdminUserViewSet,
    CandidateDashboardView,
    CandidateOnboardingView,
    CandidateOnlyAccessView,
    HomeRedirectView,
    LearningProgressViewSet,
    LearningRoadmapViewSet,
    MentorCandidatesView,
    MentorDashboardView,
    MentorInsightsView,
    MentorOnboardingView,
    MentorshipRequestViewSet,
    NavigationView,
    OnboardingStatusView,
    PasswordResetConfirmView,
    PasswordResetRequestView,
    PostLoginRedirectView,
    ProfileView,
    SeedSuperAdminView,
    SessionView,
    SignOutView,
    SignUpView,
)

router = DefaultRouter()
router.register(r"mentorship-requests", MentorshipRequestViewSet, basename="mentorship-request")
router.register(r"learning-progress", LearningProgressViewSet, basename="learning-progress")
router.register(r"learning-roadmaps", LearningRoadmapViewSet, basename="learning-roadmap")
router.register(r"admin/users", AdminUserViewSet, basename="admin-user")


urlpatterns = [
    path("auth/session/", SessionView.as_view(), name="auth-session"),
    path("auth/sign-up/", SignUpView.as_view(), name="auth-sign-up"),
    path("auth/sign-out/", SignOutView.as_view(), name="auth-sign-out"),
    path("auth/password-reset/", PasswordResetRequestView.as_view(), name="auth-password-reset"),
    path(
        "auth/password-reset/confirm/",
        PasswordResetConfirmView.as_view(),
        name="auth-password-reset-confirm",
    ),
    path("access/check/", AccessCheckView.as_view(), name="access-check"),
    path("access/home/", HomeRedirectView.as_view(), name="access-home"),
    path("access/post-login/", PostLoginRedirectView.as_view(), name="access-post-login"),
    path("access/candidate-only/", CandidateOnlyAccessView.as_view(), name="access-candidate-only"),
    path("onboarding/status/", OnboardingStatusView.as_view(), name="onboarding-status"),
    path("onboarding/candidate/", CandidateOnboardingView.as_view(), name="onboarding-candidate"),
    path("onboarding/mentor/", MentorOnboardingView.as_view(), name="onboarding-mentor"),
    path("navigation/", NavigationView.as_view(), name="navigation"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("dashboard/mentor/", MentorDashboardView.as_view(), name="dashboard-mentor"),
    path("dashboard/mentor/insights/", MentorInsightsView.as_view(), name="dashboard-mentor-insights"),
    path("dashboard/mentor/candidates/", MentorCandidatesView.as_view(), name="dashboard-mentor-candidates"),
    path("dashboard/candidate/", CandidateDashboardView.as_view(), name="dashboard-candidate"),
    path("admin/dashboard/", AdminDashboardView.as_view(), name="admin-dashboard"),
    path("admin/analytics/", AdminAnalyticsView.as_view(), name="admin-analytics"),
    path("admin/onboarding/", AdminOnboardingQueueView.as_view(), name="admin-onboarding"),
    path(
        "admin/onboarding/<str:kind>/<int:pk>/decision/",
        AdminOnboardingDecisionView.as_view(),
        name="admin-onboarding-decision",
    ),
    path("admin/mentorship-requests/", AdminMentorshipRequestListView.as_view(), name="admin-mentorship-requests"),
    path("functions/seed-super-admin/", SeedSuperAdminView.as_view(), name="seed-super-admin"),
    path("", include(router.urls)),
]
