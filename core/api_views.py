import hmac
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.contrib.auth.tokens import default_token_generator
from django.core.mail import send_mail
from django.db import DatabaseError, IntegrityError
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken

from . import guards
from .accounts import (
    assign_role,
    create_user_account,
    delete_user_account,
    remove_role,
    seed_super_admin,
    update_user_account,
)
from .insights import DEFAULT_PERIOD, admin_analytics, candidate_dashboard, mentor_dashboard, mentor_insights
from .learning import (
    MILESTONE_TEMPLATES,
    add_milestone_comment,
    add_new_skill,
    create_roadmap,
    delete_milestone_comment,
    get_learning_progress,
    milestone_comments,
    remove_skill,
    set_milestone_progress,
    template_milestones,
    toggle_milestone,
    update_learning_progress,
)
from .mentorship import (
    accepted_candidate_ids,
    enrich_requests,
    filter_mentorship_requests,
    mentor_candidates,
    request_details,
    respond_to_request,
    send_message_to_candidate,
    status_counts,
    update_request_status,
)
from .models import (
    CandidateOnboardingRequest,
    LearningRoadmap,
    MentorOnboardingRequest,
    MentorshipRequest,
    OnboardingRequest,
    Profile,
    UserRole,
)
from .navigation import (
    build_breadcrumbs,
    header_context,
    navigation_guide,
    quick_stats,
    route_requirements,
    sidebar_items,
    sidebar_title,
)
from .permissions import (
    ADMIN_ROLES,
    ROLE_CANDIDATE,
    ROLE_MENTOR,
    IsAdminRole,
    IsAuthenticatedWithAppRole,
    IsMentorOrAdminRole,
    IsSuperAdminRole,
    user_roles,
)
from .serializers import (
    AdminUserCreateSerializer,
    AdminUserSerializer,
    AdminUserUpdateSerializer,
    CandidateOnboardingRequestSerializer,
    LearningProgressSerializer,
    LearningProgressWriteSerializer,
    LearningRoadmapCreateSerializer,
    LearningRoadmapSerializer,
    MentorOnboardingRequestSerializer,
    MentorshipMessageSerializer,
    MentorshipRequestSerializer,
    MentorshipStatusSerializer,
    MilestoneCommentCreateSerializer,
    MilestoneCommentSerializer,
    MilestoneProgressSerializer,
    MilestoneToggleSerializer,
    OnboardingDecisionSerializer,
    OnboardingSubmitSerializer,
    PasswordResetConfirmSerializer,
    PasswordResetRequestSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RoleAssignmentSerializer,
    SignOutSerializer,
    SignUpSerializer,
)
from .session import get_auth_context

logger = logging.getLogger(__name__)

User = get_user_model()

ONBOARDING_MODELS = {
    "candidate": (CandidateOnboardingRequest, CandidateOnboardingRequestSerializer),
    "mentor": (MentorOnboardingRequest, MentorOnboardingRequestSerializer),
}


def require_role(request, allowed_roles):
    if not set(user_roles(request.user)) & set(allowed_roles):
        raise PermissionDenied("You do not have permission to access this endpoint.")


def is_admin(request):
    return bool(set(user_roles(request.user)) & ADMIN_ROLES)


def database_error_response(exc):
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def int_query_param(request, name):
    """Integer query parameter, or None when absent. Non-numeric values answer 400."""
    value = request.query_params.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError({"detail": f"{name} must be an integer."})


def build_auth_token_payload(user):
    roles = user_roles(user)
    refresh = RefreshToken.for_user(user)
    refresh["roles"] = roles
    refresh["email"] = user.email
    access = refresh.access_token
    access["roles"] = roles
    access["email"] = user.email
    if api_settings.UPDATE_LAST_LOGIN:
        update_last_login(None, user)
    return {
        "refresh": str(refresh),
        "access": str(access),
    }


# -----------------------------
# Auth
# -----------------------------
class SessionView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(get_auth_context(request.user).as_dict())


class SignUpView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = SignUpSerializer

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            user, _profile_synced = create_user_account(
                data["email"],
                data["password"],
                display_name=data.get("display_name", ""),
            )
        except DatabaseError as exc:
            return database_error_response(exc)
        payload = {
            "user": {"id": user.pk, "email": user.email},
            "next": f"/onboarding/{data['role']}",
            **build_auth_token_payload(user),
        }
        return Response(payload, status=status.HTTP_201_CREATED)


class SignOutView(GenericAPIView):
    # Sign-out succeeds without a valid access token.
    authentication_classes = []
    permission_classes = [AllowAny]
    serializer_class = SignOutSerializer

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        refresh = serializer.validated_data.get("refresh")
        if refresh:
            try:
                RefreshToken(refresh).blacklist()
            except TokenError:
                logger.warning("Sign-out with an unusable refresh token")
        redirect_to = "/admin" if serializer.validated_data.get("from_admin") else guards.LOGIN_PATH
        return Response({"detail": "Signed out.", "redirect_to": redirect_to})


class PasswordResetRequestView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = PasswordResetRequestSerializer

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]
        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is not None:
            uid = urlsafe_base64_encode(force_bytes(user.pk))
            token = default_token_generator.make_token(user)
            link = f"{settings.FRONTEND_BASE_URL}/auth/reset-password?uid={uid}&token={token}"
            try:
                send_mail(
                    "Reset your Preplaced password",
                    f"Use the link below to choose a new password:\n\n{link}\n",
                    settings.DEFAULT_FROM_EMAIL,
                    [user.email],
                )
            except OSError:
                logger.warning("Password reset email to %s failed", user.email, exc_info=True)
        return Response({"detail": "If an account exists for this email, a reset link has been sent."})


class PasswordResetConfirmView(GenericAPIView):
    permission_classes = [AllowAny]
    serializer_class = PasswordResetConfirmSerializer

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            user_id = force_str(urlsafe_base64_decode(data["uid"]))
            user = User.objects.get(pk=user_id)
        except (TypeError, ValueError, OverflowError, User.DoesNotExist):
            user = None
        if user is None or not default_token_generator.check_token(user, data["token"]):
            return Response({"detail": "Invalid or expired reset link."}, status=status.HTTP_400_BAD_REQUEST)
        user.set_password(data["new_password"])
        user.save(update_fields=["password"])
        return Response({"detail": "Password has been reset."})


# -----------------------------
# Access decisions
# -----------------------------
class AccessCheckView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        path = request.query_params.get("path", "/")
        public, required_roles = route_requirements(path)
        if public:
            decision = guards.allow("public")
        else:
            decision = guards.resolve_route_access(request.user, required_roles)
        return Response({"path": path, **decision.as_dict()})


class HomeRedirectView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(guards.resolve_role_redirect(request.user).as_dict())


class PostLoginRedirectView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(guards.resolve_post_login_redirect(request.user).as_dict())


class CandidateOnlyAccessView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(guards.resolve_candidate_only_route(request.user).as_dict())


class OnboardingStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(guards.resolve_pending_approval(request.user))


# -----------------------------
# Onboarding
# -----------------------------
class OnboardingSubmitView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OnboardingSubmitSerializer
    kind = None

    def get(self, request):
        model, serializer_class = ONBOARDING_MODELS[self.kind]
        latest = model.latest_for(request.user.pk)
        if latest is None:
            return Response({"detail": "No onboarding request found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(serializer_class(latest).data)

    def post(self, request):
        model, serializer_class = ONBOARDING_MODELS[self.kind]
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            onboarding = model.objects.create(
                user=request.user,
                data=serializer.validated_data["data"],
                status=OnboardingRequest.STATUS_PENDING,
            )
        except DatabaseError as exc:
            return database_error_response(exc)
        logger.info("%s onboarding request %s submitted by user %s", self.kind, onboarding.pk, request.user.pk)
        return Response(serializer_class(onboarding).data, status=status.HTTP_201_CREATED)


class CandidateOnboardingView(OnboardingSubmitView):
    kind = "candidate"


class MentorOnboardingView(OnboardingSubmitView):
    kind = "mentor"


# -----------------------------
# Navigation and profile
# -----------------------------
def navigation_counts(user, roles):
    counts = {}
    if ROLE_MENTOR in roles:
        received = MentorshipRequest.objects.filter(mentor=user)
        counts["pending_requests"] = received.filter(status=MentorshipRequest.STATUS_PENDING).count()
        counts["accepted_candidates"] = len(accepted_candidate_ids(user))
    elif ROLE_CANDIDATE in roles:
        sent = MentorshipRequest.objects.filter(candidate=user)
        counts["total_requests"] = sent.count()
        counts["pending_requests"] = sent.filter(status=MentorshipRequest.STATUS_PENDING).count()
        counts["total_roadmaps"] = LearningRoadmap.objects.filter(candidate=user).count()
    elif set(roles) & ADMIN_ROLES:
        counts["total_users"] = User.objects.count()
        counts["pending_requests"] = MentorshipRequest.objects.filter(
            status=MentorshipRequest.STATUS_PENDING
        ).count()
    return counts


class NavigationView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        path = request.query_params.get("path", "/")
        context = get_auth_context(request.user)
        counts = navigation_counts(request.user, context.roles)
        return Response(
            {
                "header": header_context(context),
                "sidebar": {
                    **sidebar_title(context.roles),
                    "items": sidebar_items(context.roles, counts, path),
                    "quick_stats": quick_stats(context.roles, counts),
                },
                "breadcrumbs": build_breadcrumbs(path),
                "guide": navigation_guide(context.roles),
            }
        )


class ProfileView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProfileUpdateSerializer

    def get(self, request):
        profile, _ = Profile.objects.get_or_create(user=request.user, defaults={"email": request.user.email})
        return Response(ProfileSerializer(profile).data)

    def patch(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        current, _ = Profile.objects.get_or_create(user=request.user, defaults={"email": request.user.email})
        email = serializer.validated_data.get("email", current.email or request.user.email)
        display_name = serializer.validated_data.get("display_name", current.display_name)
        try:
            profile, email_synced = update_user_account(request.user, email, display_name)
        except DatabaseError as exc:
            return database_error_response(exc)
        return Response({**ProfileSerializer(profile).data, "email_synced": email_synced})


# -----------------------------
# Mentorship requests
# -----------------------------
class MentorshipRequestViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = MentorshipRequest.objects.all().order_by("-created_at", "-id")
    serializer_class = MentorshipRequestSerializer
    permission_classes = [IsAuthenticatedWithAppRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        if is_admin(self.request):
            return queryset
        user = self.request.user
        return queryset.filter(Q(candidate=user) | Q(mentor=user))

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        box = request.query_params.get("box")
        if box == "sent":
            queryset = queryset.filter(candidate=request.user)
        elif box == "received":
            queryset = queryset.filter(mentor=request.user)
        rows = enrich_requests(queryset)
        filtered = filter_mentorship_requests(
            rows,
            request.query_params.get("status", "all"),
            request.query_params.get("search", ""),
        )
        return Response({"counts": status_counts(rows), "results": filtered})

    def retrieve(self, request, *args, **kwargs):
        return Response(request_details(self.get_object()))

    def perform_create(self, serializer):
        require_role(self.request, {ROLE_CANDIDATE})
        instance = serializer.save(candidate=self.request.user, status=MentorshipRequest.STATUS_PENDING)
        logger.info("Mentorship request %s sent to mentor %s", instance.pk, instance.mentor_id)

    def _own_received_request(self, request):
        mentorship_request = self.get_object()
        if mentorship_request.mentor_id != request.user.pk and not is_admin(request):
            raise PermissionDenied("Only the requested mentor can respond to this request.")
        return mentorship_request

    @action(detail=True, methods=["post"], url_path="accept")
    def accept(self, request, pk=None):
        mentorship_request = respond_to_request(self._own_received_request(request), "accept")
        return Response(request_details(mentorship_request))

    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):
        mentorship_request = respond_to_request(self._own_received_request(request), "reject")
        return Response(request_details(mentorship_request))

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        mentorship_request = self.get_object()
        if mentorship_request.candidate_id != request.user.pk and not is_admin(request):
            raise PermissionDenied("Only the requesting candidate can cancel this request.")
        if mentorship_request.status != MentorshipRequest.STATUS_PENDING:
            raise ValidationError({"detail": "Only pending requests can be cancelled."})
        update_request_status(mentorship_request, MentorshipRequest.STATUS_CANCELLED)
        return Response(request_details(mentorship_request))

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        mentorship_request = self._own_received_request(request)
        serializer = MentorshipStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_request_status(
            mentorship_request,
            serializer.validated_data["status"],
            serializer.validated_data.get("notes"),
        )
        return Response(request_details(mentorship_request))

    @action(detail=True, methods=["post"], url_path="message")
    def message(self, request, pk=None):
        mentorship_request = self._own_received_request(request)
        serializer = MentorshipMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        send_message_to_candidate(mentorship_request, serializer.validated_data["message"])
        return Response({"success": True, "notes": mentorship_request.notes})


# -----------------------------
# Learning progress and roadmaps
# -----------------------------
class LearningProgressViewSet(viewsets.GenericViewSet):
    serializer_class = LearningProgressWriteSerializer
    permission_classes = [IsAuthenticatedWithAppRole]

    def _target_user(self, request):
        user_id = int_query_param(request, "user_id")
        if user_id is None or user_id == request.user.pk:
            return request.user
        target = get_object_or_404(User, pk=user_id)
        if is_admin(request) or target.pk in accepted_candidate_ids(request.user):
            return target
        raise PermissionDenied("You can only view learning progress of your own candidates.")

    def list(self, request):
        rows = get_learning_progress(self._target_user(request))
        return Response(LearningProgressSerializer(rows, many=True).data)

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            row = add_new_skill(
                request.user,
                serializer.validated_data["skill_name"],
                serializer.validated_data.get("progress_percentage", 0),
            )
        except IntegrityError:
            return Response({"detail": "This skill is already being tracked."}, status=status.HTTP_400_BAD_REQUEST)
        return Response(LearningProgressSerializer(row).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["put"], url_path="upsert")
    def upsert(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            row = update_learning_progress(
                request.user,
                serializer.validated_data["skill_name"],
                serializer.validated_data.get("progress_percentage", 0),
            )
        except DatabaseError as exc:
            return database_error_response(exc)
        return Response(LearningProgressSerializer(row).data)

    @action(detail=False, methods=["delete"], url_path="remove")
    def remove(self, request):
        skill_name = request.query_params.get("skill_name") or request.data.get("skill_name")
        if not skill_name:
            return Response({"detail": "Provide skill_name."}, status=status.HTTP_400_BAD_REQUEST)
        removed = remove_skill(request.user, skill_name)
        return Response({"removed": removed})


class LearningRoadmapViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = LearningRoadmap.objects.all().order_by("-created_at", "-id")
    serializer_class = LearningRoadmapSerializer
    permission_classes = [IsAuthenticatedWithAppRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        if not is_admin(self.request):
            user = self.request.user
            queryset = queryset.filter(Q(mentor=user) | Q(candidate=user))
        mentorship_request_id = int_query_param(self.request, "mentorship_request")
        if mentorship_request_id is not None:
            queryset = queryset.filter(mentorship_request_id=mentorship_request_id)
        return queryset

    def create(self, request):
        require_role(request, {ROLE_MENTOR})
        serializer = LearningRoadmapCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        milestones = data.get("milestones") or template_milestones(data["template"])
        roadmap = create_roadmap(
            request.user,
            data["mentorship_request"],
            data["title"],
            data["description"],
            skills=data.get("skills"),
            milestones=milestones,
        )
        return Response(LearningRoadmapSerializer(roadmap).data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        if instance.mentor_id != self.request.user.pk and not is_admin(self.request):
            raise PermissionDenied("Only the mentor who created this roadmap can delete it.")
        instance.delete()

    @action(detail=True, methods=["post"], url_path="toggle-milestone")
    def toggle(self, request, pk=None):
        roadmap = self.get_object()
        serializer = MilestoneToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        roadmap = toggle_milestone(roadmap, serializer.validated_data["milestone_id"])
        return Response(LearningRoadmapSerializer(roadmap).data)

    @action(detail=True, methods=["post"], url_path="milestone-progress")
    def milestone_progress(self, request, pk=None):
        roadmap = self.get_object()
        if roadmap.candidate_id != request.user.pk:
            raise PermissionDenied("Only the candidate following this roadmap can update milestone progress.")
        serializer = MilestoneProgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        roadmap = set_milestone_progress(
            roadmap,
            serializer.validated_data["milestone_id"],
            serializer.validated_data["progress"],
        )
        return Response(LearningRoadmapSerializer(roadmap).data)

    @action(detail=True, methods=["get", "post"], url_path="comments")
    def comments(self, request, pk=None):
        roadmap = self.get_object()
        if request.method == "GET":
            rows = milestone_comments(roadmap, request.query_params.get("milestone_id"))
            return Response(MilestoneCommentSerializer(rows, many=True).data)
        serializer = MilestoneCommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = add_milestone_comment(
            roadmap,
            serializer.validated_data["milestone_id"],
            request.user,
            serializer.validated_data["comment"],
        )
        return Response(MilestoneCommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"], url_path=r"comments/(?P<comment_id>\d+)")
    def delete_comment(self, request, pk=None, comment_id=None):
        roadmap = self.get_object()
        delete_milestone_comment(roadmap, comment_id, request.user, allow_any=is_admin(request))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path="templates")
    def templates(self, request):
        return Response({skill: template_milestones(skill) for skill in MILESTONE_TEMPLATES})


# -----------------------------
# Dashboards
# -----------------------------
class MentorInsightsView(APIView):
    permission_classes = [IsMentorOrAdminRole]

    def get(self, request):
        mentor = request.user
        mentor_id = int_query_param(request, "mentor_id")
        if mentor_id is not None and is_admin(request):
            mentor = get_object_or_404(User, pk=mentor_id)
        period = request.query_params.get("period", DEFAULT_PERIOD)
        return Response(mentor_insights(mentor, period))


class MentorDashboardView(APIView):
    permission_classes = [IsMentorOrAdminRole]

    def get(self, request):
        return Response(mentor_dashboard(request.user))


class MentorCandidatesView(APIView):
    permission_classes = [IsMentorOrAdminRole]

    def get(self, request):
        return Response(mentor_candidates(request.user))


class CandidateDashboardView(APIView):
    permission_classes = [IsAuthenticatedWithAppRole]

    def get(self, request):
        require_role(request, {ROLE_CANDIDATE})
        return Response(candidate_dashboard(request.user))


class AdminAnalyticsView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response(admin_analytics())


# -----------------------------
# Admin user management
# -----------------------------
class AdminUserViewSet(viewsets.GenericViewSet):
    queryset = User.objects.all().order_by("-date_joined", "-id")
    serializer_class = AdminUserSerializer
    permission_classes = [IsSuperAdminRole]

    def list(self, request):
        queryset = self.get_queryset()
        search = request.query_params.get("search", "").strip()
        if search:
            queryset = queryset.filter(Q(email__icontains=search) | Q(profile__display_name__icontains=search))
        return Response(AdminUserSerializer(queryset, many=True).data)

    def retrieve(self, request, pk=None):
        return Response(AdminUserSerializer(self.get_object()).data)

    def create(self, request):
        serializer = AdminUserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            user, profile_synced = create_user_account(
                data["email"],
                data["password"],
                display_name=data.get("display_name", ""),
            )
        except DatabaseError as exc:
            return database_error_response(exc)
        logger.info("User %s added by admin %s", user.email, request.user.pk)
        return Response(
            {**AdminUserSerializer(user).data, "profile_synced": profile_synced},
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):
        user = self.get_object()
        serializer = AdminUserUpdateSerializer(data=request.data, context={"target_user": user})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            _profile, email_synced = update_user_account(user, data["email"], data.get("display_name", ""))
        except DatabaseError as exc:
            return database_error_response(exc)
        return Response({**AdminUserSerializer(user).data, "email_synced": email_synced})

    def update(self, request, pk=None):
        return self.partial_update(request, pk)

    def destroy(self, request, pk=None):
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response({"detail": "You cannot delete your own account."}, status=status.HTTP_400_BAD_REQUEST)
        try:
            result = delete_user_account(user.pk)
        except DatabaseError as exc:
            return database_error_response(exc)
        logger.info("User %s removed by admin %s", pk, request.user.pk)
        return Response(result)

    @action(detail=True, methods=["post"], url_path="roles")
    def add_role(self, request, pk=None):
        user = self.get_object()
        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            assign_role(user, serializer.validated_data["role"])
        except IntegrityError:
            return Response({"detail": "User already has this role."}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AdminUserSerializer(user).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"], url_path=r"roles/(?P<role>[a-z_]+)")
    def delete_role(self, request, pk=None, role=None):
        user = self.get_object()
        if not remove_role(user, role):
            return Response({"detail": "Role not assigned."}, status=status.HTTP_404_NOT_FOUND)
        return Response(AdminUserSerializer(user).data)


def onboarding_queues():
    pending = OnboardingRequest.STATUS_PENDING
    mentor_rows = MentorOnboardingRequest.objects.select_related("user").order_by("-created_at", "-id")
    candidate_rows = CandidateOnboardingRequest.objects.select_related("user").order_by("-created_at", "-id")
    mentor_data = MentorOnboardingRequestSerializer(mentor_rows, many=True).data
    candidate_data = CandidateOnboardingRequestSerializer(candidate_rows, many=True).data
    combined = [{**row, "type": "mentor"} for row in mentor_data] + [
        {**row, "type": "candidate"} for row in candidate_data
    ]
    combined.sort(key=lambda row: row["created_at"] or "", reverse=True)
    return {
        "pending_mentors": [row for row in mentor_data if row["status"] == pending],
        "pending_candidates": [row for row in candidate_data if row["status"] == pending],
        "all": combined,
    }


class AdminDashboardView(APIView):
    permission_classes = [IsSuperAdminRole]

    def get(self, request):
        profiles = Profile.objects.all().order_by("-created_at")
        roles = UserRole.objects.all().order_by("created_at", "id")
        return Response(
            {
                "profiles": ProfileSerializer(profiles, many=True).data,
                "roles": [{"id": r.id, "user": r.user_id, "role": r.role} for r in roles],
                **onboarding_queues(),
                "analytics": admin_analytics(),
            }
        )


class AdminOnboardingQueueView(APIView):
    permission_classes = [IsSuperAdminRole]

    def get(self, request):
        return Response(onboarding_queues())


class AdminOnboardingDecisionView(GenericAPIView):
    permission_classes = [IsSuperAdminRole]
    serializer_class = OnboardingDecisionSerializer

    def post(self, request, kind, pk):
        if kind not in ONBOARDING_MODELS:
            return Response({"detail": "Unknown onboarding type."}, status=status.HTTP_404_NOT_FOUND)
        model, serializer_class = ONBOARDING_MODELS[kind]
        onboarding = get_object_or_404(model, pk=pk)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        onboarding.status = serializer.validated_data["status"]
        try:
            onboarding.save(update_fields=["status", "updated_at"])
        except DatabaseError as exc:
            return database_error_response(exc)
        logger.info("%s onboarding request %s marked %s", kind, pk, onboarding.status)
        return Response(serializer_class(onboarding).data)


class AdminMentorshipRequestListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        rows = enrich_requests(MentorshipRequest.objects.all().order_by("-created_at", "-id"))
        filtered = filter_mentorship_requests(
            rows,
            request.query_params.get("status", "all"),
            request.query_params.get("search", ""),
        )
        return Response({"counts": status_counts(rows), "results": filtered})


# -----------------------------
# Bootstrap function
# -----------------------------
class SeedSuperAdminView(APIView):
    """Provision the configured super admin. Callers authenticate with the service key."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def http_method_not_allowed(self, request, *args, **kwargs):
        return Response({"error": "Method not allowed"}, status=status.HTTP_405_METHOD_NOT_ALLOWED)

    def options(self, request, *args, **kwargs):
        return self.http_method_not_allowed(request, *args, **kwargs)

    def post(self, request):
        service_key = settings.SERVICE_ROLE_KEY
        if not service_key:
            return Response({"error": "Missing SERVICE_ROLE_KEY"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        header = request.META.get("HTTP_AUTHORIZATION", "")
        scheme, _, supplied = header.partition(" ")
        if scheme.lower() != "bearer" or not hmac.compare_digest(supplied.strip().encode(), service_key.encode()):
            return Response({"error": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            result = seed_super_admin()
        except DatabaseError as exc:
            logger.error("Super admin seed failed", exc_info=True)
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(result)
