from django.contrib.auth import get_user_model
from rest_framework import serializers

from .learning import roadmap_progress
from .models import (
    CandidateOnboardingRequest,
    LearningProgress,
    LearningRoadmap,
    MentorOnboardingRequest,
    MentorshipRequest,
    MilestoneComment,
    OnboardingRequest,
    Profile,
    UserRole,
)
from .permissions import ROLE_CANDIDATE, ROLE_MENTOR, user_roles


User = get_user_model()

SELF_SERVICE_ROLE_CHOICES = [
    (ROLE_CANDIDATE, "Candidate"),
    (ROLE_MENTOR, "Mentor"),
]


def email_in_use(email, exclude_user_id=None):
    queryset = User.objects.filter(email__iexact=email)
    if exclude_user_id is not None:
        queryset = queryset.exclude(pk=exclude_user_id)
    return queryset.exists()


class ProfileSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="user_id", read_only=True)

    class Meta:
        model = Profile
        fields = ["id", "email", "display_name", "created_at", "updated_at"]
        read_only_fields = ["created_at", "updated_at"]


class ProfileUpdateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    display_name = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate_email(self, value):
        user = self.context["request"].user
        if email_in_use(value, exclude_user_id=user.pk):
            raise serializers.ValidationError("This email is already registered.")
        return value.strip().lower()


class UserRoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserRole
        fields = ["id", "user", "role", "created_at"]
        read_only_fields = ["id", "user", "created_at"]


class RoleAssignmentSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.ROLE_CHOICES)


class AdminUserSerializer(serializers.ModelSerializer):
    display_name = serializers.SerializerMethodField()
    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "display_name", "roles", "is_active", "date_joined", "last_login"]

    def get_display_name(self, obj):
        profile = Profile.objects.filter(user_id=obj.pk).only("display_name").first()
        return profile.display_name if profile else None

    def get_roles(self, obj):
        return user_roles(obj)


class AdminUserCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    display_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")

    def validate_email(self, value):
        if email_in_use(value):
            raise serializers.ValidationError("A user with this email already exists.")
        return value.strip().lower()


class AdminUserUpdateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    display_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")

    def validate_email(self, value):
        instance = self.context.get("target_user")
        if email_in_use(value, exclude_user_id=getattr(instance, "pk", None)):
            raise serializers.ValidationError("A user with this email already exists.")
        return value.strip().lower()


class SignUpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    confirm_password = serializers.CharField(write_only=True)
    display_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    role = serializers.ChoiceField(choices=SELF_SERVICE_ROLE_CHOICES)

    def validate_email(self, value):
        if email_in_use(value):
            raise serializers.ValidationError("A user with this email already exists.")
        return value.strip().lower()

    def validate(self, attrs):
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords don't match."})
        return attrs


class SignOutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)
    from_admin = serializers.BooleanField(required=False, default=False)


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetConfirmSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()
    new_password = serializers.CharField(write_only=True, min_length=6)


class OnboardingRequestSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source="user.email", read_only=True)
    display_name = serializers.SerializerMethodField()

    class Meta:
        fields = ["id", "user", "email", "display_name", "data", "status", "created_at", "updated_at"]
        read_only_fields = ["id", "user", "status", "created_at", "updated_at"]

    def get_display_name(self, obj):
        profile = Profile.objects.filter(user_id=obj.user_id).only("display_name").first()
        return profile.display_name if profile else None


class CandidateOnboardingRequestSerializer(OnboardingRequestSerializer):
    class Meta(OnboardingRequestSerializer.Meta):
        model = CandidateOnboardingRequest


class MentorOnboardingRequestSerializer(OnboardingRequestSerializer):
    class Meta(OnboardingRequestSerializer.Meta):
        model = MentorOnboardingRequest


class OnboardingSubmitSerializer(serializers.Serializer):
    data = serializers.DictField()

    def validate_data(self, value):
        if not value:
            raise serializers.ValidationError("Onboarding data cannot be empty.")
        return value


class OnboardingDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            (OnboardingRequest.STATUS_APPROVED, "Approved"),
            (OnboardingRequest.STATUS_REJECTED, "Rejected"),
        ]
    )


class MentorshipRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = MentorshipRequest
        fields = ["id", "candidate", "mentor", "message", "status", "notes", "created_at", "updated_at"]
        read_only_fields = ["id", "candidate", "status", "notes", "created_at", "updated_at"]

    def validate_mentor(self, value):
        request = self.context.get("request")
        if request is not None and value.pk == request.user.pk:
            raise serializers.ValidationError("You cannot send a mentorship request to yourself.")
        if not UserRole.objects.filter(user=value, role=UserRole.ROLE_MENTOR).exists():
            raise serializers.ValidationError("Selected user is not a mentor.")
        return value


class MentorshipStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            (MentorshipRequest.STATUS_ACCEPTED, "Accepted"),
            (MentorshipRequest.STATUS_REJECTED, "Rejected"),
            (MentorshipRequest.STATUS_CANCELLED, "Cancelled"),
        ]
    )
    notes = serializers.CharField(required=False, allow_blank=True)


class MentorshipMessageSerializer(serializers.Serializer):
    message = serializers.CharField()


class LearningProgressSerializer(serializers.ModelSerializer):
    class Meta:
        model = LearningProgress
        fields = ["id", "user", "skill_name", "progress_percentage", "last_updated"]
        read_only_fields = fields


class LearningProgressWriteSerializer(serializers.Serializer):
    skill_name = serializers.CharField(max_length=120)
    progress_percentage = serializers.IntegerField(required=False, default=0)


class MilestoneSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    estimatedHours = serializers.FloatField(required=False, min_value=0, default=0)
    order = serializers.IntegerField(required=False)
    isCompleted = serializers.BooleanField(required=False, default=False)
    progress = serializers.IntegerField(required=False, min_value=0, max_value=100)


class LearningRoadmapSerializer(serializers.ModelSerializer):
    total_estimated_hours = serializers.FloatField(read_only=True)
    progress = serializers.SerializerMethodField()

    class Meta:
        model = LearningRoadmap
        fields = [
            "id",
            "mentor",
            "candidate",
            "mentorship_request",
            "title",
            "description",
            "skills",
            "milestones",
            "total_estimated_hours",
            "progress",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_progress(self, obj):
        return roadmap_progress(obj)


class LearningRoadmapCreateSerializer(serializers.Serializer):
    mentorship_request = serializers.PrimaryKeyRelatedField(queryset=MentorshipRequest.objects.all())
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    skills = serializers.ListField(child=serializers.CharField(max_length=80), required=False, default=list)
    milestones = MilestoneSerializer(many=True, required=False, default=list)
    template = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get("milestones") and not attrs.get("template"):
            raise serializers.ValidationError({"milestones": "Add at least one milestone or pick a template."})
        return attrs


class MilestoneToggleSerializer(serializers.Serializer):
    milestone_id = serializers.CharField()


class MilestoneProgressSerializer(serializers.Serializer):
    milestone_id = serializers.CharField()
    progress = serializers.IntegerField()


class MilestoneCommentSerializer(serializers.ModelSerializer):
    user_email = serializers.SerializerMethodField()

    class Meta:
        model = MilestoneComment
        fields = ["id", "roadmap", "milestone_id", "user", "user_email", "comment", "created_at"]
        read_only_fields = fields

    def get_user_email(self, obj):
        return obj.user.email or "Unknown User"


class MilestoneCommentCreateSerializer(serializers.Serializer):
    milestone_id = serializers.CharField(max_length=64)
    comment = serializers.CharField()
