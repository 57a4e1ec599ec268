from .learning import LearningProgress, LearningRoadmap, MilestoneComment
from .mentorship import MentorshipRequest
from .onboarding import CandidateOnboardingRequest, MentorOnboardingRequest, OnboardingRequest
from .profile import Profile
from .user_role import UserRole

__all__ = [
    'Profile',
    'UserRole',
    'OnboardingRequest',
    'CandidateOnboardingRequest',
    'MentorOnboardingRequest',
    'MentorshipRequest',
    'LearningProgress',
    'LearningRoadmap',
    'MilestoneComment',
]
