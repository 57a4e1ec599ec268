import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from core.accounts import create_user_account, upsert_role
from core.learning import MILESTONE_TEMPLATES, normalize_milestones
from core.models import (
    CandidateOnboardingRequest,
    LearningProgress,
    LearningRoadmap,
    MentorOnboardingRequest,
    MentorshipRequest,
    UserRole,
)


class Command(BaseCommand):
    help = "Seed sample candidates, mentors, mentorship requests, progress and roadmaps."

    def add_arguments(self, parser):
        parser.add_argument(
            "--count",
            type=int,
            default=10,
            help="Number of candidates and mentors to create (default: 10).",
        )

    def handle(self, *args, **options):
        count = options["count"]
        User = get_user_model()
        random.seed(42)

        test_domain = "preplaced.local"
        User.objects.filter(email__endswith=f"@{test_domain}").delete()

        first_names = ["Priya", "Rahul", "Ananya", "Karthik", "Meera", "Arjun", "Nila", "Vikram"]
        last_names = ["Sharma", "Iyer", "Patel", "Rao", "Menon", "Gupta", "Nair", "Singh"]
        target_roles = ["Software Engineer", "Data Scientist", "Product Manager", "Frontend Engineer"]
        companies = ["Google", "Microsoft", "Amazon", "Flipkart", "Swiggy", "Razorpay"]
        expertise = ["System Design", "DSA", "React", "Python", "Machine Learning", "Product Sense"]
        skills = list(MILESTONE_TEMPLATES.keys())
        messages = [
            "I'd love help preparing for product company interviews.",
            "Looking for guidance on system design rounds.",
            "Could you review my resume and suggest a learning plan?",
            "",
        ]
        statuses = [
            MentorshipRequest.STATUS_PENDING,
            MentorshipRequest.STATUS_ACCEPTED,
            MentorshipRequest.STATUS_ACCEPTED,
            MentorshipRequest.STATUS_REJECTED,
        ]

        now = timezone.now()
        candidates = []
        mentors = []

        for i in range(count):
            name = f"{random.choice(first_names)} {random.choice(last_names)}"
            user, _ = create_user_account(f"candidate{i+1}@{test_domain}", "password123", display_name=name)
            upsert_role(user, UserRole.ROLE_CANDIDATE)
            CandidateOnboardingRequest.objects.create(
                user=user,
                status=CandidateOnboardingRequest.STATUS_APPROVED,
                data={
                    "fullName": name,
                    "targetRole": random.choice(target_roles),
                    "skills": random.sample(skills, k=2),
                },
            )
            for skill in random.sample(skills, k=2):
                LearningProgress.objects.create(
                    user=user,
                    skill_name=skill,
                    progress_percentage=random.randint(0, 100),
                    last_updated=now - timedelta(days=random.randint(0, 14)),
                )
            candidates.append(user)

        for i in range(count):
            name = f"{random.choice(first_names)} {random.choice(last_names)}"
            user, _ = create_user_account(f"mentor{i+1}@{test_domain}", "password123", display_name=name)
            upsert_role(user, UserRole.ROLE_MENTOR)
            MentorOnboardingRequest.objects.create(
                user=user,
                status=MentorOnboardingRequest.STATUS_APPROVED,
                data={
                    "fullName": name,
                    "company": random.choice(companies),
                    "experienceYears": random.randint(3, 15),
                    "expertise": random.sample(expertise, k=3),
                },
            )
            mentors.append(user)

        for candidate in candidates:
            for mentor in random.sample(mentors, k=min(2, len(mentors))):
                request = MentorshipRequest.objects.create(
                    candidate=candidate,
                    mentor=mentor,
                    message=random.choice(messages),
                    status=random.choice(statuses),
                )
                if request.status != MentorshipRequest.STATUS_ACCEPTED:
                    continue
                skill = random.choice(skills)
                LearningRoadmap.objects.create(
                    mentor=mentor,
                    candidate=candidate,
                    mentorship_request=request,
                    title=f"{skill} roadmap",
                    description=f"A guided path through {skill}.",
                    skills=[skill],
                    milestones=normalize_milestones(MILESTONE_TEMPLATES[skill]),
                )

        self.stdout.write(self.style.SUCCESS("Seed data created successfully."))
