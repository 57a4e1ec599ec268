import logging
import uuid

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from .models import LearningProgress, LearningRoadmap, MentorshipRequest, MilestoneComment

logger = logging.getLogger(__name__)


def _milestone(title, description, hours):
    return {"title": title, "description": description, "estimatedHours": hours}


MILESTONE_TEMPLATES = {
    "JavaScript": [
        _milestone("JavaScript Fundamentals", "Learn basic syntax, variables, functions, and control structures", 20),
        _milestone("DOM Manipulation", "Understand how to interact with HTML elements using JavaScript", 15),
        _milestone(
            "ES6+ Features",
            "Master modern JavaScript features like arrow functions, destructuring, and modules",
            25,
        ),
        _milestone("Async Programming", "Learn promises, async/await, and handling asynchronous operations", 20),
        _milestone("Project: Interactive Web App", "Build a complete web application using all learned concepts", 40),
    ],
    "React": [
        _milestone("React Basics", "Learn JSX, components, props, and state management", 25),
        _milestone("Hooks & Lifecycle", "Master useState, useEffect, and other React hooks", 20),
        _milestone("State Management", "Learn Context API and state management patterns", 30),
        _milestone("Routing & Navigation", "Implement client-side routing with React Router", 15),
        _milestone("Project: Full-Stack App", "Build a complete React application with backend integration", 50),
    ],
    "Python": [
        _milestone("Python Basics", "Learn syntax, data types, and control structures", 20),
        _milestone("Functions & Modules", "Master function definition, scope, and module organization", 15),
        _milestone("Object-Oriented Programming", "Learn classes, inheritance, and OOP principles", 25),
        _milestone("Data Structures", "Understand lists, dictionaries, sets, and algorithms", 30),
        _milestone("Project: Data Analysis", "Build a data analysis project using pandas and matplotlib", 40),
    ],
    "Data Science": [
        _milestone("Statistics Fundamentals", "Learn basic statistical concepts and probability", 30),
        _milestone("Data Manipulation", "Master pandas for data cleaning and transformation", 25),
        _milestone("Data Visualization", "Learn matplotlib, seaborn, and plotly for data visualization", 20),
        _milestone("Machine Learning Basics", "Introduction to scikit-learn and basic ML algorithms", 40),
        _milestone("Project: Predictive Model", "Build and deploy a machine learning model", 50),
    ],
}


def clamp_progress(value):
    return max(0, min(100, int(value)))


# -----------------------------
# Learning progress
# -----------------------------
def update_learning_progress(user, skill_name, progress):
    row, _ = LearningProgress.objects.update_or_create(
        user=user,
        skill_name=skill_name,
        defaults={"progress_percentage": clamp_progress(progress), "last_updated": timezone.now()},
    )
    return row


def get_learning_progress(user):
    return LearningProgress.objects.filter(user=user).order_by("-last_updated", "-id")


def add_new_skill(user, skill_name, initial_progress=0):
    """Insert a skill row. An existing skill of the same name raises ``IntegrityError``."""
    with transaction.atomic():
        return LearningProgress.objects.create(
            user=user,
            skill_name=skill_name,
            progress_percentage=clamp_progress(initial_progress),
            last_updated=timezone.now(),
        )


def remove_skill(user, skill_name):
    return LearningProgress.objects.filter(user=user, skill_name=skill_name).delete()[0]


# -----------------------------
# Roadmaps
# -----------------------------
def template_milestones(skill):
    template = MILESTONE_TEMPLATES.get(skill)
    if template is None:
        raise NotFound(f"No milestone template for '{skill}'.")
    return normalize_milestones(template)


def _milestone_state(milestone):
    """Completion flag and percentage kept in step: 100% means completed."""
    if milestone.get("isCompleted"):
        return True, 100
    progress = milestone.get("progress")
    progress = clamp_progress(progress) if progress is not None else 0
    return progress == 100, progress


def normalize_milestones(milestones):
    normalized = []
    for index, milestone in enumerate(milestones, start=1):
        completed, progress = _milestone_state(milestone)
        normalized.append(
            {
                "id": str(milestone.get("id") or uuid.uuid4().hex),
                "title": milestone.get("title", ""),
                "description": milestone.get("description", ""),
                "estimatedHours": milestone.get("estimatedHours") or 0,
                "order": index,
                "isCompleted": completed,
                "progress": progress,
            }
        )
    return normalized


def create_roadmap(mentor, mentorship_request, title, description, skills=None, milestones=None):
    if mentorship_request.mentor_id != mentor.pk:
        raise ValidationError({"mentorship_request": "You can only create roadmaps for your own mentorship requests."})
    if mentorship_request.status != MentorshipRequest.STATUS_ACCEPTED:
        raise ValidationError({"mentorship_request": "Roadmaps can only be created for accepted requests."})
    if not milestones:
        raise ValidationError({"milestones": "Add at least one milestone."})
    roadmap = LearningRoadmap.objects.create(
        mentor=mentor,
        candidate_id=mentorship_request.candidate_id,
        mentorship_request=mentorship_request,
        title=title,
        description=description,
        skills=list(skills or []),
        milestones=normalize_milestones(milestones),
    )
    logger.info("Roadmap %s created for request %s", roadmap.pk, mentorship_request.pk)
    return roadmap


def _find_milestone(milestones, milestone_id):
    for milestone in milestones:
        if str(milestone.get("id")) == str(milestone_id):
            return milestone
    raise NotFound("Milestone not found.")


def _save_milestones(roadmap, milestones):
    roadmap.milestones = milestones
    roadmap.save(update_fields=["milestones", "updated_at"])
    return roadmap


def toggle_milestone(roadmap, milestone_id):
    milestones = list(roadmap.milestones or [])
    milestone = _find_milestone(milestones, milestone_id)
    completed = not milestone.get("isCompleted", False)
    milestone["isCompleted"] = completed
    milestone["progress"] = 100 if completed else 0
    return _save_milestones(roadmap, milestones)


def set_milestone_progress(roadmap, milestone_id, progress):
    milestones = list(roadmap.milestones or [])
    milestone = _find_milestone(milestones, milestone_id)
    milestone["progress"] = clamp_progress(progress)
    milestone["isCompleted"] = milestone["progress"] == 100
    return _save_milestones(roadmap, milestones)


def roadmap_progress(roadmap):
    """Average milestone percentage, rounded to a whole number."""
    milestones = roadmap.milestones or []
    if not milestones:
        return 0
    total = sum(_milestone_state(milestone)[1] for milestone in milestones)
    return round(total / len(milestones))


# -----------------------------
# Milestone comments
# -----------------------------
def milestone_comments(roadmap, milestone_id=None):
    comments = MilestoneComment.objects.filter(roadmap=roadmap).select_related("user")
    if milestone_id:
        comments = comments.filter(milestone_id=str(milestone_id))
    return comments.order_by("created_at", "id")


def add_milestone_comment(roadmap, milestone_id, user, comment):
    _find_milestone(roadmap.milestones or [], milestone_id)
    comment = (comment or "").strip()
    if not comment:
        raise ValidationError({"comment": "Comment cannot be empty."})
    row = MilestoneComment.objects.create(
        roadmap=roadmap,
        milestone_id=str(milestone_id),
        user=user,
        comment=comment,
    )
    logger.info("Comment %s added to roadmap %s by user %s", row.pk, roadmap.pk, user.pk)
    return row


def delete_milestone_comment(roadmap, comment_id, user, allow_any=False):
    comment = MilestoneComment.objects.filter(roadmap=roadmap, pk=comment_id).first()
    if comment is None:
        raise NotFound("Comment not found.")
    if comment.user_id != user.pk and not allow_any:
        raise PermissionDenied("You can only delete your own comments.")
    comment.delete()
    return comment_id
