import json
from datetime import timedelta
from io import StringIO
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.db import DatabaseError, IntegrityError
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from core import guards
from core import models as core_models
from core.accounts import (
    assign_role,
    create_user_account,
    delete_user_account,
    seed_super_admin,
    update_user_account,
)
from core.diagnostics import create_candidate_user, debug_mentorship_report, debug_user_report, setup_test_mentor
from core.insights import group_requests_by_day, mentor_insights, progress_status, request_rates
from core.learning import (
    add_milestone_comment,
    add_new_skill,
    clamp_progress,
    create_roadmap,
    delete_milestone_comment,
    milestone_comments,
    roadmap_progress,
    set_milestone_progress,
    template_milestones,
    toggle_milestone,
    update_learning_progress,
)
from core.mentorship import (
    UNKNOWN_CANDIDATE,
    UNKNOWN_EMAIL,
    UNKNOWN_MENTOR,
    enrich_requests,
    filter_mentorship_requests,
    mentor_candidates,
    respond_to_request,
    status_counts,
)
from core.models import (
    CandidateOnboardingRequest,
    LearningProgress,
    MentorOnboardingRequest,
    MentorshipRequest,
    MilestoneComment,
    OnboardingRequest,
    Profile,
    UserRole,
)
from core.navigation import (
    build_breadcrumbs,
    navigation_guide,
    route_requirements,
    sidebar_items,
    sidebar_title,
)
from core.permissions import user_roles
from core.serializers import AdminUserCreateSerializer


User = get_user_model()


def make_user(email, *roles, password="Pass1234!"):
    user = User.objects.create_user(username=email.split("@")[0], email=email, password=password)
    for role in roles:
        UserRole.objects.create(user=user, role=role)
    return user


class RouteGuardTests(TestCase):
    def test_anonymous_user_is_sent_to_login(self):
        decision = guards.resolve_route_access(None, [UserRole.ROLE_MENTOR])
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.redirect_to, guards.LOGIN_PATH)

    def test_approved_mentor_is_allowed_on_mentor_routes(self):
        mentor = make_user("mentor.guard@test.com", UserRole.ROLE_MENTOR)
        MentorOnboardingRequest.objects.create(
            user=mentor, data={"fullName": "M"}, status=MentorOnboardingRequest.STATUS_APPROVED
        )

        decision = guards.resolve_route_access(mentor, [UserRole.ROLE_MENTOR])

        self.assertTrue(decision.allowed)
        self.assertIsNone(decision.redirect_to)

    def test_pending_onboarding_redirects_even_with_matching_role(self):
        user = make_user("pending.guard@test.com", UserRole.ROLE_MENTOR)
        MentorOnboardingRequest.objects.create(user=user, data={"fullName": "M"})

        decision = guards.resolve_route_access(user, [UserRole.ROLE_MENTOR])

        self.assertEqual(decision.redirect_to, guards.PENDING_APPROVAL_PATH)
        self.assertEqual(decision.reason, "onboarding_pending")

    def test_latest_onboarding_request_decides(self):
        user = make_user("resubmitted@test.com", UserRole.ROLE_CANDIDATE)
        CandidateOnboardingRequest.objects.create(user=user, data={"a": 1})
        CandidateOnboardingRequest.objects.create(
            user=user, data={"a": 1, "b": 2}, status=CandidateOnboardingRequest.STATUS_APPROVED
        )

        self.assertTrue(guards.resolve_route_access(user, [UserRole.ROLE_CANDIDATE]).allowed)

    def test_user_without_role_waits_for_approval(self):
        user = make_user("norole@test.com")
        decision = guards.resolve_route_access(user)
        self.assertEqual(decision.redirect_to, guards.PENDING_APPROVAL_PATH)

    def test_role_mismatch_goes_to_own_dashboard(self):
        candidate = make_user("cand.guard@test.com", UserRole.ROLE_CANDIDATE)
        decision = guards.resolve_route_access(candidate, [UserRole.ROLE_MENTOR])
        self.assertEqual(decision.redirect_to, guards.CANDIDATE_DASHBOARD_PATH)

    def test_database_error_denies_and_redirects_to_login(self):
        user = make_user("dberror@test.com", UserRole.ROLE_MENTOR)
        with patch("core.guards.user_roles", side_effect=DatabaseError("unavailable")):
            decision = guards.resolve_route_access(user, [UserRole.ROLE_MENTOR])
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.redirect_to, guards.LOGIN_PATH)
        self.assertEqual(decision.reason, "lookup_failed")

    def test_protected_route_checks_first_role_only(self):
        user = make_user("multi@test.com", UserRole.ROLE_CANDIDATE, UserRole.ROLE_MENTOR)

        denied = guards.resolve_protected_route(user, UserRole.ROLE_MENTOR)
        allowed = guards.resolve_protected_route(user, UserRole.ROLE_CANDIDATE)

        self.assertEqual(denied.redirect_to, guards.CANDIDATE_DASHBOARD_PATH)
        self.assertTrue(allowed.allowed)

    def test_candidate_only_route_requires_candidate_role(self):
        mentor = make_user("mentor.only@test.com", UserRole.ROLE_MENTOR)
        decision = guards.resolve_candidate_only_route(mentor)
        self.assertEqual(decision.redirect_to, guards.CANDIDATE_ONBOARDING_PATH)

    def test_candidate_only_route_sends_rejected_candidate_back_to_onboarding(self):
        candidate = make_user("rejected@test.com", UserRole.ROLE_CANDIDATE)
        CandidateOnboardingRequest.objects.create(
            user=candidate, data={"a": 1}, status=CandidateOnboardingRequest.STATUS_REJECTED
        )
        decision = guards.resolve_candidate_only_route(candidate)
        self.assertEqual(decision.redirect_to, guards.CANDIDATE_ONBOARDING_PATH)
        self.assertEqual(decision.reason, "onboarding_rejected")

    def test_home_redirect_prefers_admin_then_mentor(self):
        self.assertEqual(
            guards.home_path_for_roles([UserRole.ROLE_MENTOR, UserRole.ROLE_ADMIN]),
            guards.ADMIN_DASHBOARD_PATH,
        )
        self.assertEqual(
            guards.home_path_for_roles([UserRole.ROLE_CANDIDATE, UserRole.ROLE_MENTOR]),
            guards.MENTOR_DASHBOARD_PATH,
        )
        self.assertEqual(guards.home_path_for_roles([]), guards.CANDIDATE_DASHBOARD_PATH)


class PostLoginRedirectTests(TestCase):
    def test_mentor_with_complete_approved_profile_goes_to_dashboard(self):
        mentor = make_user("complete@test.com", UserRole.ROLE_MENTOR)
        MentorOnboardingRequest.objects.create(
            user=mentor,
            data={"fullName": "M", "company": "X"},
            status=MentorOnboardingRequest.STATUS_APPROVED,
        )
        self.assertEqual(guards.resolve_post_login_redirect(mentor).redirect_to, guards.MENTOR_DASHBOARD_PATH)

    def test_single_key_profile_counts_as_incomplete(self):
        candidate = make_user("incomplete@test.com", UserRole.ROLE_CANDIDATE)
        CandidateOnboardingRequest.objects.create(
            user=candidate, data={"fullName": "C"}, status=CandidateOnboardingRequest.STATUS_APPROVED
        )
        decision = guards.resolve_post_login_redirect(candidate)
        self.assertEqual(decision.redirect_to, guards.CANDIDATE_ONBOARDING_PATH)
        self.assertEqual(decision.reason, "profile_incomplete")

    def test_unapproved_user_waits(self):
        candidate = make_user("waiting@test.com", UserRole.ROLE_CANDIDATE)
        decision = guards.resolve_post_login_redirect(candidate)
        self.assertEqual(decision.redirect_to, guards.PENDING_APPROVAL_PATH)

    def test_admin_goes_straight_to_admin_dashboard(self):
        admin = make_user("admin.redirect@test.com", UserRole.ROLE_ADMIN)
        self.assertEqual(guards.resolve_post_login_redirect(admin).redirect_to, guards.ADMIN_DASHBOARD_PATH)

    def test_pending_approval_reports_statuses_and_destination(self):
        mentor = make_user("approved.wait@test.com", UserRole.ROLE_MENTOR)
        MentorOnboardingRequest.objects.create(
            user=mentor, data={"a": 1}, status=MentorOnboardingRequest.STATUS_APPROVED
        )
        payload = guards.resolve_pending_approval(mentor)
        self.assertEqual(payload["mentor_status"], "approved")
        self.assertIsNone(payload["candidate_status"])
        self.assertEqual(payload["redirect_to"], guards.MENTOR_DASHBOARD_PATH)


class NavigationTests(SimpleTestCase):
    def test_route_requirements(self):
        self.assertEqual(route_requirements("/"), (True, None))
        self.assertEqual(route_requirements("/admin"), (True, None))
        self.assertEqual(route_requirements("/auth/login"), (True, None))
        self.assertEqual(route_requirements("/mentor/requests/"), (False, (UserRole.ROLE_MENTOR,)))
        self.assertEqual(
            route_requirements("/admin/users"),
            (False, (UserRole.ROLE_ADMIN, UserRole.ROLE_SUPER_ADMIN)),
        )
        self.assertEqual(route_requirements("/sessions"), (False, None))

    def test_breadcrumbs_for_nested_path(self):
        self.assertEqual(
            build_breadcrumbs("/mentor/requests"),
            [
                {"label": "Home", "href": "/"},
                {"label": "Mentor", "href": "/mentor"},
                {"label": "Requests", "href": None},
            ],
        )

    def test_breadcrumbs_hidden_on_root_and_fall_back_to_capitalized_segment(self):
        self.assertEqual(build_breadcrumbs("/"), [])
        self.assertEqual(build_breadcrumbs("/learning-progress")[-1]["label"], "Learning progress")

    def test_mentor_sidebar_wins_over_admin_and_shows_badges(self):
        items = sidebar_items(
            [UserRole.ROLE_ADMIN, UserRole.ROLE_MENTOR],
            {"pending_requests": 3, "accepted_candidates": 0},
            "/mentor/requests",
        )
        by_name = {item["name"]: item for item in items}
        self.assertEqual(by_name["Mentorship Requests"]["badge"], 3)
        self.assertTrue(by_name["Mentorship Requests"]["active"])
        self.assertIsNone(by_name["My Candidates"]["badge"])
        self.assertEqual(sidebar_title([UserRole.ROLE_MENTOR])["title"], "Mentor Portal")

    def test_sidebar_empty_without_role(self):
        self.assertEqual(sidebar_items([]), [])
        self.assertEqual(sidebar_title([])["title"], "Portal")

    def test_navigation_guide_filters_role_tagged_items(self):
        guide = navigation_guide([UserRole.ROLE_CANDIDATE])
        hrefs = [item["href"] for section in guide for item in section["items"]]
        self.assertIn("/candidate/dashboard", hrefs)
        self.assertNotIn("/mentor/dashboard", hrefs)
        self.assertNotIn("/admin/dashboard", hrefs)
        self.assertIn("/sessions", hrefs)


class AccountTests(TestCase):
    def test_create_user_account_mirrors_profile(self):
        user, profile_synced = create_user_account("New.User@Test.com", "secret123", display_name="New User")
        self.assertTrue(profile_synced)
        self.assertEqual(user.email, "new.user@test.com")
        self.assertEqual(Profile.objects.get(user=user).display_name, "New User")

    def test_malformed_email_is_rejected_before_any_query(self):
        serializer = AdminUserCreateSerializer(data={"email": "not-an-email", "password": "secret123"})
        with self.assertNumQueries(0):
            self.assertFalse(serializer.is_valid())
        self.assertIn("email", serializer.errors)

    def test_update_user_account_updates_profile_and_email(self):
        user, _ = create_user_account("old@test.com", "secret123")
        profile, email_synced = update_user_account(user, "new@test.com", "Renamed")
        self.assertTrue(email_synced)
        self.assertEqual(profile.display_name, "Renamed")
        user.refresh_from_db()
        self.assertEqual(user.email, "new@test.com")

    def test_delete_removes_profile_even_when_account_delete_fails(self):
        user, _ = create_user_account("gone@test.com", "secret123")
        UserRole.objects.create(user=user, role=UserRole.ROLE_CANDIDATE)
        LearningProgress.objects.create(user=user, skill_name="React", last_updated=timezone.now())

        with patch("core.accounts.delete_auth_account", side_effect=DatabaseError("auth down")):
            result = delete_user_account(user.pk)

        self.assertFalse(result["account_deleted"])
        self.assertEqual(result["deleted"]["profiles"], 1)
        self.assertFalse(Profile.objects.filter(user_id=user.pk).exists())
        self.assertFalse(UserRole.objects.filter(user_id=user.pk).exists())
        self.assertTrue(User.objects.filter(pk=user.pk).exists())

    def test_duplicate_role_assignment_raises(self):
        user = make_user("dup.role@test.com", UserRole.ROLE_MENTOR)
        with self.assertRaises(IntegrityError):
            assign_role(user, UserRole.ROLE_MENTOR)

    def test_roles_come_back_in_assignment_order(self):
        user = make_user("ordered@test.com", UserRole.ROLE_MENTOR, UserRole.ROLE_CANDIDATE)
        self.assertEqual(user_roles(user), [UserRole.ROLE_MENTOR, UserRole.ROLE_CANDIDATE])

    def test_seed_super_admin_is_idempotent(self):
        first = seed_super_admin("root@test.com", "Test@1234")
        second = seed_super_admin("root@test.com", "Test@1234")

        self.assertTrue(first["created"])
        self.assertFalse(second["created"])
        self.assertEqual(first["user_id"], second["user_id"])
        self.assertEqual(UserRole.objects.filter(user_id=first["user_id"]).count(), 1)
        self.assertEqual(Profile.objects.get(user_id=first["user_id"]).display_name, "Super Admin")


class ModelExportTests(SimpleTestCase):
    def test_onboarding_base_is_exported_with_shared_statuses(self):
        self.assertTrue(OnboardingRequest._meta.abstract)
        self.assertIn("OnboardingRequest", core_models.__all__)
        self.assertEqual(
            CandidateOnboardingRequest.STATUS_PENDING,
            MentorOnboardingRequest.STATUS_PENDING,
        )

    def test_mentorship_request_label_is_plain_ascii(self):
        label = str(MentorshipRequest(id=7, candidate_id=1, mentor_id=2, status="pending"))
        self.assertEqual(label, "Request #7 (1 -> 2, pending)")
        self.assertTrue(label.isascii())


class MentorshipServiceTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.mentor = make_user("mentor.svc@test.com", UserRole.ROLE_MENTOR)
        cls.candidate = make_user("cand.svc@test.com", UserRole.ROLE_CANDIDATE)
        Profile.objects.filter(user=cls.candidate).update(display_name="Asha Rao")
        CandidateOnboardingRequest.objects.create(
            user=cls.candidate,
            data={"fullName": "Asha Rao", "targetRole": "SDE"},
            status=CandidateOnboardingRequest.STATUS_APPROVED,
        )
        MentorOnboardingRequest.objects.create(
            user=cls.mentor,
            data={"fullName": "Dev Mentor", "company": "Acme"},
            status=MentorOnboardingRequest.STATUS_APPROVED,
        )
        for status in ("pending", "accepted", "rejected", "cancelled"):
            MentorshipRequest.objects.create(
                candidate=cls.candidate,
                mentor=cls.mentor,
                message=f"{status} request",
                status=status,
            )

    def test_status_all_is_identity_and_each_status_filters(self):
        rows = enrich_requests(MentorshipRequest.objects.all())
        self.assertEqual(filter_mentorship_requests(rows, "all"), rows)
        for status in ("pending", "accepted", "rejected", "cancelled"):
            filtered = filter_mentorship_requests(rows, status)
            self.assertEqual([row["status"] for row in filtered], [status])

    def test_search_matches_candidate_name_and_message(self):
        rows = enrich_requests(MentorshipRequest.objects.all())
        self.assertEqual(len(filter_mentorship_requests(rows, "all", "asha")), 4)
        self.assertEqual(len(filter_mentorship_requests(rows, "all", "REJECTED req")), 1)
        self.assertEqual(filter_mentorship_requests(rows, "accepted", "nobody"), [])

    def test_counts_include_every_status(self):
        counts = status_counts(MentorshipRequest.objects.all())
        self.assertEqual(
            counts,
            {"pending": 1, "accepted": 1, "rejected": 1, "cancelled": 1, "total": 4},
        )

    def test_enrichment_uses_profiles_and_approved_onboarding(self):
        row = enrich_requests(MentorshipRequest.objects.filter(status="pending"))[0]
        self.assertEqual(row["candidate"]["display_name"], "Asha Rao")
        self.assertEqual(row["candidate"]["candidate_data"]["targetRole"], "SDE")
        self.assertEqual(row["mentor"]["fullName"], "Dev Mentor")
        self.assertEqual(row["status_description"], "Waiting for mentor response")

    def test_enrichment_falls_back_when_profiles_are_missing(self):
        Profile.objects.filter(user__in=[self.candidate, self.mentor]).delete()
        MentorOnboardingRequest.objects.filter(user=self.mentor).delete()

        row = enrich_requests(MentorshipRequest.objects.filter(status="pending"))[0]

        self.assertEqual(row["candidate"]["email"], UNKNOWN_EMAIL)
        self.assertEqual(row["candidate"]["display_name"], UNKNOWN_CANDIDATE)
        self.assertEqual(row["mentor"]["fullName"], UNKNOWN_MENTOR)
        self.assertEqual(row["mentor_profile"]["display_name"], UNKNOWN_MENTOR)

    def test_only_pending_requests_can_be_answered(self):
        accepted = MentorshipRequest.objects.get(status="accepted")
        with self.assertRaises(ValidationError):
            respond_to_request(accepted, "reject")

        pending = MentorshipRequest.objects.get(status="pending")
        respond_to_request(pending, "accept")
        pending.refresh_from_db()
        self.assertEqual(pending.status, MentorshipRequest.STATUS_ACCEPTED)


class InsightsTests(TestCase):
    def test_rates_are_zero_without_requests(self):
        self.assertEqual(request_rates(0, 0), {"acceptance_rate": 0.0, "rejection_rate": 0.0})

    def test_rates_round_to_two_decimals(self):
        self.assertEqual(request_rates(3, 1), {"acceptance_rate": 33.33, "rejection_rate": 66.67})

    def test_requests_group_by_day_in_ascending_order(self):
        now = timezone.now()
        rows = [
            (now, "accepted"),
            (now - timedelta(days=1), "pending"),
            (now, "pending"),
        ]
        grouped = group_requests_by_day(rows)
        self.assertEqual([day["received"] for day in grouped], [1, 2])
        self.assertEqual(grouped[-1]["accepted"], 1)

    def test_progress_status(self):
        now = timezone.now()
        self.assertEqual(progress_status(100, None, now), "completed")
        self.assertEqual(progress_status(40, now - timedelta(days=2), now), "active")
        self.assertEqual(progress_status(40, now - timedelta(days=30), now), "stalled")
        self.assertEqual(progress_status(40, None, now), "stalled")

    def test_mentor_insights_uses_period_and_real_progress(self):
        mentor = make_user("insights.mentor@test.com", UserRole.ROLE_MENTOR)
        candidate = make_user("insights.cand@test.com", UserRole.ROLE_CANDIDATE)
        MentorshipRequest.objects.create(candidate=candidate, mentor=mentor, status="accepted")
        old = MentorshipRequest.objects.create(candidate=candidate, mentor=mentor, status="rejected")
        MentorshipRequest.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=60))
        LearningProgress.objects.create(
            user=candidate, skill_name="React", progress_percentage=60, last_updated=timezone.now()
        )

        insights = mentor_insights(mentor, "30d")

        self.assertEqual(insights["total_requests"], 1)
        self.assertEqual(insights["acceptance_rate"], 100.0)
        self.assertFalse(insights["earnings_available"])
        self.assertIsNone(insights["earnings"])
        self.assertEqual(insights["candidate_progress"][0]["progress"], 60)
        self.assertEqual(insights["candidate_progress"][0]["status"], "active")
        self.assertEqual(insights["active_candidates"], 1)

    def test_unknown_period_falls_back_to_default(self):
        mentor = make_user("period.mentor@test.com", UserRole.ROLE_MENTOR)
        self.assertEqual(mentor_insights(mentor, "1y")["period"], "30d")


class LearningTests(TestCase):
    def setUp(self):
        self.mentor = make_user("road.mentor@test.com", UserRole.ROLE_MENTOR)
        self.candidate = make_user("road.cand@test.com", UserRole.ROLE_CANDIDATE)

    def test_progress_is_clamped(self):
        self.assertEqual(clamp_progress(150), 100)
        self.assertEqual(clamp_progress(-5), 0)
        row = update_learning_progress(self.candidate, "Python", 130)
        self.assertEqual(row.progress_percentage, 100)

    def test_upsert_keeps_one_row_per_skill(self):
        update_learning_progress(self.candidate, "Python", 10)
        update_learning_progress(self.candidate, "Python", 45)
        self.assertEqual(LearningProgress.objects.filter(user=self.candidate).count(), 1)
        self.assertEqual(LearningProgress.objects.get(user=self.candidate).progress_percentage, 45)

    def test_adding_an_existing_skill_raises(self):
        add_new_skill(self.candidate, "React")
        with self.assertRaises(IntegrityError):
            add_new_skill(self.candidate, "React")

    def test_unknown_template_is_not_found(self):
        with self.assertRaises(NotFound):
            template_milestones("Cobol")

    def test_roadmap_requires_accepted_own_request(self):
        pending = MentorshipRequest.objects.create(candidate=self.candidate, mentor=self.mentor)
        with self.assertRaises(ValidationError):
            create_roadmap(self.mentor, pending, "Plan", "desc", milestones=template_milestones("React"))

    def test_toggle_milestone_updates_progress(self):
        accepted = MentorshipRequest.objects.create(
            candidate=self.candidate, mentor=self.mentor, status="accepted"
        )
        roadmap = create_roadmap(
            self.mentor, accepted, "React path", "desc", ["React"], template_milestones("React")
        )
        self.assertEqual(roadmap.candidate_id, self.candidate.pk)
        self.assertEqual(roadmap.total_estimated_hours, 140)

        milestone_id = roadmap.milestones[0]["id"]
        roadmap = toggle_milestone(roadmap, milestone_id)
        self.assertEqual(roadmap_progress(roadmap), 20)

        with self.assertRaises(NotFound):
            toggle_milestone(roadmap, "missing")

    def _accepted_roadmap(self):
        accepted = MentorshipRequest.objects.create(
            candidate=self.candidate, mentor=self.mentor, status="accepted"
        )
        return create_roadmap(
            self.mentor, accepted, "Python path", "desc", ["Python"], template_milestones("Python")
        )

    def test_milestone_progress_is_clamped_and_drives_completion(self):
        roadmap = self._accepted_roadmap()
        first, second = roadmap.milestones[0]["id"], roadmap.milestones[1]["id"]
        self.assertEqual(roadmap.milestones[0]["progress"], 0)

        roadmap = set_milestone_progress(roadmap, first, 250)
        roadmap = set_milestone_progress(roadmap, second, 50)
        roadmap.refresh_from_db()

        self.assertEqual(roadmap.milestones[0]["progress"], 100)
        self.assertTrue(roadmap.milestones[0]["isCompleted"])
        self.assertEqual(roadmap.milestones[1]["progress"], 50)
        self.assertFalse(roadmap.milestones[1]["isCompleted"])
        self.assertEqual(roadmap_progress(roadmap), 30)

        roadmap = set_milestone_progress(roadmap, second, -10)
        self.assertEqual(roadmap.milestones[1]["progress"], 0)
        roadmap = toggle_milestone(roadmap, first)
        self.assertEqual(roadmap.milestones[0]["progress"], 0)

        with self.assertRaises(NotFound):
            set_milestone_progress(roadmap, "missing", 10)

    def test_milestone_comments_belong_to_their_author(self):
        roadmap = self._accepted_roadmap()
        milestone_id = roadmap.milestones[2]["id"]

        comment = add_milestone_comment(roadmap, milestone_id, self.candidate, "  Stuck on decorators  ")
        add_milestone_comment(roadmap, milestone_id, self.mentor, "Try the closures chapter first")
        self.assertEqual(comment.comment, "Stuck on decorators")
        self.assertEqual(
            [c.user_id for c in milestone_comments(roadmap, milestone_id)],
            [self.candidate.pk, self.mentor.pk],
        )
        self.assertEqual(milestone_comments(roadmap, roadmap.milestones[0]["id"]).count(), 0)

        with self.assertRaises(ValidationError):
            add_milestone_comment(roadmap, milestone_id, self.candidate, "   ")
        with self.assertRaises(NotFound):
            add_milestone_comment(roadmap, "missing", self.candidate, "hello")

        with self.assertRaises(PermissionDenied):
            delete_milestone_comment(roadmap, comment.pk, self.mentor)
        delete_milestone_comment(roadmap, comment.pk, self.candidate)
        self.assertFalse(MilestoneComment.objects.filter(pk=comment.pk).exists())
        with self.assertRaises(NotFound):
            delete_milestone_comment(roadmap, comment.pk, self.candidate)

    def test_mentor_candidates_lists_accepted_requests_with_roadmap_counts(self):
        self._accepted_roadmap()
        CandidateOnboardingRequest.objects.create(
            user=self.candidate,
            data={"fullName": "Road Candidate", "targetRole": "SDE"},
            status=CandidateOnboardingRequest.STATUS_APPROVED,
        )
        Profile.objects.filter(user=self.candidate).update(display_name="Road Candidate")
        stranger = make_user("road.stranger@test.com", UserRole.ROLE_CANDIDATE)
        MentorshipRequest.objects.create(candidate=stranger, mentor=self.mentor, status="pending")

        rows = mentor_candidates(self.mentor)

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["candidate_id"], self.candidate.pk)
        self.assertEqual(rows[0]["candidate"]["display_name"], "Road Candidate")
        self.assertEqual(rows[0]["candidate"]["candidate_data"]["targetRole"], "SDE")
        self.assertEqual(rows[0]["roadmaps_count"], 1)


class DiagnosticsTests(TestCase):
    def test_create_candidate_user_is_idempotent(self):
        first = create_candidate_user("diag.cand@test.com")
        second = create_candidate_user("diag.cand@test.com")

        self.assertTrue(first["created"])
        self.assertFalse(second["created"])
        self.assertEqual(first["roles"], [UserRole.ROLE_CANDIDATE])
        self.assertFalse(second["onboarding_request_created"])
        self.assertEqual(CandidateOnboardingRequest.objects.filter(user_id=first["user_id"]).count(), 1)

    def test_setup_test_mentor_requires_existing_user(self):
        self.assertFalse(setup_test_mentor("missing@test.com")["ok"])

        user = make_user("diag.mentor@test.com")
        result = setup_test_mentor(user.email)

        self.assertTrue(result["ok"])
        self.assertIn(UserRole.ROLE_MENTOR, result["roles"])
        self.assertEqual(Profile.objects.get(user=user).display_name, "Test Mentor")

    def test_debug_reports(self):
        self.assertFalse(debug_user_report("nobody@test.com")["found"])

        mentor = make_user("diag.report@test.com", UserRole.ROLE_MENTOR)
        candidate = make_user("diag.report.cand@test.com", UserRole.ROLE_CANDIDATE)
        MentorOnboardingRequest.objects.create(user=mentor, data={"a": 1})
        MentorshipRequest.objects.create(candidate=candidate, mentor=mentor)

        user_report = debug_user_report(mentor.email)
        self.assertTrue(user_report["checks"]["has_pending_onboarding"])
        self.assertEqual(user_report["roles"], [UserRole.ROLE_MENTOR])

        mentorship_report = debug_mentorship_report(mentor.email)
        self.assertEqual(mentorship_report["counts"]["pending"], 1)
        self.assertEqual(mentorship_report["counts"]["total"], 1)
        self.assertEqual(len(mentorship_report["latest"]), 1)

    def test_debug_user_command_prints_json(self):
        make_user("cmd.user@test.com", UserRole.ROLE_CANDIDATE)
        out = StringIO()
        call_command("debug_user", "cmd.user@test.com", stdout=out)
        payload = json.loads(out.getvalue())
        self.assertTrue(payload["found"])
        self.assertEqual(payload["roles"], [UserRole.ROLE_CANDIDATE])

    def test_seed_super_admin_command(self):
        out = StringIO()
        call_command("seed_super_admin", "--email", "cmd.root@test.com", "--password", "Test@1234", stdout=out)
        payload = json.loads(out.getvalue())
        self.assertTrue(payload["ok"])
        self.assertEqual(payload["email"], "cmd.root@test.com")

    def test_seed_data_command_creates_demo_rows(self):
        call_command("seed_data", "--count", "2", stdout=StringIO())
        self.assertEqual(User.objects.filter(email__endswith="@preplaced.local").count(), 4)
        self.assertEqual(MentorshipRequest.objects.count(), 4)
