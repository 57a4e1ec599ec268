import re
import warnings

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import override_settings
from rest_framework.schemas.openapi import SchemaGenerator
from rest_framework.test import APITestCase

from core.models import (
    CandidateOnboardingRequest,
    LearningRoadmap,
    MentorOnboardingRequest,
    MentorshipRequest,
    Profile,
    UserRole,
)
from core.schema import PUBLIC_PATHS


PATH_PARAMETER_VALUES = {
    "role": "mentor",
    "kind": "candidate",
}


class ApiTestMixin:
    password = "Pass1234!"

    @classmethod
    def make_user(cls, email, *roles, display_name=""):
        User = get_user_model()
        user = User.objects.create_user(username=email.split("@")[0], email=email, password=cls.password)
        if display_name:
            Profile.objects.filter(user=user).update(display_name=display_name)
        for role in roles:
            UserRole.objects.create(user=user, role=role)
        return user


class AuthApiTests(ApiTestMixin, APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.candidate = cls.make_user("cand.auth@test.com", UserRole.ROLE_CANDIDATE)
        cls.admin = cls.make_user("admin.auth@test.com", UserRole.ROLE_ADMIN)

    def test_sign_in_returns_tokens_and_roles(self):
        response = self.client.post(
            "/api/auth/sign-in/",
            {"email": "CAND.AUTH@test.com", "password": self.password},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["roles"], [UserRole.ROLE_CANDIDATE])

    def test_sign_in_rejects_wrong_password(self):
        response = self.client.post(
            "/api/auth/sign-in/",
            {"email": self.candidate.email, "password": "wrong"},
            format="json",
        )
        self.assertEqual(response.status_code, 401)

    def test_admin_login_accepts_admin_role(self):
        response = self.client.post(
            "/api/admin/login/",
            {"email": self.admin.email, "password": self.password},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["roles"], [UserRole.ROLE_ADMIN])

    def test_admin_login_rejects_non_admin_role(self):
        response = self.client.post(
            "/api/admin/login/",
            {"email": self.candidate.email, "password": self.password},
            format="json",
        )
        self.assertEqual(response.status_code, 403)

    def test_sign_up_creates_account_without_role(self):
        response = self.client.post(
            "/api/auth/sign-up/",
            {
                "email": "new.mentor@test.com",
                "password": "secret123",
                "confirm_password": "secret123",
                "display_name": "New Mentor",
                "role": "mentor",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["next"], "/onboarding/mentor")
        self.assertIn("access", response.data)
        self.assertFalse(UserRole.objects.filter(user_id=response.data["user"]["id"]).exists())
        self.assertEqual(Profile.objects.get(user_id=response.data["user"]["id"]).display_name, "New Mentor")

    def test_sign_up_rejects_mismatched_passwords(self):
        response = self.client.post(
            "/api/auth/sign-up/",
            {
                "email": "mismatch@test.com",
                "password": "secret123",
                "confirm_password": "secret999",
                "role": "candidate",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("confirm_password", response.data)

    def test_sign_out_blacklists_refresh_and_picks_redirect(self):
        sign_in = self.client.post(
            "/api/admin/login/",
            {"email": self.admin.email, "password": self.password},
            format="json",
        )
        refresh = sign_in.data["refresh"]
        self.client.force_authenticate(user=self.admin)

        response = self.client.post("/api/auth/sign-out/", {"refresh": refresh, "from_admin": True}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["redirect_to"], "/admin")

        response = self.client.post("/api/auth/sign-out/", {}, format="json")
        self.assertEqual(response.data["redirect_to"], "/auth/login")

        self.client.force_authenticate(user=None)
        refreshed = self.client.post("/api/auth/token/refresh/", {"refresh": refresh}, format="json")
        self.assertEqual(refreshed.status_code, 401)

    def test_sign_out_succeeds_with_an_unusable_access_token(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer expired.or.garbage")
        response = self.client.post("/api/auth/sign-out/", {"refresh": "not-a-token"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["redirect_to"], "/auth/login")

    def test_password_reset_sends_mail_only_for_known_accounts(self):
        response = self.client.post("/api/auth/password-reset/", {"email": self.candidate.email}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn("/auth/reset-password?uid=", mail.outbox[0].body)

        response = self.client.post("/api/auth/password-reset/", {"email": "ghost@test.com"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(mail.outbox), 1)

    def test_session_returns_roles_and_profile(self):
        self.client.force_authenticate(user=self.candidate)
        response = self.client.get("/api/auth/session/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["roles"], [UserRole.ROLE_CANDIDATE])
        self.assertEqual(response.data["profile"]["email"], self.candidate.email)


class AccessApiTests(ApiTestMixin, APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.mentor = cls.make_user("mentor.access@test.com", UserRole.ROLE_MENTOR)
        MentorOnboardingRequest.objects.create(
            user=cls.mentor,
            data={"fullName": "Mentor", "company": "Acme"},
            status=MentorOnboardingRequest.STATUS_APPROVED,
        )

    def test_public_path_is_allowed_anonymously(self):
        response = self.client.get("/api/access/check/", {"path": "/auth/login"})
        self.assertTrue(response.data["allowed"])

    def test_protected_path_redirects_anonymous_user_to_login(self):
        response = self.client.get("/api/access/check/", {"path": "/mentor/dashboard"})
        self.assertFalse(response.data["allowed"])
        self.assertEqual(response.data["redirect_to"], "/auth/login")

    def test_mentor_access_and_redirects(self):
        self.client.force_authenticate(user=self.mentor)

        check = self.client.get("/api/access/check/", {"path": "/mentor/requests"})
        self.assertTrue(check.data["allowed"])

        admin_check = self.client.get("/api/access/check/", {"path": "/admin/users"})
        self.assertEqual(admin_check.data["redirect_to"], "/mentor/dashboard")

        home = self.client.get("/api/access/home/")
        self.assertEqual(home.data["redirect_to"], "/mentor/dashboard")

        post_login = self.client.get("/api/access/post-login/")
        self.assertEqual(post_login.data["redirect_to"], "/mentor/dashboard")

        candidate_only = self.client.get("/api/access/candidate-only/")
        self.assertEqual(candidate_only.data["redirect_to"], "/onboarding/candidate")

    def test_onboarding_submission_then_status(self):
        user = self.make_user("onboard@test.com")
        self.client.force_authenticate(user=user)

        empty = self.client.post("/api/onboarding/candidate/", {"data": {}}, format="json")
        self.assertEqual(empty.status_code, 400)

        created = self.client.post(
            "/api/onboarding/candidate/",
            {"data": {"fullName": "Onboard", "targetRole": "SDE"}},
            format="json",
        )
        self.assertEqual(created.status_code, 201, created.data)
        self.assertEqual(created.data["status"], "pending")

        latest = self.client.get("/api/onboarding/candidate/")
        self.assertEqual(latest.data["id"], created.data["id"])

        status_response = self.client.get("/api/onboarding/status/")
        self.assertEqual(status_response.data["candidate_status"], "pending")
        self.assertIsNone(status_response.data["redirect_to"])

    def test_navigation_payload_for_mentor(self):
        candidate = self.make_user("nav.cand@test.com", UserRole.ROLE_CANDIDATE)
        MentorshipRequest.objects.create(candidate=candidate, mentor=self.mentor)
        self.client.force_authenticate(user=self.mentor)

        response = self.client.get("/api/navigation/", {"path": "/mentor/requests"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["sidebar"]["title"], "Mentor Portal")
        badges = {item["name"]: item["badge"] for item in response.data["sidebar"]["items"]}
        self.assertEqual(badges["Mentorship Requests"], 1)
        self.assertEqual(response.data["breadcrumbs"][-1], {"label": "Requests", "href": None})
        self.assertEqual(response.data["header"]["role_label"], "Mentor")

    def test_profile_update(self):
        self.client.force_authenticate(user=self.mentor)
        response = self.client.patch("/api/profile/", {"display_name": "Renamed Mentor"}, format="json")
        self.assertEqual(response.status_code, 200, response.data)
        self.assertEqual(response.data["display_name"], "Renamed Mentor")
        self.assertTrue(response.data["email_synced"])


class MentorshipApiTests(ApiTestMixin, APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.mentor = cls.make_user("mentor.flow@test.com", UserRole.ROLE_MENTOR, display_name="Flow Mentor")
        cls.other_mentor = cls.make_user("mentor.other@test.com", UserRole.ROLE_MENTOR)
        cls.candidate = cls.make_user("cand.flow@test.com", UserRole.ROLE_CANDIDATE, display_name="Flow Candidate")
        CandidateOnboardingRequest.objects.create(
            user=cls.candidate,
            data={"fullName": "Flow Candidate", "targetRole": "SDE"},
            status=CandidateOnboardingRequest.STATUS_APPROVED,
        )

    def _send_request(self):
        self.client.force_authenticate(user=self.candidate)
        response = self.client.post(
            "/api/mentorship-requests/",
            {"mentor": self.mentor.pk, "message": "Please mentor me"},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)
        return response.data["id"]

    def test_candidate_cannot_request_a_non_mentor(self):
        self.client.force_authenticate(user=self.candidate)
        response = self.client.post(
            "/api/mentorship-requests/",
            {"mentor": self.candidate.pk, "message": "hi"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_mentor_accepts_and_listing_is_filtered(self):
        request_id = self._send_request()

        self.client.force_authenticate(user=self.other_mentor)
        foreign = self.client.get("/api/mentorship-requests/")
        self.assertEqual(foreign.data["counts"]["total"], 0)

        self.client.force_authenticate(user=self.mentor)
        listing = self.client.get("/api/mentorship-requests/", {"box": "received", "search": "flow"})
        self.assertEqual(listing.data["counts"]["pending"], 1)
        self.assertEqual(listing.data["results"][0]["candidate"]["display_name"], "Flow Candidate")

        accepted = self.client.post(f"/api/mentorship-requests/{request_id}/accept/")
        self.assertEqual(accepted.status_code, 200)
        self.assertEqual(accepted.data["status"], "accepted")

        again = self.client.post(f"/api/mentorship-requests/{request_id}/reject/")
        self.assertEqual(again.status_code, 400)

        pending_only = self.client.get("/api/mentorship-requests/", {"status": "pending"})
        self.assertEqual(pending_only.data["results"], [])

    def test_candidate_cannot_accept_own_request(self):
        request_id = self._send_request()
        response = self.client.post(f"/api/mentorship-requests/{request_id}/accept/")
        self.assertEqual(response.status_code, 403)

    def test_candidate_cancels_pending_request(self):
        request_id = self._send_request()
        response = self.client.post(f"/api/mentorship-requests/{request_id}/cancel/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "cancelled")

        response = self.client.post(f"/api/mentorship-requests/{request_id}/cancel/")
        self.assertEqual(response.status_code, 400)

    def test_mentor_sets_status_with_notes_and_sends_message(self):
        request_id = self._send_request()
        self.client.force_authenticate(user=self.mentor)

        response = self.client.post(
            f"/api/mentorship-requests/{request_id}/status/",
            {"status": "accepted", "notes": "Welcome aboard"},
            format="json",
        )
        self.assertEqual(response.data["notes"], "Welcome aboard")

        response = self.client.post(
            f"/api/mentorship-requests/{request_id}/message/",
            {"message": "First session on Monday"},
            format="json",
        )
        self.assertTrue(response.data["success"])
        self.assertEqual(MentorshipRequest.objects.get(pk=request_id).notes, "First session on Monday")

    def test_roadmap_from_template_and_milestone_toggle(self):
        request_id = self._send_request()
        MentorshipRequest.objects.filter(pk=request_id).update(status="accepted")
        self.client.force_authenticate(user=self.mentor)

        created = self.client.post(
            "/api/learning-roadmaps/",
            {
                "mentorship_request": request_id,
                "title": "Python path",
                "description": "Core Python first",
                "skills": ["Python"],
                "template": "Python",
            },
            format="json",
        )
        self.assertEqual(created.status_code, 201, created.data)
        self.assertEqual(created.data["progress"], 0)

        milestone_id = created.data["milestones"][0]["id"]
        self.client.force_authenticate(user=self.candidate)
        toggled = self.client.post(
            f"/api/learning-roadmaps/{created.data['id']}/toggle-milestone/",
            {"milestone_id": milestone_id},
            format="json",
        )
        self.assertEqual(toggled.status_code, 200)
        self.assertTrue(toggled.data["milestones"][0]["isCompleted"])

        forbidden = self.client.delete(f"/api/learning-roadmaps/{created.data['id']}/")
        self.assertEqual(forbidden.status_code, 403)
        self.assertTrue(LearningRoadmap.objects.filter(pk=created.data["id"]).exists())

    def test_learning_progress_endpoints(self):
        self.client.force_authenticate(user=self.candidate)

        created = self.client.post(
            "/api/learning-progress/",
            {"skill_name": "React", "progress_percentage": 20},
            format="json",
        )
        self.assertEqual(created.status_code, 201)

        duplicate = self.client.post("/api/learning-progress/", {"skill_name": "React"}, format="json")
        self.assertEqual(duplicate.status_code, 400)

        upserted = self.client.put(
            "/api/learning-progress/upsert/",
            {"skill_name": "React", "progress_percentage": 250},
            format="json",
        )
        self.assertEqual(upserted.data["progress_percentage"], 100)

        self.client.force_authenticate(user=self.other_mentor)
        denied = self.client.get("/api/learning-progress/", {"user_id": self.candidate.pk})
        self.assertEqual(denied.status_code, 403)

        self.client.force_authenticate(user=self.candidate)
        removed = self.client.delete("/api/learning-progress/remove/?skill_name=React")
        self.assertEqual(removed.data["removed"], 1)

    def test_non_numeric_id_query_parameters_are_bad_requests(self):
        self.client.force_authenticate(user=self.mentor)
        for path, params in (
            ("/api/learning-progress/", {"user_id": "abc"}),
            ("/api/learning-roadmaps/", {"mentorship_request": "abc"}),
            ("/api/dashboard/mentor/insights/", {"mentor_id": "abc"}),
        ):
            response = self.client.get(path, params)
            self.assertEqual(response.status_code, 400, path)
            self.assertIn("must be an integer", response.data["detail"])

    def _accepted_roadmap_id(self):
        request_id = self._send_request()
        MentorshipRequest.objects.filter(pk=request_id).update(status="accepted")
        self.client.force_authenticate(user=self.mentor)
        created = self.client.post(
            "/api/learning-roadmaps/",
            {
                "mentorship_request": request_id,
                "title": "React path",
                "description": "Hooks first",
                "template": "React",
            },
            format="json",
        )
        self.assertEqual(created.status_code, 201, created.data)
        return created.data["id"], [m["id"] for m in created.data["milestones"]]

    def test_candidate_updates_milestone_progress(self):
        roadmap_id, milestone_ids = self._accepted_roadmap_id()
        url = f"/api/learning-roadmaps/{roadmap_id}/milestone-progress/"

        denied = self.client.post(url, {"milestone_id": milestone_ids[0], "progress": 40}, format="json")
        self.assertEqual(denied.status_code, 403)

        self.client.force_authenticate(user=self.candidate)
        response = self.client.post(url, {"milestone_id": milestone_ids[0], "progress": 140}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["milestones"][0]["progress"], 100)
        self.assertTrue(response.data["milestones"][0]["isCompleted"])
        self.assertEqual(response.data["progress"], 20)

        missing = self.client.post(url, {"milestone_id": "nope", "progress": 10}, format="json")
        self.assertEqual(missing.status_code, 404)

    def test_milestone_comment_thread(self):
        roadmap_id, milestone_ids = self._accepted_roadmap_id()
        url = f"/api/learning-roadmaps/{roadmap_id}/comments/"

        mentor_comment = self.client.post(
            url, {"milestone_id": milestone_ids[1], "comment": "Read the hooks docs"}, format="json"
        )
        self.assertEqual(mentor_comment.status_code, 201, mentor_comment.data)
        self.assertEqual(mentor_comment.data["user_email"], self.mentor.email)

        self.client.force_authenticate(user=self.candidate)
        reply = self.client.post(url, {"milestone_id": milestone_ids[1], "comment": "Done, thanks"}, format="json")
        self.assertEqual(reply.status_code, 201)

        listing = self.client.get(url, {"milestone_id": milestone_ids[1]})
        self.assertEqual([row["comment"] for row in listing.data], ["Read the hooks docs", "Done, thanks"])

        foreign = self.client.delete(f"{url}{mentor_comment.data['id']}/")
        self.assertEqual(foreign.status_code, 403)
        own = self.client.delete(f"{url}{reply.data['id']}/")
        self.assertEqual(own.status_code, 204)

        self.client.force_authenticate(user=self.other_mentor)
        outsider = self.client.get(url)
        self.assertEqual(outsider.status_code, 404)

    def test_mentor_candidates_list(self):
        roadmap_id, _ = self._accepted_roadmap_id()
        response = self.client.get("/api/dashboard/mentor/candidates/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["candidate"]["display_name"], "Flow Candidate")
        self.assertEqual(response.data[0]["candidate"]["candidate_data"]["targetRole"], "SDE")
        self.assertEqual(response.data[0]["roadmaps_count"], 1)

        self.client.force_authenticate(user=self.candidate)
        self.assertEqual(self.client.get("/api/dashboard/mentor/candidates/").status_code, 403)

    def test_dashboards(self):
        self._send_request()

        candidate_view = self.client.get("/api/dashboard/candidate/")
        self.assertEqual(candidate_view.data["counts"]["pending"], 1)

        self.client.force_authenticate(user=self.mentor)
        mentor_view = self.client.get("/api/dashboard/mentor/")
        self.assertEqual(mentor_view.data["counts"]["total"], 1)

        insights = self.client.get("/api/dashboard/mentor/insights/", {"period": "7d"})
        self.assertEqual(insights.data["total_requests"], 1)
        self.assertEqual(insights.data["acceptance_rate"], 0.0)

        forbidden = self.client.get("/api/dashboard/candidate/")
        self.assertEqual(forbidden.status_code, 403)


class AdminApiTests(ApiTestMixin, APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.super_admin = cls.make_user("root.api@test.com", UserRole.ROLE_SUPER_ADMIN)
        cls.admin = cls.make_user("plain.admin@test.com", UserRole.ROLE_ADMIN)
        cls.candidate = cls.make_user("cand.admin@test.com", UserRole.ROLE_CANDIDATE)

    def test_user_management_requires_super_admin(self):
        self.client.force_authenticate(user=self.admin)
        self.assertEqual(self.client.get("/api/admin/users/").status_code, 403)
        self.assertEqual(self.client.get("/api/admin/analytics/").status_code, 200)

    def test_add_edit_and_delete_user(self):
        self.client.force_authenticate(user=self.super_admin)

        invalid = self.client.post("/api/admin/users/", {"email": "bad", "password": "secret123"}, format="json")
        self.assertEqual(invalid.status_code, 400)

        created = self.client.post(
            "/api/admin/users/",
            {"email": "Added@Test.com", "password": "secret123", "display_name": "Added"},
            format="json",
        )
        self.assertEqual(created.status_code, 201, created.data)
        self.assertEqual(created.data["email"], "added@test.com")
        self.assertTrue(created.data["profile_synced"])
        user_id = created.data["id"]

        duplicate = self.client.post(
            "/api/admin/users/",
            {"email": "added@test.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(duplicate.status_code, 400)

        edited = self.client.patch(
            f"/api/admin/users/{user_id}/",
            {"email": "edited@test.com", "display_name": "Edited"},
            format="json",
        )
        self.assertEqual(edited.status_code, 200, edited.data)
        self.assertEqual(edited.data["display_name"], "Edited")

        role = self.client.post(f"/api/admin/users/{user_id}/roles/", {"role": "mentor"}, format="json")
        self.assertEqual(role.status_code, 201)
        self.assertEqual(role.data["roles"], ["mentor"])

        again = self.client.post(f"/api/admin/users/{user_id}/roles/", {"role": "mentor"}, format="json")
        self.assertEqual(again.status_code, 400)

        removed = self.client.delete(f"/api/admin/users/{user_id}/roles/mentor/")
        self.assertEqual(removed.data["roles"], [])

        deleted = self.client.delete(f"/api/admin/users/{user_id}/")
        self.assertEqual(deleted.status_code, 200)
        self.assertTrue(deleted.data["account_deleted"])
        self.assertFalse(get_user_model().objects.filter(pk=user_id).exists())

    def test_super_admin_cannot_delete_self(self):
        self.client.force_authenticate(user=self.super_admin)
        response = self.client.delete(f"/api/admin/users/{self.super_admin.pk}/")
        self.assertEqual(response.status_code, 400)

    def test_onboarding_queue_and_decision(self):
        pending = MentorOnboardingRequest.objects.create(user=self.candidate, data={"fullName": "Future Mentor"})
        self.client.force_authenticate(user=self.super_admin)

        queue = self.client.get("/api/admin/onboarding/")
        self.assertEqual([row["id"] for row in queue.data["pending_mentors"]], [pending.id])
        self.assertEqual(queue.data["all"][0]["type"], "mentor")

        decided = self.client.post(
            f"/api/admin/onboarding/mentor/{pending.id}/decision/",
            {"status": "approved"},
            format="json",
        )
        self.assertEqual(decided.status_code, 200)
        self.assertEqual(decided.data["status"], "approved")

        unknown = self.client.post(
            f"/api/admin/onboarding/other/{pending.id}/decision/",
            {"status": "approved"},
            format="json",
        )
        self.assertEqual(unknown.status_code, 404)

    def test_admin_dashboard_bundles_profiles_roles_and_queues(self):
        self.client.force_authenticate(user=self.super_admin)
        response = self.client.get("/api/admin/dashboard/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["profiles"]), 3)
        self.assertIn("pending_candidates", response.data)
        self.assertEqual(response.data["analytics"]["users_by_role"]["super_admin"], 1)


@override_settings(
    SERVICE_ROLE_KEY="seed-service-key",
    SUPER_ADMIN_EMAIL="seeded@test.com",
    SUPER_ADMIN_PASSWORD="Test@1234",
)
class SeedSuperAdminApiTests(APITestCase):
    url = "/api/functions/seed-super-admin/"

    def test_get_is_not_allowed(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.data, {"error": "Method not allowed"})

    @override_settings(SERVICE_ROLE_KEY="")
    def test_missing_service_key_is_a_server_error(self):
        response = self.client.post(self.url, HTTP_AUTHORIZATION="Bearer anything")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"error": "Missing SERVICE_ROLE_KEY"})

    def test_wrong_bearer_is_unauthorized(self):
        response = self.client.post(self.url, HTTP_AUTHORIZATION="Bearer nope")
        self.assertEqual(response.status_code, 401)
        self.assertFalse(get_user_model().objects.filter(email="seeded@test.com").exists())

    def test_seed_is_idempotent(self):
        first = self.client.post(self.url, HTTP_AUTHORIZATION="Bearer seed-service-key")
        second = self.client.post(self.url, HTTP_AUTHORIZATION="Bearer seed-service-key")

        self.assertEqual(first.status_code, 200)
        self.assertTrue(first.data["created"])
        self.assertFalse(second.data["created"])
        self.assertEqual(first.data["email"], "seeded@test.com")
        self.assertEqual(
            list(UserRole.objects.filter(user_id=first.data["user_id"]).values_list("role", flat=True)),
            ["super_admin"],
        )

        sign_in = self.client.post(
            "/api/admin/login/",
            {"email": "seeded@test.com", "password": "Test@1234"},
            format="json",
        )
        self.assertEqual(sign_in.status_code, 200)


class ApiSchemaCoverageTests(ApiTestMixin, APITestCase):
    def _schema_paths(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            schema = SchemaGenerator(title="Preplaced API").get_schema(request=None, public=True)
        return schema["paths"]

    def _resolve_path(self, schema_path):
        return re.sub(
            r"\{(\w+)\}",
            lambda match: PATH_PARAMETER_VALUES.get(match.group(1), "1"),
            schema_path,
        )

    def test_schema_endpoint_tags_every_operation(self):
        response = self.client.get("/api/schema/")
        self.assertEqual(response.status_code, 200)
        schema = response.json()
        self.assertEqual(schema["info"]["title"], "Preplaced API")
        for operations in schema["paths"].values():
            for method, operation in operations.items():
                if method in {"get", "post", "put", "patch", "delete"}:
                    self.assertEqual(len(operation["tags"]), 1)

    def test_all_protected_operations_reject_unauthenticated_requests(self):
        paths = self._schema_paths()
        self.assertGreaterEqual(len(paths), 30)

        for schema_path, operations in sorted(paths.items()):
            if schema_path in PUBLIC_PATHS:
                continue
            for method in sorted(m for m in operations if m in {"get", "post", "put", "patch", "delete"}):
                path = self._resolve_path(schema_path)
                response = getattr(self.client, method)(path, {}, format="json")
                self.assertIn(
                    response.status_code,
                    {401, 403},
                    f"Expected unauth rejection for {schema_path} {method.upper()}, got {response.status_code}",
                )

    def test_access_endpoints_answer_anonymous_callers(self):
        for path in ("/api/access/home/", "/api/access/post-login/", "/api/access/candidate-only/"):
            response = self.client.get(path)
            self.assertEqual(response.status_code, 200, path)
            self.assertFalse(response.data["allowed"])
