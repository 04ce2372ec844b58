"""HTTP-level tests: auth, profiles, jobs and the application lifecycle endpoints."""

import pytest
from bson import ObjectId


def _register_and_login(client, email, role):
    response = client.post("/api/auth/register", json={"email": email, "password": "password123", "role": role})
    assert response.status_code == 201
    response = client.post("/api/auth/login", json={"email": email, "password": "password123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class TestAuth:

    def test_register_login_me(self, client):
        headers = _register_and_login(client, "Jane@Example.com", "employer")

        me = client.get("/api/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["email"] == "jane@example.com"
        assert me.json()["role"] == "employer"
        assert "password_hash" not in me.json()

    def test_duplicate_email_is_conflict(self, client):
        _register_and_login(client, "dup@example.com", "jobseeker")
        response = client.post(
            "/api/auth/register", json={"email": "dup@example.com", "password": "password123", "role": "employer"}
        )
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_wrong_password(self, client):
        _register_and_login(client, "x@example.com", "jobseeker")
        response = client.post("/api/auth/login", json={"email": "x@example.com", "password": "wrong-pass"})
        assert response.status_code == 401

    def test_unknown_role_rejected(self, client):
        response = client.post(
            "/api/auth/register", json={"email": "a@example.com", "password": "password123", "role": "admin"}
        )
        assert response.status_code == 422

    def test_missing_and_bad_token(self, client):
        assert client.get("/api/auth/me").status_code in (401, 403)
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401


class TestProfiles:

    def test_employer_profile_flow(self, client):
        headers = _register_and_login(client, "boss@corp.example.com", "employer")

        # Profile must exist before employer-only actions
        response = client.get("/api/jobs/my-jobs", headers=headers)
        assert response.status_code == 404
        assert "Create profile first" in response.json()["detail"]

        body = {
            "company_name": "Corp",
            "industry": "IT",
            "company_size": "1-10",
            "company_description": "Small team",
        }
        assert client.post("/api/employers", json=body, headers=headers).status_code == 201
        assert client.post("/api/employers", json=body, headers=headers).status_code == 409

        response = client.put("/api/employers/profile", json={"industry": "Software"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["industry"] == "Software"

        listing = client.get("/api/employers", params={"industry": "Software"})
        assert [e["company_name"] for e in listing.json()] == ["Corp"]

    def test_role_is_enforced(self, client):
        headers = _register_and_login(client, "seeker@corp.example.com", "jobseeker")
        body = {"company_name": "Corp", "industry": "IT", "company_size": "1-10", "company_description": "x"}
        response = client.post("/api/employers", json=body, headers=headers)
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_jobseeker_listing_is_employer_only(self, client, make_employer, make_jobseeker, auth_headers):
        employer_user, _ = make_employer()
        seeker_user, _ = make_jobseeker(skills=["Python", "SQL"])

        assert client.get("/api/jobseekers", headers=auth_headers(seeker_user)).status_code == 403
        response = client.get("/api/jobseekers", params={"skills": "SQL,Go"}, headers=auth_headers(employer_user))
        assert response.status_code == 200
        assert len(response.json()) == 1


class TestJobs:

    def test_create_search_update_delete(self, client, make_employer, auth_headers):
        user, _ = make_employer("Tech Corp")
        headers = auth_headers(user)
        body = {
            "title": "Senior Full Stack Developer",
            "description": "Looking for an experienced developer",
            "requirements": {"skills": ["JavaScript", "MongoDB"]},
            "employment_type": "full-time",
            "workplace_type": "hybrid",
            "location": {"city": "San Francisco"},
            "status": "draft",
        }
        created = client.post("/api/jobs", json=body, headers=headers)
        assert created.status_code == 201
        job = created.json()
        assert job["company_name"] == "Tech Corp"
        assert job["applications_count"] == 0
        assert job["published_at"] is None

        assert client.get("/api/jobs").json()["total"] == 0

        published = client.put(f"/api/jobs/{job['id']}", json={"status": "published"}, headers=headers)
        assert published.status_code == 200
        assert published.json()["published_at"] is not None

        search = client.get("/api/jobs", params={"keyword": "mongodb", "location": "san"})
        assert search.json()["total"] == 1

        assert client.get(f"/api/jobs/{job['id']}").json()["title"] == body["title"]
        assert client.get("/api/jobs/my-jobs", headers=headers).json()[0]["id"] == job["id"]

        deleted = client.delete(f"/api/jobs/{job['id']}", headers=headers)
        assert deleted.status_code == 200
        assert client.get(f"/api/jobs/{job['id']}").status_code == 404

    def test_invalid_job_payload(self, client, make_employer, auth_headers):
        user, _ = make_employer()
        response = client.post("/api/jobs", json={"title": "x"}, headers=auth_headers(user))
        assert response.status_code == 422

    def test_null_update_rules(self, client, make_employer, make_job, auth_headers):
        user, employer = make_employer()
        job = make_job(employer, application_deadline="2030-06-01T00:00:00")
        url = f"/api/jobs/{job['_id']}"

        response = client.put(url, json={"application_deadline": None}, headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["application_deadline"] is None

        response = client.put(url, json={"title": None}, headers=auth_headers(user))
        assert response.status_code == 422
        assert response.json()["error"] == "validation"

    def test_unknown_job_id(self, client):
        response = client.get("/api/jobs/not-an-object-id")
        assert response.status_code == 404
        assert response.json() == {"detail": "Job not found", "error": "not_found"}


class TestApplicationLifecycle:

    @pytest.fixture
    def world(self, make_employer, make_jobseeker, make_job, auth_headers):
        employer_user, employer = make_employer()
        seeker_user, _ = make_jobseeker()
        job = make_job(employer)
        return {
            "employer": auth_headers(employer_user),
            "seeker": auth_headers(seeker_user),
            "job_id": str(job["_id"]),
        }

    def _apply(self, client, world):
        return client.post(
            "/api/applications",
            json={"job_id": world["job_id"], "cover_letter": "Hello", "answers": [{"question": "Why?", "answer": "Fit"}]},
            headers=world["seeker"],
        )

    def test_full_scenario(self, client, world):
        response = self._apply(client, world)
        assert response.status_code == 201
        application = response.json()
        assert application["status"] == "pending"
        assert client.get(f"/api/jobs/{world['job_id']}").json()["applications_count"] == 1

        response = client.put(
            f"/api/applications/{application['id']}",
            json={"status": "shortlisted", "reason": "good fit"},
            headers=world["employer"],
        )
        assert response.status_code == 200
        assert response.json()["status"] == "shortlisted"
        assert len(response.json()["status_history"]) == 1

        response = client.put(
            f"/api/applications/{application['id']}/withdraw",
            json={"reason": "Found another role"},
            headers=world["seeker"],
        )
        assert response.status_code == 200
        assert response.json()["status"] == "withdrawn"
        assert response.json()["withdrawn_by"] == "jobseeker"
        assert client.get(f"/api/jobs/{world['job_id']}").json()["applications_count"] == 0

        response = client.put(f"/api/applications/{application['id']}/withdraw", json={}, headers=world["seeker"])
        assert response.status_code == 409

    def test_duplicate_application(self, client, world):
        assert self._apply(client, world).status_code == 201
        response = self._apply(client, world)
        assert response.status_code == 409
        assert response.json()["detail"] == "Already applied to this job"

    def test_employer_cannot_apply(self, client, world):
        response = client.post("/api/applications", json={"job_id": world["job_id"]}, headers=world["employer"])
        assert response.status_code == 403

    def test_apply_to_missing_job(self, client, world):
        response = client.post("/api/applications", json={"job_id": str(ObjectId())}, headers=world["seeker"])
        assert response.status_code == 404

    def test_withdrawn_status_from_employer_is_validation_error(self, client, world):
        application = self._apply(client, world).json()
        response = client.put(
            f"/api/applications/{application['id']}", json={"status": "withdrawn"}, headers=world["employer"]
        )
        assert response.status_code == 422
        assert response.json()["error"] == "validation"

    def test_unknown_status_rejected_by_schema(self, client, world):
        application = self._apply(client, world).json()
        response = client.put(
            f"/api/applications/{application['id']}", json={"status": "accepted"}, headers=world["employer"]
        )
        assert response.status_code == 422

    def test_other_employer_forbidden(self, client, world, make_employer, auth_headers):
        application = self._apply(client, world).json()
        intruder_user, _ = make_employer()
        response = client.put(
            f"/api/applications/{application['id']}", json={"status": "rejected"}, headers=auth_headers(intruder_user)
        )
        assert response.status_code == 403
        assert client.get(f"/api/applications/{application['id']}", headers=world["seeker"]).json()["status"] == "pending"

    def test_interview_scheduling(self, client, world):
        application = self._apply(client, world).json()
        response = client.post(
            f"/api/applications/{application['id']}/interview",
            json={"round": 1, "date_time": "2030-03-01T09:30:00", "type": "video"},
            headers=world["employer"],
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "shortlisted"
        assert body["interview_schedule"][0]["status"] == "scheduled"

        client.put(f"/api/applications/{application['id']}", json={"status": "hired"}, headers=world["employer"])
        response = client.post(
            f"/api/applications/{application['id']}/interview",
            json={"round": 2, "date_time": "2030-03-08T09:30:00", "type": "phone"},
            headers=world["employer"],
        )
        assert response.status_code == 409

    def test_listings_and_dashboard(self, client, world):
        application = self._apply(client, world).json()

        mine = client.get("/api/applications/me", headers=world["seeker"]).json()
        assert [a["id"] for a in mine] == [application["id"]]
        assert mine[0]["job"]["title"] == "Backend Engineer"
        assert len(client.get("/api/applications/my-applications", headers=world["seeker"]).json()) == 1

        received = client.get("/api/applications/received", headers=world["employer"]).json()
        assert [a["id"] for a in received] == [application["id"]]
        for_job = client.get(f"/api/applications/job/{world['job_id']}", headers=world["employer"]).json()
        assert len(for_job) == 1

        assert client.get("/api/applications/me", headers=world["employer"]).status_code == 403
        assert client.get("/api/applications/received", headers=world["seeker"]).status_code == 403

        dashboard = client.get("/api/applications/dashboard", headers=world["employer"]).json()
        assert dashboard["total_applications"] == 1
        assert dashboard["application_stats"]["pending"] == 1
        assert dashboard["total_jobs"] == 1

        dashboard = client.get("/api/applications/dashboard", headers=world["seeker"]).json()
        assert dashboard["role"] == "jobseeker"
        assert dashboard["total_jobs"] is None

    def test_deleting_job_removes_applications(self, client, world):
        application = self._apply(client, world).json()
        assert client.delete(f"/api/jobs/{world['job_id']}", headers=world["employer"]).status_code == 200
        response = client.get(f"/api/applications/{application['id']}", headers=world["seeker"])
        assert response.status_code == 404


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
