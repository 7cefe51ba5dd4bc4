"""
API tests for /api/jobs.
"""

from datetime import timedelta

from bson import ObjectId

from careerhub.services.deadlines import utc_now

from conftest import OTHER_EMAIL, STUDENT_EMAIL


def application_body(email=STUDENT_EMAIL):
    return {
        "email": email,
        "responses": [{"fieldName": "Why this role?", "value": "I enjoy building APIs"}],
        "appliedAt": utc_now().isoformat(),
    }


class TestAuthentication:

    def test_missing_token_is_401(self, client):
        response = client.get("/api/jobs")
        assert response.status_code == 401
        assert response.json()["error_code"] == "NOT_AUTHENTICATED"

    def test_invalid_token_is_401(self, client):
        response = client.get("/api/jobs", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"

    def test_apply_without_token_is_401_before_payload_checks(self, client, make_job):
        job = make_job()
        response = client.patch(f"/api/jobs/{job['_id']}", json={})
        assert response.status_code == 401


class TestReadJobs:

    def test_list_jobs_with_deadline_status(self, client, auth_header, make_job):
        make_job(deadline=utc_now() + timedelta(days=2))

        response = client.get("/api/jobs", headers=auth_header())

        assert response.status_code == 200
        jobs = response.json()["jobs"]
        assert len(jobs) == 1
        assert jobs[0]["deadlineStatus"]["status"] == "urgent"
        assert isinstance(jobs[0]["_id"], str)

    def test_get_job(self, client, auth_header, make_job):
        job = make_job()
        response = client.get(f"/api/jobs/{job['_id']}", headers=auth_header())
        assert response.status_code == 200
        assert response.json()["job"]["title"] == "Backend Engineer Intern"

    def test_get_job_invalid_id(self, client, auth_header):
        response = client.get("/api/jobs/123", headers=auth_header())
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid job ID", "error_code": "INVALID_ID"}

    def test_get_job_not_found(self, client, auth_header):
        response = client.get(f"/api/jobs/{ObjectId()}", headers=auth_header())
        assert response.status_code == 404

    def test_details_drops_malformed_ids(self, client, auth_header, make_job):
        job = make_job()
        response = client.post(
            "/api/jobs/details", json={"jobIds": [str(job["_id"]), "oops"]}, headers=auth_header()
        )
        assert response.status_code == 200
        assert [j["_id"] for j in response.json()["jobs"]] == [str(job["_id"])]

    def test_details_requires_ids(self, client, auth_header):
        response = client.post("/api/jobs/details", json={"jobIds": []}, headers=auth_header())
        assert response.status_code == 400

    def test_eligibility_endpoint(self, client, auth_header, make_student, make_job):
        make_student(batch_start=2021, batch_end=2024)
        job = make_job(eligibility=["2020–2024"])

        response = client.get(f"/api/jobs/{job['_id']}/eligibility", headers=auth_header())

        assert response.status_code == 200
        assert response.json() == {"eligible": True, "batch": "2020-2024", "eligibility": ["2020-2024"]}


class TestApply:

    def test_apply_twice(self, client, auth_header, make_student, make_job, jobs):
        make_student()
        job = make_job()
        url = f"/api/jobs/{job['_id']}"

        first = client.patch(url, json=application_body(), headers=auth_header())
        second = client.patch(url, json=application_body(), headers=auth_header())

        assert first.status_code == 200
        assert first.json() == {"message": "Application submitted successfully", "applicantCount": 1}
        assert second.status_code == 409
        assert second.json()["detail"] == "You have already applied for this job"
        assert jobs.applicant_count(job["_id"]) == 1

    def test_apply_for_someone_else_is_403(self, client, auth_header, make_student, make_job):
        make_student()
        job = make_job()
        response = client.patch(f"/api/jobs/{job['_id']}", json=application_body(OTHER_EMAIL), headers=auth_header())
        assert response.status_code == 403
        assert response.json()["error_code"] == "IDENTITY_MISMATCH"

    def test_apply_for_someone_else_on_missing_job_is_still_403(self, client, auth_header):
        response = client.patch(f"/api/jobs/{ObjectId()}", json=application_body(OTHER_EMAIL), headers=auth_header())
        assert response.status_code == 403

    def test_apply_after_deadline_is_400(self, client, auth_header, make_student, make_job):
        make_student()
        job = make_job(deadline=utc_now() - timedelta(seconds=30))
        response = client.patch(f"/api/jobs/{job['_id']}", json=application_body(), headers=auth_header())
        assert response.status_code == 400
        assert response.json()["detail"] == "Application deadline has passed"

    def test_malformed_payload_is_400(self, client, auth_header, make_job):
        job = make_job()
        body = {"email": STUDENT_EMAIL, "responses": [{"value": "no field name"}], "appliedAt": utc_now().isoformat()}
        response = client.patch(f"/api/jobs/{job['_id']}", json=body, headers=auth_header())
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_ineligible_is_403(self, client, auth_header, make_student, make_job):
        make_student(batch_start=2021, batch_end=2024)
        job = make_job(eligibility=["2021-2025"])
        response = client.patch(f"/api/jobs/{job['_id']}", json=application_body(), headers=auth_header())
        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_ELIGIBLE"


class TestWithdrawAndDecline:

    def test_withdraw(self, client, auth_header, make_student, make_job, profiles):
        make_student()
        job = make_job()
        client.patch(f"/api/jobs/{job['_id']}", json=application_body(), headers=auth_header())

        response = client.delete(f"/api/jobs/{job['_id']}", params={"email": STUDENT_EMAIL}, headers=auth_header())

        assert response.status_code == 200
        assert response.json()["remainingApplicants"] == 0
        assert profiles.get_by_email(STUDENT_EMAIL)["jobs"] == []

    def test_not_interested(self, client, auth_header, make_student, make_job):
        make_student()
        job = make_job()
        url = f"/api/jobs/notInterested/{job['_id']}"
        body = {"email": STUDENT_EMAIL, "notInterested": True}

        first = client.patch(url, json=body, headers=auth_header())
        second = client.patch(url, json=body, headers=auth_header())

        assert first.status_code == 200
        assert first.json()["notInterestedCount"] == 1
        assert second.status_code == 409


class TestStatusUpdate:

    def test_admin_updates_status(self, client, auth_header, admin_header, make_student, make_job, jobs):
        make_student()
        job = make_job()
        client.patch(f"/api/jobs/{job['_id']}", json=application_body(), headers=auth_header())

        response = client.put(
            f"/api/jobs/{job['_id']}",
            json={"applicationEmail": STUDENT_EMAIL, "newStatus": "accepted"},
            headers=admin_header,
        )

        assert response.status_code == 200
        assert response.json()["newStatus"] == "accepted"
        assert jobs.get(job["_id"])["studentsApplied"][0]["status"] == "accepted"

    def test_invalid_status_is_400(self, client, admin_header, make_job):
        job = make_job()
        response = client.put(
            f"/api/jobs/{job['_id']}",
            json={"applicationEmail": STUDENT_EMAIL, "newStatus": "shortlisted"},
            headers=admin_header,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_STATUS"

    def test_students_cannot_update_status(self, client, auth_header, make_job):
        job = make_job()
        response = client.put(
            f"/api/jobs/{job['_id']}",
            json={"applicationEmail": STUDENT_EMAIL, "newStatus": "accepted"},
            headers=auth_header(),
        )
        assert response.status_code == 403
