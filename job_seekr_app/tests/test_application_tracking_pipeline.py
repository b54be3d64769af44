"""
Test the application tracking pipeline over HTTP.
"""
from fastapi import status

from conftest import OTHER_OWNER_ID


class TestOwnerIdentity:
    """Requests must name their owner."""

    def test_missing_owner_header_is_rejected(self, test_client):
        response = test_client.get("/api/applications/")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Missing owner identity"

    def test_blank_owner_header_is_rejected(self, test_client):
        response = test_client.get("/api/applications/", headers={"X-Owner-Id": "   "})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestApplicationTrackingPipeline:
    """Test the complete application tracking pipeline."""

    def test_create_application_success(self, test_client, owner_headers, sample_application_data):
        response = test_client.post(
            "/api/applications/",
            json=sample_application_data,
            headers=owner_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["company"] == sample_application_data["company"]
        assert data["position"] == sample_application_data["position"]
        assert data["application_date"] == "2024-01-15"
        assert data["status"] == "applied"
        assert data["user_id"] == owner_headers["X-Owner-Id"]
        assert data["id"]

    def test_replayed_create_is_conflict(self, test_client, owner_headers, sample_application_data):
        payload = dict(sample_application_data, id="client-generated-id")

        first = test_client.post("/api/applications/", json=payload, headers=owner_headers)
        second = test_client.post("/api/applications/", json=payload, headers=owner_headers)

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_409_CONFLICT
        listing = test_client.get("/api/applications/", headers=owner_headers).json()["data"]
        assert len(listing) == 1

    def test_invalid_status_is_rejected(self, test_client, owner_headers, sample_application_data):
        payload = dict(sample_application_data, status="ghosted")

        response = test_client.post("/api/applications/", json=payload, headers=owner_headers)

        assert response.status_code == 422

    def test_list_includes_interview_counts(
        self, test_client, owner_headers, create_application, create_interview
    ):
        busy = create_application(company="Busy Co")
        create_application(company="Quiet Co")
        create_interview(busy.id)
        create_interview(busy.id)

        response = test_client.get("/api/applications/", headers=owner_headers)

        assert response.status_code == status.HTTP_200_OK
        counts = {item["company"]: item["interviews_count"] for item in response.json()["data"]}
        assert counts == {"Busy Co": 2, "Quiet Co": 0}

    def test_list_is_owner_scoped(self, test_client, other_owner_headers, create_application):
        create_application()

        response = test_client.get("/api/applications/", headers=other_owner_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"data": []}

    def test_get_application_with_interviews(
        self, test_client, owner_headers, create_application, create_interview
    ):
        application = create_application()
        create_interview(application.id, topic="Phone screen")

        response = test_client.get(f"/api/applications/{application.id}", headers=owner_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["application"]["id"] == application.id
        assert [i["topic"] for i in data["interviews"]] == ["Phone screen"]

    def test_foreign_application_is_not_found(self, test_client, other_owner_headers, create_application):
        application = create_application()

        response = test_client.get(f"/api/applications/{application.id}", headers=other_owner_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Application not found"

    def test_update_status(self, test_client, owner_headers, create_application):
        application = create_application()

        response = test_client.put(
            f"/api/applications/{application.id}",
            json={"kind": "status", "status": "interviewing"},
            headers=owner_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["status"] == "interviewing"

    def test_update_job_description(self, test_client, owner_headers, create_application):
        application = create_application()

        response = test_client.put(
            f"/api/applications/{application.id}",
            json={"kind": "job_description", "job_description": "Own the billing APIs."},
            headers=owner_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["job_description"] == "Own the billing APIs."

    def test_update_with_unknown_kind_is_rejected(self, test_client, owner_headers, create_application):
        application = create_application()

        response = test_client.put(
            f"/api/applications/{application.id}",
            json={"kind": "salary", "salary": 100},
            headers=owner_headers,
        )

        assert response.status_code == 422

    def test_update_foreign_application_is_not_found(
        self, test_client, other_owner_headers, create_application
    ):
        application = create_application()

        response = test_client.put(
            f"/api/applications/{application.id}",
            json={"kind": "status", "status": "rejected"},
            headers=other_owner_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_application(self, test_client, owner_headers, create_application):
        application = create_application()

        response = test_client.delete(f"/api/applications/{application.id}", headers=owner_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        follow_up = test_client.get(f"/api/applications/{application.id}", headers=owner_headers)
        assert follow_up.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_foreign_application_leaves_it(
        self, test_client, owner_headers, other_owner_headers, create_application
    ):
        application = create_application()

        response = test_client.delete(f"/api/applications/{application.id}", headers=other_owner_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        still_there = test_client.get(f"/api/applications/{application.id}", headers=owner_headers)
        assert still_there.status_code == status.HTTP_200_OK

    def test_delete_all_owner_applications(
        self, test_client, owner_headers, other_owner_headers, create_application
    ):
        create_application()
        create_application()
        create_application(owner_id=OTHER_OWNER_ID)

        response = test_client.delete("/api/applications/of-user", headers=owner_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert test_client.get("/api/applications/", headers=owner_headers).json()["data"] == []
        assert len(test_client.get("/api/applications/", headers=other_owner_headers).json()["data"]) == 1


class TestInterviewEndpoints:
    """Interviews and their comments."""

    def test_interview_lifecycle(self, test_client, owner_headers, create_application):
        application = create_application()

        created = test_client.post(
            "/api/interviews/",
            json={
                "application_id": application.id,
                "interview_date": "2024-02-01T10:00:00",
                "topic": "Take-home review",
                "participants": "Hiring manager",
            },
            headers=owner_headers,
        )
        assert created.status_code == status.HTTP_201_CREATED
        interview_id = created.json()["data"]["id"]

        unpinned = test_client.post(
            f"/api/interviews/{interview_id}/comments",
            json={"comment": "Ask about the team size"},
            headers=owner_headers,
        )
        pinned = test_client.post(
            f"/api/interviews/{interview_id}/comments",
            json={"comment": "Bring the portfolio", "pinned": True},
            headers=owner_headers,
        )
        assert unpinned.status_code == status.HTTP_201_CREATED
        assert pinned.status_code == status.HTTP_201_CREATED

        details = test_client.get(f"/api/interviews/{interview_id}", headers=owner_headers)
        assert details.status_code == status.HTTP_200_OK
        comments = details.json()["data"]["comments"]
        assert [c["comment"] for c in comments] == ["Bring the portfolio", "Ask about the team size"]

        comment_id = unpinned.json()["data"]["id"]
        removed = test_client.delete(
            f"/api/interviews/{interview_id}/comments/{comment_id}", headers=owner_headers
        )
        assert removed.status_code == status.HTTP_204_NO_CONTENT
        removed_again = test_client.delete(
            f"/api/interviews/{interview_id}/comments/{comment_id}", headers=owner_headers
        )
        assert removed_again.status_code == status.HTTP_404_NOT_FOUND

        deleted = test_client.delete(f"/api/interviews/{interview_id}", headers=owner_headers)
        assert deleted.status_code == status.HTTP_204_NO_CONTENT
        gone = test_client.get(f"/api/interviews/{interview_id}", headers=owner_headers)
        assert gone.status_code == status.HTTP_404_NOT_FOUND

    def test_interviews_with_mixed_offsets_sort_by_instant(
        self, test_client, owner_headers, create_application
    ):
        application = create_application()
        for moment, topic in [
            ("2024-01-10T06:00:00Z", "Later in UTC"),
            ("2024-01-10T09:00:00+05:00", "Earlier in UTC"),
        ]:
            created = test_client.post(
                "/api/interviews/",
                json={"application_id": application.id, "interview_date": moment, "topic": topic},
                headers=owner_headers,
            )
            assert created.status_code == status.HTTP_201_CREATED

        response = test_client.get(f"/api/applications/{application.id}", headers=owner_headers)

        interviews = response.json()["data"]["interviews"]
        assert [(i["topic"], i["interview_date"]) for i in interviews] == [
            ("Earlier in UTC", "2024-01-10T04:00:00Z"),
            ("Later in UTC", "2024-01-10T06:00:00Z"),
        ]

    def test_interview_on_foreign_application_is_not_found(
        self, test_client, other_owner_headers, create_application
    ):
        application = create_application()

        response = test_client.post(
            "/api/interviews/",
            json={
                "application_id": application.id,
                "interview_date": "2024-02-01T10:00:00",
                "topic": "Sneaky",
            },
            headers=other_owner_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_foreign_interview_is_not_found(
        self, test_client, other_owner_headers, create_application, create_interview
    ):
        application = create_application()
        interview_id = create_interview(application.id)

        response = test_client.get(f"/api/interviews/{interview_id}", headers=other_owner_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
