"""Integration tests for report and scoring API endpoints."""

import pytest
import pytest_asyncio
from uuid import uuid4
from httpx import ASGITransport, AsyncClient

from src.machine_inspection.infrastructure.services import ServiceFactory
from src.machine_inspection.presentation.api.dependencies import get_report_service
from src.machine_inspection.presentation.api.main import create_app
from src.machine_inspection.presentation.api.middleware import CORRELATION_HEADER


REPORTS_URL = "/api/v1/reports"


def build_app(factory: ServiceFactory):
    """Create the application wired to an isolated service factory."""
    app = create_app()

    async def override_report_service():
        async with factory.get_report_service() as report_service:
            yield report_service

    app.dependency_overrides[get_report_service] = override_report_service
    return app


@pytest.fixture
def report_payload():
    """Create-report request body."""
    return {
        "machine": {
            "id": "m-42",
            "name": "Excavator 320",
            "manufacturer": "CAT",
            "serial_number": "SN-0042",
            "year": 2019
        },
        "inspector": {"id": "insp-1", "name": "Dana Reyes", "role": "inspector"},
        "customer": {"name": "Acme Mining", "email": "ops@acme.test"},
        "units": [
            {
                "name": "Engine",
                "checkpoints": [{"name": "Oil level"}, {"name": "Filters"}]
            },
            {
                "name": "Undercarriage",
                "sub_units": [
                    {"name": "Tracks", "checkpoints": [{"name": "Tension"}, {"name": "Rollers"}]}
                ]
            }
        ],
        "comments": "Annual inspection"
    }


class TestReportAPI:
    """Integration tests for report endpoints."""

    @pytest_asyncio.fixture
    async def client(self):
        """HTTP client against an app with fresh in-memory storage."""
        app = build_app(ServiceFactory())
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client

    async def create_report(self, client, payload):
        response = await client.post(REPORTS_URL, json=payload)
        assert response.status_code == 201
        return response.json()

    async def set_condition(self, client, report_id, unit_index, checkpoint_index, condition, sub_unit_index=None):
        return await client.put(
            f"{REPORTS_URL}/{report_id}/checkpoints/condition",
            json={
                "unit_index": unit_index,
                "checkpoint_index": checkpoint_index,
                "sub_unit_index": sub_unit_index,
                "condition": condition
            }
        )

    @pytest.mark.asyncio
    async def test_health(self, client):
        """Test health endpoint."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "machine-inspection-service"}

    @pytest.mark.asyncio
    async def test_create_report(self, client, report_payload):
        """Test a new report starts as an unscored draft."""
        report = await self.create_report(client, report_payload)

        assert report["status"] == "draft"
        assert report["overall_score"] == 0
        assert report["overall_rating"] == "Not Good"
        assert report["machine"]["name"] == "Excavator 320"
        assert report["inspector"]["id"] == "insp-1"
        assert [unit["name"] for unit in report["units"]] == ["Engine", "Undercarriage"]
        assert report["units"][1]["sub_units"][0]["checkpoints"][0]["is_answered"] is False

    @pytest.mark.asyncio
    async def test_create_report_invalid_payload(self, client, report_payload):
        """Test schema validation on create."""
        report_payload["machine"]["name"] = ""

        response = await client.post(REPORTS_URL, json=report_payload)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_report_duplicate_units(self, client, report_payload):
        """Test duplicate unit names map to a validation error."""
        report_payload["units"][1]["name"] = "Engine"

        response = await client.post(REPORTS_URL, json=report_payload)

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_condition_updates_scores(self, client, report_payload):
        """Test recording conditions rescoring the report."""
        report = await self.create_report(client, report_payload)

        await self.set_condition(client, report["id"], 0, 0, "Good")
        await self.set_condition(client, report["id"], 0, 1, "Better")
        await self.set_condition(client, report["id"], 1, 0, "Better", sub_unit_index=0)
        response = await self.set_condition(client, report["id"], 1, 1, "Bad", sub_unit_index=0)

        assert response.status_code == 200
        body = response.json()
        assert [unit["unit_score"] for unit in body["units"]] == [90, 70]
        assert [unit["unit_rating"] for unit in body["units"]] == ["Good", "Good"]
        assert body["overall_score"] == 80
        assert body["overall_rating"] == "Good"
        assert body["status"] == "scored"

    @pytest.mark.asyncio
    async def test_unrecognized_condition(self, client, report_payload):
        """Test unknown conditions are stored but not scored."""
        report = await self.create_report(client, report_payload)

        response = await self.set_condition(client, report["id"], 0, 0, "Excellent")

        body = response.json()
        assert body["units"][0]["checkpoints"][0]["condition"] == "Excellent"
        assert body["units"][0]["checkpoints"][0]["is_answered"] is False
        assert body["overall_score"] == 0

    @pytest.mark.asyncio
    async def test_condition_out_of_range(self, client, report_payload):
        """Test a bad checkpoint address."""
        report = await self.create_report(client, report_payload)

        response = await self.set_condition(client, report["id"], 7, 0, "Good")

        assert response.status_code == 400
        assert response.json()["detail"] == "Unit index 7 is out of range"

    @pytest.mark.asyncio
    async def test_remarks_and_comments(self, client, report_payload):
        """Test recording remarks and comments."""
        report = await self.create_report(client, report_payload)

        remarks = await client.put(
            f"{REPORTS_URL}/{report['id']}/checkpoints/remarks",
            json={"unit_index": 0, "checkpoint_index": 1, "remarks": "Replace soon"}
        )
        comments = await client.put(
            f"{REPORTS_URL}/{report['id']}/comments",
            json={"comments": "Customer present"}
        )

        assert remarks.status_code == 200
        assert remarks.json()["units"][0]["checkpoints"][1]["remarks"] == "Replace soon"
        assert comments.json()["comments"] == "Customer present"

    @pytest.mark.asyncio
    async def test_summary(self, client, report_payload):
        """Test condition counts and unit scores of a report."""
        report = await self.create_report(client, report_payload)
        await self.set_condition(client, report["id"], 0, 0, "Good")
        await self.set_condition(client, report["id"], 0, 1, "Bad")

        response = await client.get(f"{REPORTS_URL}/{report['id']}/summary")

        assert response.status_code == 200
        body = response.json()
        assert body["conditions"] == {"good": 1, "bad": 1, "better": 0, "total": 2}
        assert [unit["unit_score"] for unit in body["unit_scores"]] == [60, 0]
        assert body["overall_score"] == 30
        assert body["overall_rating"] == "Not Good"

    @pytest.mark.asyncio
    async def test_save_locks_report(self, client, report_payload):
        """Test a saved report refuses further edits."""
        report = await self.create_report(client, report_payload)
        await self.set_condition(client, report["id"], 0, 0, "Better")

        saved = await client.post(f"{REPORTS_URL}/{report['id']}/save")

        assert saved.status_code == 200
        assert saved.json()["status"] == "saved"
        assert saved.json()["overall_score"] == 50

        edit = await self.set_condition(client, report["id"], 0, 1, "Good")
        assert edit.status_code == 400
        assert edit.json()["detail"] == "Cannot modify a saved report"

        resave = await client.post(f"{REPORTS_URL}/{report['id']}/save")
        assert resave.status_code == 400

        delete = await client.delete(f"{REPORTS_URL}/{report['id']}")
        assert delete.status_code == 400

    @pytest.mark.asyncio
    async def test_list_and_filter(self, client, report_payload):
        """Test listing reports by status and inspector."""
        first = await self.create_report(client, report_payload)
        report_payload["inspector"] = {"id": "insp-2", "name": "Sam Ortiz"}
        second = await self.create_report(client, report_payload)
        await client.post(f"{REPORTS_URL}/{first['id']}/save")

        all_reports = await client.get(REPORTS_URL)
        saved = await client.get(REPORTS_URL, params={"status": "saved"})
        by_inspector = await client.get(REPORTS_URL, params={"inspector_id": "insp-2"})

        assert all_reports.json()["total"] == 2
        assert [report["id"] for report in saved.json()["reports"]] == [first["id"]]
        assert [report["id"] for report in by_inspector.json()["reports"]] == [second["id"]]

    @pytest.mark.asyncio
    async def test_delete_report(self, client, report_payload):
        """Test deleting a draft."""
        report = await self.create_report(client, report_payload)

        response = await client.delete(f"{REPORTS_URL}/{report['id']}")

        assert response.status_code == 204
        assert (await client.get(f"{REPORTS_URL}/{report['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_report(self, client):
        """Test unknown report IDs return 404."""
        missing_id = uuid4()

        get_response = await client.get(f"{REPORTS_URL}/{missing_id}")
        calculate_response = await client.post(f"{REPORTS_URL}/{missing_id}/calculate")
        summary_response = await client.get(f"{REPORTS_URL}/{missing_id}/summary")
        delete_response = await client.delete(f"{REPORTS_URL}/{missing_id}")

        assert get_response.status_code == 404
        assert calculate_response.status_code == 404
        assert calculate_response.json()["type"] == "not_found"
        assert summary_response.status_code == 404
        assert delete_response.status_code == 404

    @pytest.mark.asyncio
    async def test_correlation_id_echoed(self, client):
        """Test the correlation ID header is returned."""
        response = await client.get(REPORTS_URL, headers={CORRELATION_HEADER: "req-123"})

        assert response.status_code == 200
        assert response.headers[CORRELATION_HEADER] == "req-123"


class TestDeferredScoringAPI:
    """Integration tests for the calculate-on-demand flow."""

    @pytest_asyncio.fixture
    async def client(self):
        """HTTP client against an app that defers scoring."""
        app = build_app(ServiceFactory(auto_recalculate=False))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client

    @pytest.mark.asyncio
    async def test_calculate_on_demand(self, client, report_payload):
        """Test scores change only after an explicit calculation."""
        created = await client.post(REPORTS_URL, json=report_payload)
        report_id = created.json()["id"]

        edited = await client.put(
            f"{REPORTS_URL}/{report_id}/checkpoints/condition",
            json={"unit_index": 0, "checkpoint_index": 0, "condition": "Good"}
        )
        assert edited.json()["overall_score"] == 0
        assert edited.json()["status"] == "draft"

        calculated = await client.post(f"{REPORTS_URL}/{report_id}/calculate")

        assert calculated.status_code == 200
        assert calculated.json()["units"][0]["unit_score"] == 80
        assert calculated.json()["overall_score"] == 40
        assert calculated.json()["overall_rating"] == "Not Good"
        assert calculated.json()["status"] == "scored"


class TestScoringAPI:
    """Integration tests for stateless scoring endpoints."""

    @pytest_asyncio.fixture
    async def client(self):
        """HTTP client for scoring endpoints."""
        app = build_app(ServiceFactory())
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client

    @pytest.mark.asyncio
    async def test_calculate_preview(self, client):
        """Test scoring a checklist without storing it."""
        response = await client.post(
            "/api/v1/scoring/calculate",
            json={
                "units": [
                    {"name": "Engine", "checkpoints": [
                        {"name": "Oil", "condition": "Good"},
                        {"name": "Filters", "condition": "Good"},
                        {"name": "Belts", "condition": "Better"}
                    ]},
                    {"name": "Cab", "checkpoints": [{"name": "Seat", "condition": ""}]}
                ]
            }
        )

        assert response.status_code == 200
        body = response.json()
        assert [unit["unit_score"] for unit in body["units"]] == [87, 0]
        assert body["overall_score"] == 44
        assert body["overall_rating"] == "Not Good"
        assert body["conditions"] == {"good": 2, "bad": 0, "better": 1, "total": 3}

    @pytest.mark.asyncio
    async def test_calculate_preview_empty(self, client):
        """Test an empty checklist scores 0."""
        response = await client.post("/api/v1/scoring/calculate", json={"units": []})

        assert response.json()["overall_score"] == 0
        assert response.json()["overall_rating"] == "Not Good"

    @pytest.mark.asyncio
    async def test_rating(self, client):
        """Test rating lookup for a score."""
        response = await client.get("/api/v1/scoring/rating/70")

        assert response.status_code == 200
        assert response.json()["rating"] == "Good"
        assert response.json()["description"] == "Overall score of 70% or more"

    @pytest.mark.asyncio
    async def test_rating_out_of_range(self, client):
        """Test scores above 100 are rejected."""
        response = await client.get("/api/v1/scoring/rating/101")

        assert response.status_code == 422
