"""Tests for web routes."""

import tempfile
from contextlib import contextmanager
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from capture_hub.db.models import Base
from capture_hub.db.repositories import DocumentRepository

OLEMISS_URL = "https://www.olemisssports.com/calendar"

FEED = """<?xml version="1.0"?>
<rss xmlns:ev="http://purl.org/rss/1.0/modules/event/" xmlns:s="http://sidearmsports.com/schemas">
<channel>
<item>
<title>5/18 6:00 PM [L] Softball vs Arizona</title>
<description>[L] Ole Miss Softball vs Arizona
L 1-10 (F/5)
Streaming Video: SECN+</description>
<ev:location>Tucson, Ariz.</ev:location>
<s:opponent>Arizona</s:opponent>
</item>
</channel>
</rss>"""


@pytest.fixture
def temp_db_path():
    """Create a temporary database file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def test_engine(temp_db_path):
    """Create a test database engine."""
    engine = create_engine(f"sqlite:///{temp_db_path}", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(test_engine, monkeypatch):
    """Create a test client with mocked database."""
    TestSessionLocal = sessionmaker(bind=test_engine)

    @contextmanager
    def mock_get_session():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr("capture_hub.web.dependencies.get_session", mock_get_session)
    monkeypatch.setattr("capture_hub.web.dependencies.get_session_factory", lambda: TestSessionLocal)
    monkeypatch.setattr("capture_hub.web.app.init_db", lambda: None)

    from capture_hub.web.app import create_app

    return TestClient(create_app())


@pytest.fixture
def seeded(test_engine):
    """Store one list document."""
    session = sessionmaker(bind=test_engine)()
    DocumentRepository(session).put(
        "captured_lists",
        "example.com",
        {
            "data": {
                "Events": [
                    {"uid": "events-1-0", "Title": "Events", "Date": "2025-05-01", "ImageUrl": []},
                    {"uid": "events-1-1", "Title": "Events", "Date": "2025-05-20", "ImageUrl": []},
                ]
            }
        },
    )
    session.commit()
    session.close()


def browseai_payload(event_date: str = "May 18") -> dict:
    return {
        "task": {
            "id": "t-1",
            "inputParameters": {"originUrl": OLEMISS_URL},
            "capturedLists": {
                "OleSports": [{"EventDate": event_date, "Location": "Tucson", "Sports": "SB"}],
            },
        }
    }


class TestCheckup:
    """Tests for the health check."""

    def test_checkup(self, client: TestClient) -> None:
        """Test the service reports ok."""
        response = client.get("/api/checkup")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestWebhooks:
    """Tests for webhook routes."""

    def test_browseai_ingests(self, client: TestClient) -> None:
        """Test a delivery is stored and readable."""
        response = client.post("/api/webhooks/browseAI", json=browseai_payload())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["meta"]["collections"] == ["captured_lists"]

        document = client.get("/api/documents/captured_lists/olemisssports.com").json()
        assert len(document["data"]["OleSports"]) == 1

    def test_browseai_redelivery(self, client: TestClient) -> None:
        """Test re-delivery adds nothing and a new event is appended."""
        client.post("/api/webhooks/browseai", json=browseai_payload())
        client.post("/api/webhooks/browseai", json=browseai_payload())
        client.post("/api/webhooks/browseai", json=browseai_payload("May 20"))

        document = client.get("/api/documents/captured_lists/olemisssports.com").json()
        assert [item["EventDate"] for item in document["data"]["OleSports"]] == ["May 18", "May 20"]

    def test_browseai_missing_task(self, client: TestClient) -> None:
        """Test the client error envelope."""
        response = client.post("/api/webhooks/browseai", json={"data": {}})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "missing_task",
            "message": "Invalid webhook data structure",
        }

    def test_browseai_invalid_json(self, client: TestClient) -> None:
        """Test a body that is not JSON."""
        response = client.post(
            "/api/webhooks/browseai", content=b"not json", headers={"content-type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_payload"

    def test_unknown_webhook(self, client: TestClient) -> None:
        """Test unknown webhook ids."""
        response = client.post("/api/webhooks/zapier", json={})
        assert response.status_code == 404
        assert response.json()["success"] is False
        assert "zapier" in response.json()["message"]

    def test_xml_feed(self, client: TestClient) -> None:
        """Test parsing a raw XML feed."""
        response = client.post(
            "/api/webhooks/xmlParser", content=FEED.encode(), headers={"content-type": "application/xml"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["score"] == "L 1-10 (F/5)"
        assert body["data"][0]["opponent"] == "Arizona"

    def test_xml_feed_in_json(self, client: TestClient) -> None:
        """Test a feed wrapped in a JSON body."""
        response = client.post("/api/webhooks/xmlparser", json={"xml": FEED})
        assert response.json()["count"] == 1

    def test_xml_feed_not_markup(self, client: TestClient) -> None:
        """Test a body that is not a feed."""
        response = client.post(
            "/api/webhooks/xmlparser", content=b"hello", headers={"content-type": "text/plain"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_feed"


class TestDocumentRoutes:
    """Tests for document routes."""

    def test_list_documents(self, client: TestClient, seeded) -> None:
        """Test listing document ids."""
        response = client.get("/api/documents/captured_lists")
        assert response.status_code == 200
        assert response.json() == ["example.com"]

    def test_unknown_collection(self, client: TestClient) -> None:
        """Test unknown collections are 404."""
        response = client.get("/api/documents/secrets")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_missing_document(self, client: TestClient) -> None:
        """Test missing documents are 404."""
        assert client.get("/api/documents/captured_lists/nowhere.com").status_code == 404

    def test_categories(self, client: TestClient, seeded) -> None:
        """Test listing categories."""
        response = client.get("/api/documents/captured_lists/example.com/categories")
        assert response.json() == {"documentId": "example.com", "categories": ["Events"]}

    def test_category_page(self, client: TestClient, seeded) -> None:
        """Test filtered category listing."""
        response = client.get(
            "/api/documents/captured_lists/example.com/categories/events",
            params={"start_date": "2025-05-10", "order": "asc"},
        )

        assert response.status_code == 200
        body = response.json()
        assert [item["uid"] for item in body["data"]] == ["events-1-1"]
        assert body["totalAvailable"] == 1
        assert body["page"] == 1

    def test_category_not_found(self, client: TestClient, seeded) -> None:
        """Test unknown categories list the available ones."""
        response = client.get("/api/documents/captured_lists/example.com/categories/games")
        assert response.status_code == 404
        assert response.json()["availableCategories"] == ["Events"]

    @pytest.mark.parametrize(
        "params",
        [{"start_date": "yesterday"}, {"page": "0"}, {"page": "abc"}, {"order": "sideways"}],
    )
    def test_category_bad_query(self, client: TestClient, seeded, params: dict) -> None:
        """Test invalid query parameters are 400."""
        response = client.get("/api/documents/captured_lists/example.com/categories/Events", params=params)
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_update_and_clear_image(self, client: TestClient, seeded) -> None:
        """Test image annotation endpoints."""
        response = client.put(
            "/api/documents/captured_lists/update-image",
            json={"uid": "events-1-0", "imageURL": "https://img/a.png"},
        )
        assert response.status_code == 200
        assert response.json()["item"]["ImageUrl"] == ["https://img/a.png"]

        response = client.put("/api/documents/captured_lists/clear-image", json={"uid": "events-1-0"})
        assert response.status_code == 200
        assert response.json()["item"]["ImageUrl"] == []

    def test_update_image_validation(self, client: TestClient, seeded) -> None:
        """Test required fields."""
        response = client.put("/api/documents/captured_lists/update-image", json={"uid": "events-1-0"})
        assert response.status_code == 400

    def test_delete_document(self, client: TestClient, seeded) -> None:
        """Test deleting a document."""
        response = client.delete("/api/documents/captured_lists/example.com")
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get("/api/documents/captured_lists").json() == []
