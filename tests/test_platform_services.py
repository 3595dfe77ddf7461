"""Tests for the Crowdin app HTTP endpoints."""

import pytest

from app import app
from crowdin.errors import StringNotFoundError, TokenRefreshError
from platform_services import (
    get_batch_processor,
    get_string_metadata_client,
    get_strings_client_factory,
    get_token_service,
)
from qa.models import StringConstraint

MISSING_FONT = "NoSuchFontFamily"
QA_URL = "/api/qa/text-length-check"


class FakeMetadataClient:
    def __init__(self, constraints):
        self.constraints = constraints
        self.calls = []

    async def get_constraint(self, string_id, project_id, auth_token):
        self.calls.append((string_id, project_id, auth_token))
        value = self.constraints.get(string_id)
        if isinstance(value, Exception):
            raise value
        return value


class FakeTokenService:
    def __init__(self, error=None):
        self.error = error

    async def get_valid_token(self, organization):
        if self.error:
            raise self.error
        return "access-token"


class FakeStringsClient:
    requests = []
    response = {"id": 10, "text": "Hello", "fields": {"widthpx": 120}}
    error = None

    def __init__(self, access_token, organization_domain=None):
        self.access_token = access_token
        self.organization_domain = organization_domain

    async def get_string(self, project_id, string_id):
        FakeStringsClient.requests.append((self.access_token, self.organization_domain, project_id, string_id))
        if FakeStringsClient.error:
            raise FakeStringsClient.error
        return FakeStringsClient.response


@pytest.fixture(autouse=True)
def reset_fake_strings_client():
    FakeStringsClient.requests = []
    FakeStringsClient.error = None
    yield


def _qa_body(translations, project_id=7):
    return {
        "data": {
            "translations": translations,
            "targetLanguage": {"id": "de", "name": "German"},
            "sourceLanguage": {"id": "en", "name": "English"},
            "project": {"id": project_id, "name": "Website"},
            "file": {"id": 3, "name": "strings.json"},
        }
    }


def _constraint(string_id, max_width):
    return StringConstraint(string_id=string_id, max_width_pixels=max_width, font=MISSING_FONT, font_size=16)


# ==================== Static endpoints ====================

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_manifest_advertises_qa_check(client, settings):
    manifest = client.get("/manifest.json").json()

    assert manifest["authentication"] == {"type": "crowdin_app", "clientId": settings.CROWDIN_CLIENT_ID}
    assert manifest["baseUrl"] == settings.BASE_URL
    assert manifest["events"] == {"installed": "/events/installed", "uninstall": "/events/uninstall"}
    qa_module = manifest["modules"]["external-qa-check"][0]
    assert qa_module["runQaCheckUrl"] == QA_URL
    assert qa_module["getBatchSizeUrl"] == "/api/qa/batch-size"
    assert manifest["modules"]["editor-right-panel"][0]["url"] == "/length-checker"


def test_batch_size(client):
    assert client.get("/api/qa/batch-size").json() == {"data": {"size": 50}}


def test_length_checker_page(client, settings):
    response = client.get("/length-checker")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert settings.CROWDIN_IFRAME_SRC in response.text
    assert "textarea.edited" in response.text


def test_sitemap(client, settings):
    response = client.get("/sitemap.xml")

    assert response.status_code == 200
    assert f"{settings.BASE_URL}/manifest.json" in response.text


# ==================== QA check ====================

def test_qa_without_credential_is_unauthorized(client):
    response = client.post(QA_URL, json=_qa_body([{"id": 1, "text": "Hello", "stringId": 10}]))

    assert response.status_code == 401
    assert "data" not in response.json()


def test_qa_with_invalid_credential_is_unauthorized(client):
    response = client.post(
        QA_URL,
        json=_qa_body([{"id": 1, "text": "Hello", "stringId": 10}]),
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401


def test_qa_reports_width_violation(client, make_jwt):
    token = make_jwt()
    metadata = FakeMetadataClient({10: _constraint(10, 30)})
    app.dependency_overrides[get_string_metadata_client] = lambda: metadata

    response = client.post(
        QA_URL,
        json=_qa_body([{"id": 1, "text": "Hello", "stringId": 10}]),
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200
    validations = response.json()["data"]["validations"]
    assert validations == [{
        "translationId": 1,
        "passed": False,
        "error": {
            "message": "Translation text width (45px) exceeds maximum allowed width (30px) by 15 pixels"
        },
    }]
    assert metadata.calls == [(10, 7, token)]


def test_qa_accepts_token_in_query(client, make_jwt):
    app.dependency_overrides[get_string_metadata_client] = lambda: FakeMetadataClient({})

    response = client.post(
        QA_URL,
        params={"jwtToken": make_jwt()},
        json=_qa_body([{"id": 1, "text": "Hello", "stringId": 10}]),
    )

    assert response.status_code == 200
    assert response.json() == {"data": {"validations": [{"translationId": 1, "passed": True}]}}


def test_qa_mixed_batch_fails_open(client, make_jwt):
    metadata = FakeMetadataClient({
        10: ConnectionError("metadata service down"),
        20: _constraint(20, 30),
        30: _constraint(30, 100),
    })
    app.dependency_overrides[get_string_metadata_client] = lambda: metadata

    response = client.post(
        QA_URL,
        json=_qa_body([
            {"id": 1, "text": "Hello", "stringId": 10},
            {"id": 2, "text": "Hello", "stringId": 20},
            {"id": 3, "text": "Hi", "stringId": 30},
        ]),
        headers={"Authorization": f"Bearer {make_jwt()}"},
    )

    assert response.status_code == 200
    validations = {v["translationId"]: v for v in response.json()["data"]["validations"]}
    assert set(validations) == {1, 2, 3}
    assert validations[1]["passed"] is True
    assert validations[2]["passed"] is False
    assert validations[3]["passed"] is True
    assert "error" not in validations[3]


def test_qa_malformed_body_is_rejected(client, make_jwt):
    response = client.post(
        QA_URL,
        json={"data": {"translations": [{"id": 1}]}},
        headers={"Authorization": f"Bearer {make_jwt()}"},
    )

    assert response.status_code == 422


def test_qa_internal_failure_returns_500(client, make_jwt):
    class BrokenProcessor:
        async def process(self, translations, resolve_constraint, target_language=None):
            raise RuntimeError("boom")

    app.dependency_overrides[get_string_metadata_client] = lambda: FakeMetadataClient({})
    app.dependency_overrides[get_batch_processor] = lambda: BrokenProcessor()

    response = client.post(
        QA_URL,
        json=_qa_body([{"id": 1, "text": "Hello", "stringId": 10}]),
        headers={"Authorization": f"Bearer {make_jwt()}"},
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


# ==================== Lifecycle events ====================

def test_installed_event_registers_organization(client, installed_event):
    response = client.post("/events/installed", json=installed_event)

    assert response.status_code == 200
    assert response.json()["data"] == {"organizationId": 42, "domain": "acme"}


def test_installed_event_with_foreign_client_id_is_forbidden(client, installed_event):
    response = client.post("/events/installed", json={**installed_event, "clientId": "other"})
    assert response.status_code == 403


def test_uninstall_event_removes_organization(client, installed_event, make_jwt):
    client.post("/events/installed", json=installed_event)
    response = client.post("/events/uninstall", json=installed_event)

    assert response.status_code == 200
    assert response.json()["message"] == "App uninstalled"

    strings_response = client.get("/api/strings/10", params={"jwtToken": make_jwt()})
    assert strings_response.status_code == 404


# ==================== Strings ====================

def _override_crowdin(token_service=None):
    app.dependency_overrides[get_token_service] = lambda: token_service or FakeTokenService()
    app.dependency_overrides[get_strings_client_factory] = lambda: FakeStringsClient


def test_get_string_returns_crowdin_data(client, installed_event, make_jwt):
    client.post("/events/installed", json=installed_event)
    _override_crowdin()

    response = client.get("/api/strings/10", params={"jwtToken": make_jwt(), "projectId": 9})

    assert response.status_code == 200
    assert response.json()["fields"] == {"widthpx": 120}
    assert FakeStringsClient.requests == [("access-token", "acme", 9, 10)]


def test_get_string_defaults_to_project_from_token(client, installed_event, make_jwt):
    client.post("/events/installed", json=installed_event)
    _override_crowdin()

    client.get("/api/strings/10", headers={"Authorization": f"Bearer {make_jwt()}"})

    assert FakeStringsClient.requests[0][2] == 7


def test_get_string_requires_credential(client):
    assert client.get("/api/strings/10").status_code == 401


def test_get_string_rejects_non_numeric_id(client, installed_event, make_jwt):
    client.post("/events/installed", json=installed_event)
    _override_crowdin()

    response = client.get("/api/strings/abc", params={"jwtToken": make_jwt()})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid string ID provided."


def test_get_string_unknown_organization(client, make_jwt):
    _override_crowdin()

    response = client.get("/api/strings/10", params={"jwtToken": make_jwt()})

    assert response.status_code == 404
    assert response.json()["detail"] == "Organization not found."


def test_get_string_not_found_is_bad_request(client, installed_event, make_jwt):
    client.post("/events/installed", json=installed_event)
    _override_crowdin()
    FakeStringsClient.error = StringNotFoundError("String not found")

    response = client.get("/api/strings/10", params={"jwtToken": make_jwt()})

    assert response.status_code == 400
    assert response.json()["detail"] == "String not found"


def test_get_string_token_refresh_failure_is_bad_request(client, installed_event, make_jwt):
    client.post("/events/installed", json=installed_event)
    _override_crowdin(FakeTokenService(TokenRefreshError("Failed to refresh Crowdin token")))

    response = client.get("/api/strings/10", params={"jwtToken": make_jwt()})

    assert response.status_code == 400


def test_get_string_unexpected_failure_is_server_error(client, installed_event, make_jwt):
    client.post("/events/installed", json=installed_event)
    _override_crowdin()
    FakeStringsClient.error = RuntimeError("Crowdin API returned 503")

    response = client.get("/api/strings/10", params={"jwtToken": make_jwt()})

    assert response.status_code == 500
    assert response.json()["detail"] == "Crowdin API returned 503"
