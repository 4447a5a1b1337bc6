"""Route matching and dispatch of the in-process router."""

import time

import pytest

from core.exceptions import LMSError, RouteNotFoundError
from utils.client_storage import ClientStorage
from utils.request_router import RequestRouter


class TestUnknownRoutes:
    def test_unknown_path(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/unknown")
        assert exc.value.code == "NotFound"
        assert exc.value.status_code == 404
        assert exc.value.message == "Endpoint not found: GET /api/unknown"

    def test_unsupported_method(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses", method="DELETE")
        assert exc.value.code == "NotFound"
        assert exc.value.message == "Endpoint not found: DELETE /api/courses"

    def test_extra_segment(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses/course1/students")
        assert exc.value.code == "NotFound"


class TestResolve:
    def test_static_paths_win_over_identifiers(self, router):
        route, params = router.resolve("GET", "/api/courses/available")
        assert route.pattern == "/api/courses/available"
        assert params == {}

    def test_identifier_is_captured(self, router):
        route, params = router.resolve("patch", "/api/users/student1/status")
        assert route.pattern == "/api/users/{user_id}/status"
        assert params == {"user_id": "student1"}

    def test_nested_identifiers(self, router):
        _, params = router.resolve("DELETE", "/api/assignments/a1/submissions/s1")
        assert params == {"assignment_id": "a1", "submission_id": "s1"}

    def test_no_match(self, router):
        with pytest.raises(RouteNotFoundError):
            router.resolve("GET", "/api/courses/course1/students")


class TestFetch:
    def test_query_string_is_parsed(self, router):
        assignments = router.fetch("/api/assignments?course=course2")["data"]
        assert [a["_id"] for a in assignments] == ["assignment2"]

    def test_json_string_body(self, router):
        response = router.fetch(
            "/api/auth/login",
            method="POST",
            body='{"email": "admin@university.edu", "password": "password123", "role": "admin"}',
        )
        assert response["user"]["role"] == "admin"

    @pytest.mark.parametrize("body", ["{not json", "[1, 2]", "\"admin\""])
    def test_body_that_is_not_a_json_object(self, client, body):
        with pytest.raises(LMSError) as exc:
            client.fetch("/api/courses", method="POST", body=body)
        assert exc.value.code == "Validation"
        assert exc.value.status_code == 400

    def test_invalid_query_integer(self, router):
        with pytest.raises(LMSError) as exc:
            router.fetch("/api/courses?page=two")
        assert exc.value.code == "Validation"
        assert exc.value.message == (
            "query.page: Input should be a valid integer, unable to parse string as an integer"
        )

    def test_stored_user_without_token_identifies_the_session(self, store):
        storage = ClientStorage()
        storage.set("user", {"id": "student1"})
        router = RequestRouter(store=store, storage=storage, latency_ms=0)
        ids = [e["_id"] for e in router.fetch("/api/enrollments/student/me")["data"]]
        assert ids == ["enrollment1", "enrollment2"]

    def test_simulated_latency(self, store, monkeypatch):
        delays = []
        monkeypatch.setattr(time, "sleep", delays.append)
        router = RequestRouter(store=store, latency_ms=250)
        router.fetch("/api/dashboard/counts")
        assert delays == [0.25]


class TestFetchFirst:
    def test_falls_back_past_missing_endpoints(self, client):
        response = client.fetch_first(["/api/legacy/courses", "/api/courses/available"])
        assert len(response["data"]) == 5

    def test_raises_the_last_not_found(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch_first(["/api/legacy/courses", "/api/old/courses"])
        assert exc.value.code == "NotFound"
        assert "/api/old/courses" in exc.value.message

    def test_other_failures_stop_the_fallback(self, client):
        with pytest.raises(LMSError) as exc:
            client.fetch_first(["/api/auth/me", "/api/courses"])
        assert exc.value.code == "NotAuthenticated"


class TestClientStorage:
    def test_session_survives_a_new_storage(self, tmp_path, router):
        path = tmp_path / "session.json"
        router.storage = ClientStorage(path)
        router.login("student@university.edu", "password123", "student")

        restored = ClientStorage(path)
        assert restored.token == router.storage.token
        assert restored.user["id"] == "student1"

    def test_clear(self, tmp_path):
        storage = ClientStorage(tmp_path / "session.json")
        storage.save_session("token-value", {"id": "student1"})
        storage.clear()
        assert ClientStorage(tmp_path / "session.json").token is None
