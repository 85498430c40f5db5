"""Tests for feedback submission across the log store and the spreadsheet mirror."""
import pytest

from app.models.feedback import Feedback
from app.services import feedback as feedback_service
from app.services.feedback import mirror_lag, resync_mirror, submit_feedback
from app.services.feedback_mirror import FeedbackMirror
from app.utils.base import PersistenceError, ValidationError
from app.utils.config import settings
from tests.conftest import bearer


VALID = {"name": "Ann", "email": "ann@x.com", "rating": 5, "message": "Lovely products"}


class BrokenMirror:
    def append(self, row):
        raise OSError("disk full")


class TestSubmitRoute:
    def test_valid_submission_reaches_both_targets(self, client, mirror_path):
        response = client.post("/api/feedback", json=VALID)
        assert response.status_code == 200
        assert response.json()["success"] is True

        entry = Feedback.objects.get()
        assert entry.rating == 5
        assert entry.mirror_status == "synced"
        assert entry.mirrored_at is not None

        rows = FeedbackMirror(mirror_path).read_rows()
        assert [(r["Name"], r["Email"], r["Rating"], r["Message"]) for r in rows] == [
            ("Ann", "ann@x.com", 5, "Lovely products"),
        ]

    def test_rating_out_of_range_writes_nothing(self, client, mirror_path):
        response = client.post("/api/feedback", json={**VALID, "name": "A", "rating": 6, "message": "hello"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "Rating must be between 1 and 5" in body["message"]
        assert Feedback.objects.count() == 0
        assert not mirror_path.exists()

    def test_all_violations_in_one_message(self, client):
        response = client.post("/api/feedback", json={"name": "", "email": "x", "rating": "ten", "message": "hi"})
        assert response.status_code == 400
        assert response.json()["message"] == (
            "Name must be at least 2 characters, Valid email is required, "
            "Rating must be between 1 and 5, Message must be at least 5 characters"
        )

    def test_values_are_trimmed_and_rating_coerced(self, client, mirror_path):
        payload = {"name": "  Ann  ", "email": " ann@x.com ", "rating": "4", "message": "  Nice work!  "}
        assert client.post("/api/feedback", json=payload).status_code == 200
        entry = Feedback.objects.get()
        assert (entry.name, entry.email, entry.rating, entry.message) == ("Ann", "ann@x.com", 4, "Nice work!")

    def test_same_email_may_submit_twice(self, client, mirror_path):
        assert client.post("/api/feedback", json=VALID).status_code == 200
        assert client.post("/api/feedback", json=VALID).status_code == 200
        assert Feedback.objects.count() == 2
        assert len(FeedbackMirror(mirror_path).read_rows()) == 2

    def test_sequential_submissions_add_one_row_each(self, client, mirror_path):
        mirror = FeedbackMirror(mirror_path)
        for i in range(3):
            client.post("/api/feedback", json={**VALID, "email": f"u{i}@x.com"})
            assert len(mirror.read_rows()) == i + 1


class TestFeedbackAuth:
    def test_token_required_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "feedback_requires_auth", True)
        response = client.post("/api/feedback", json=VALID)
        assert response.status_code == 401
        assert Feedback.objects.count() == 0

    def test_token_accepted_when_configured(self, client, signed_up, monkeypatch):
        monkeypatch.setattr(settings, "feedback_requires_auth", True)
        token, _ = signed_up
        response = client.post("/api/feedback", json=VALID, headers=bearer(token))
        assert response.status_code == 200

    def test_bad_token_rejected_even_when_optional(self, client):
        response = client.post("/api/feedback", json=VALID, headers=bearer("garbage"))
        assert response.status_code == 401


class TestMirrorFailure:
    def test_mirror_failure_is_server_error_and_tracked(self, client, monkeypatch, mirror_path):
        monkeypatch.setattr(feedback_service, "get_mirror", lambda: BrokenMirror())
        response = client.post("/api/feedback", json=VALID)
        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Server error: Unable to save feedback. Please try again later.",
        }

        # The store write is kept, flagged as not mirrored
        entry = Feedback.objects.get()
        assert entry.mirror_status == "failed"
        assert client.get("/api/stats/feedbackMirrorLag").json() == {"success": True, "pending": 1}

    def test_resync_repairs_drift(self, monkeypatch, mirror_path):
        original = feedback_service.get_mirror
        monkeypatch.setattr(feedback_service, "get_mirror", lambda: BrokenMirror())
        for i in range(2):
            with pytest.raises(PersistenceError):
                submit_feedback("Ann", f"a{i}@x.com", 3, "Pretty good")
        assert mirror_lag() == 2

        monkeypatch.setattr(feedback_service, "get_mirror", original)
        assert resync_mirror() == 2
        assert mirror_lag() == 0
        assert resync_mirror() == 0
        rows = FeedbackMirror(mirror_path).read_rows()
        assert [r["Email"] for r in rows] == ["a0@x.com", "a1@x.com"]

    def test_resync_limit(self, monkeypatch, mirror_path):
        original = feedback_service.get_mirror
        monkeypatch.setattr(feedback_service, "get_mirror", lambda: BrokenMirror())
        for i in range(3):
            with pytest.raises(PersistenceError):
                submit_feedback("Ann", f"a{i}@x.com", 3, "Pretty good")
        monkeypatch.setattr(feedback_service, "get_mirror", original)

        assert resync_mirror(limit=0) == 0
        assert mirror_lag() == 3
        assert not mirror_path.exists()

        assert resync_mirror(limit=2) == 2
        assert mirror_lag() == 1
        assert [r["Email"] for r in FeedbackMirror(mirror_path).read_rows()] == ["a0@x.com", "a1@x.com"]

    def test_store_failure_skips_mirror(self, monkeypatch, mirror_path):
        from pymongo.errors import ServerSelectionTimeoutError

        def unavailable(self, *args, **kwargs):
            raise ServerSelectionTimeoutError("no servers")

        monkeypatch.setattr(Feedback, "save", unavailable)
        with pytest.raises(PersistenceError):
            submit_feedback(**VALID)
        assert not mirror_path.exists()


class TestMirrorOnlyVariant:
    def test_store_disabled_writes_only_mirror(self, monkeypatch, mirror_path):
        monkeypatch.setattr(settings, "feedback_store_enabled", False)
        entry = submit_feedback(**VALID)
        assert entry.id is None
        assert Feedback.objects.count() == 0
        assert len(FeedbackMirror(mirror_path).read_rows()) == 1

    def test_validation_still_applies(self, monkeypatch, mirror_path):
        monkeypatch.setattr(settings, "feedback_store_enabled", False)
        with pytest.raises(ValidationError) as exc:
            submit_feedback("Ann", "ann@x.com", 0, "Lovely products")
        assert exc.value.errors == ["Rating must be between 1 and 5"]
        assert not mirror_path.exists()
