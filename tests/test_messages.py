"""Unit tests for recruiter-to-applicant messages."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.core.errors import NotFoundError, ValidationError
from app.models.cv import CV
from app.models.message import Message


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

CV_ID = str(uuid4())
MESSAGE_ID = str(uuid4())


def _chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining."""
    m = MagicMock()
    for method in (
        "select", "insert", "upsert", "update", "delete", "eq", "limit",
        "in_", "order",
    ):
        getattr(m, method).return_value = m
    m.count = None
    return m


def _message_row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": MESSAGE_ID,
        "cv_id": CV_ID,
        "message": "Your interview is confirmed",
        "read": False,
        "created_at": "2024-06-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class TestSendMessage:

    @patch("app.services.messages.get_supabase")
    @patch("app.services.messages.get_cv")
    def test_inserts_unread_trimmed_message(
        self, mock_get_cv: MagicMock, mock_get_supabase: MagicMock
    ) -> None:
        mock_sb = MagicMock()
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(data=[_message_row()])
        mock_sb.table.return_value = table
        mock_get_supabase.return_value = mock_sb

        from app.services.messages import send_message

        message = send_message(CV_ID, "  Your interview is confirmed \n")

        table.insert.assert_called_once_with(
            {"cv_id": CV_ID, "message": "Your interview is confirmed", "read": False}
        )
        assert message.read is False
        mock_get_cv.assert_called_once_with(CV_ID)

    @patch("app.services.messages.get_supabase")
    @patch("app.services.messages.get_cv")
    def test_blank_message_rejected(
        self, mock_get_cv: MagicMock, mock_get_supabase: MagicMock
    ) -> None:
        from app.services.messages import send_message

        with pytest.raises(ValidationError):
            send_message(CV_ID, "   ")
        mock_get_cv.assert_not_called()
        mock_get_supabase.assert_not_called()

    @patch("app.services.messages.get_supabase")
    @patch("app.services.messages.get_cv")
    def test_unknown_cv_propagates_not_found(
        self, mock_get_cv: MagicMock, mock_get_supabase: MagicMock
    ) -> None:
        mock_get_cv.side_effect = NotFoundError(f"CV not found: {CV_ID}")

        from app.services.messages import send_message

        with pytest.raises(NotFoundError):
            send_message(CV_ID, "Hello")
        mock_get_supabase.assert_not_called()


class TestReadState:

    @patch("app.services.messages.get_supabase")
    def test_mark_read_scoped_to_cv(self, mock_get_supabase: MagicMock) -> None:
        mock_sb = MagicMock()
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(data=[_message_row(read=True)])
        mock_sb.table.return_value = table
        mock_get_supabase.return_value = mock_sb

        from app.services.messages import mark_read

        message = mark_read(MESSAGE_ID, cv_id=CV_ID)

        assert message.read is True
        table.update.assert_called_once_with({"read": True})
        table.eq.assert_any_call("id", MESSAGE_ID)
        table.eq.assert_any_call("cv_id", CV_ID)

    @patch("app.services.messages.get_supabase")
    def test_mark_read_foreign_message_not_found(self, mock_get_supabase: MagicMock) -> None:
        mock_sb = MagicMock()
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(data=[])
        mock_sb.table.return_value = table
        mock_get_supabase.return_value = mock_sb

        from app.services.messages import mark_read

        with pytest.raises(NotFoundError):
            mark_read(MESSAGE_ID, cv_id=str(uuid4()))

    @patch("app.services.messages.get_supabase")
    def test_unread_count_uses_exact_count(self, mock_get_supabase: MagicMock) -> None:
        mock_sb = MagicMock()
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(data=[{"id": "a"}], count=7)
        mock_sb.table.return_value = table
        mock_get_supabase.return_value = mock_sb

        from app.services.messages import unread_count

        assert unread_count(CV_ID) == 7
        table.select.assert_called_once_with("id", count="exact")
        table.eq.assert_any_call("read", False)

    @patch("app.services.messages.get_supabase")
    def test_unread_count_falls_back_to_rows(self, mock_get_supabase: MagicMock) -> None:
        mock_sb = MagicMock()
        table = _chainable_table_mock()
        table.execute.return_value = MagicMock(data=[{"id": "a"}, {"id": "b"}], count=None)
        mock_sb.table.return_value = table
        mock_get_supabase.return_value = mock_sb

        from app.services.messages import unread_count

        assert unread_count(CV_ID) == 2


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


class TestMessageEndpoints:

    @patch("app.routers.cvs.send_message")
    def test_admin_sends_message(
        self, mock_send: MagicMock, test_client: TestClient, as_admin: None
    ) -> None:
        mock_send.return_value = Message(**_message_row())

        response = test_client.post(
            f"/api/v1/cvs/{CV_ID}/messages",
            json={"message": "Your interview is confirmed"},
        )

        assert response.status_code == 201
        assert response.json()["read"] is False

    def test_empty_message_returns_422(
        self, test_client: TestClient, as_admin: None
    ) -> None:
        response = test_client.post(f"/api/v1/cvs/{CV_ID}/messages", json={"message": ""})
        assert response.status_code == 422

    @patch("app.routers.me.unread_count", return_value=3)
    @patch("app.routers.me.get_cv_for_user")
    def test_my_unread_count(
        self,
        mock_get_cv: MagicMock,
        mock_unread: MagicMock,
        test_client: TestClient,
        as_applicant: None,
    ) -> None:
        mock_get_cv.return_value = CV(id=CV_ID, applicant_name="Ana")

        response = test_client.get("/api/v1/me/messages/unread")

        assert response.status_code == 200
        assert response.json() == {"cv_id": CV_ID, "unread": 3}

    @patch("app.routers.me.mark_read")
    @patch("app.routers.me.get_cv_for_user")
    def test_read_my_message(
        self,
        mock_get_cv: MagicMock,
        mock_mark: MagicMock,
        test_client: TestClient,
        as_applicant: None,
    ) -> None:
        mock_get_cv.return_value = CV(id=CV_ID, applicant_name="Ana")
        mock_mark.return_value = Message(**_message_row(read=True))

        response = test_client.patch(f"/api/v1/me/messages/{MESSAGE_ID}/read")

        assert response.status_code == 200
        assert response.json()["read"] is True
        assert str(mock_mark.call_args.kwargs["cv_id"]) == CV_ID

    @patch("app.routers.me.mark_read")
    @patch("app.routers.me.get_cv_for_user")
    def test_read_my_message_database_error_returns_500(
        self,
        mock_get_cv: MagicMock,
        mock_mark: MagicMock,
        test_client: TestClient,
        as_applicant: None,
    ) -> None:
        mock_get_cv.return_value = CV(id=CV_ID, applicant_name="Ana")
        mock_mark.side_effect = Exception("connection reset")

        response = test_client.patch(f"/api/v1/me/messages/{MESSAGE_ID}/read")

        assert response.status_code == 500
        assert "connection reset" in response.json()["detail"]
