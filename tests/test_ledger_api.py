import os
import unittest
from unittest.mock import patch

import requests

from luckyscratch.ledger.api import LedgerClient
from luckyscratch.ledger.utils import build_win_payload, is_acknowledged, open_session
from luckyscratch.models import WinRecord


RECORD = WinRecord(
    id="ET-168-Q7W2E",
    prize_id="major",
    label="168 Lucky Credit",
    value=168,
    timestamp=1768874400000,
    message="All the way to prosperity!",
)


class DummyResponse:
    def __init__(self, json_data=None, content: bytes = b"", status_error=None):
        self._json = json_data
        if json_data is not None and not content:
            import json as _json

            content = _json.dumps(json_data).encode()
        self.content = content
        self._status_error = status_error

    def json(self):
        return self._json

    def raise_for_status(self):
        if self._status_error is not None:
            raise self._status_error


class DummySession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.headers = {}
        self.closed = False

    def request(self, method, url, headers=None, params=None, json=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "params": params,
                "json": json,
                "timeout": timeout,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


class TestLedgerClient(unittest.TestCase):
    @patch("luckyscratch.ledger.api.open_session")
    @patch("luckyscratch.ledger.api.load_dotenv")
    def test_requires_base_url(self, mock_load_dotenv, mock_open_session):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValueError):
                LedgerClient()
        mock_open_session.assert_not_called()

    @patch("luckyscratch.ledger.api.open_session")
    def test_init_reads_environment(self, mock_open_session):
        mock_open_session.return_value = DummySession()
        env = {
            "LEDGER_BASE_URL": "https://ledger.example.com/",
            "LEDGER_LOG_PATH": "/exec",
        }
        with patch.dict(os.environ, env, clear=True):
            client = LedgerClient()
        self.assertEqual(client.base_url, "https://ledger.example.com")
        self.assertEqual(client.log_path, "/exec")

    @patch("luckyscratch.ledger.api.open_session")
    def test_log_win_posts_record(self, mock_open_session):
        session = DummySession(DummyResponse(json_data={"success": True}))
        mock_open_session.return_value = session
        client = LedgerClient(base_url="https://host", log_path="/api/v1/wins")

        self.assertTrue(client.log_win(RECORD))
        call = session.calls[0]
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], "https://host/api/v1/wins")
        self.assertEqual(call["json"]["id"], "ET-168-Q7W2E")
        self.assertEqual(call["json"]["createdAt"], "2026-01-20T02:00:00+00:00")
        self.assertEqual(call["timeout"], 15)

    @patch("luckyscratch.ledger.api.open_session")
    def test_log_win_empty_body_is_accepted(self, mock_open_session):
        mock_open_session.return_value = DummySession(DummyResponse())
        client = LedgerClient(base_url="https://host")
        self.assertTrue(client.log_win(RECORD))

    @patch("luckyscratch.ledger.api.open_session")
    def test_log_win_reported_failure(self, mock_open_session):
        mock_open_session.return_value = DummySession(
            DummyResponse(json_data={"status": "error", "message": "duplicate"})
        )
        client = LedgerClient(base_url="https://host")
        with self.assertLogs("luckyscratch.ledger.api", level="WARNING"):
            self.assertFalse(client.log_win(RECORD))

    @patch("luckyscratch.ledger.api.open_session")
    def test_log_win_http_error(self, mock_open_session):
        error = requests.HTTPError("502 Bad Gateway")
        mock_open_session.return_value = DummySession(DummyResponse(status_error=error))
        client = LedgerClient(base_url="https://host")
        with self.assertLogs("luckyscratch.ledger.api", level="WARNING"):
            self.assertFalse(client.log_win(RECORD))

    @patch("luckyscratch.ledger.api.open_session")
    def test_log_win_network_error(self, mock_open_session):
        mock_open_session.return_value = DummySession(
            error=requests.ConnectionError("unreachable")
        )
        client = LedgerClient(base_url="https://host")
        with self.assertLogs("luckyscratch.ledger.api", level="WARNING"):
            self.assertFalse(client.log_win(RECORD))

    @patch("luckyscratch.ledger.api.open_session")
    def test_close_closes_session(self, mock_open_session):
        session = DummySession()
        mock_open_session.return_value = session
        LedgerClient(base_url="https://host").close()
        self.assertTrue(session.closed)


class TestLedgerUtils(unittest.TestCase):
    def test_open_session_with_token(self):
        with patch.dict(os.environ, {"LEDGER_API_TOKEN": "secret"}, clear=True):
            session = open_session()
        self.assertEqual(session.headers["Authorization"], "Bearer secret")
        self.assertEqual(session.headers["Accept"], "application/json")
        session.close()

    def test_open_session_without_token(self):
        with patch.dict(os.environ, {}, clear=True):
            session = open_session()
        self.assertNotIn("Authorization", session.headers)
        session.close()

    def test_payload_contains_record_fields(self):
        payload = build_win_payload(RECORD)
        self.assertEqual(payload["prizeId"], "major")
        self.assertEqual(payload["value"], 168)
        self.assertFalse(payload["synced"])

    def test_is_acknowledged(self):
        self.assertTrue(is_acknowledged(None))
        self.assertTrue(is_acknowledged({"status": "ok"}))
        self.assertTrue(is_acknowledged([]))
        self.assertFalse(is_acknowledged({"success": False}))
        self.assertFalse(is_acknowledged({"status": "ERROR"}))


if __name__ == "__main__":
    unittest.main()
