import os
import logging
from typing import Any, Optional

import requests
from dotenv import load_dotenv

from ..db.utils import dt_iso, from_epoch_ms
from ..models.win_record import WinRecord

logger = logging.getLogger(__name__)

# Ensure environment variables from .env are loaded when this module is imported.
load_dotenv()


def open_session(token: Optional[str] = None) -> requests.Session:
    """Open a requests session for the ledger service.

    Parameters
    ----------
    token : Optional[str]
        Bearer token. Falls back to ``LEDGER_API_TOKEN``; when neither is set
        the session is unauthenticated.

    Returns
    -------
    requests.Session
        Session with JSON headers (and ``Authorization`` when a token exists).
    """
    session = requests.Session()
    session.headers.update(
        {"Accept": "application/json", "Content-Type": "application/json"}
    )
    token = token or os.environ.get("LEDGER_API_TOKEN")
    if token:
        session.headers["Authorization"] = f"Bearer {token}"
        # Never log the token value
        logger.debug("Ledger session opened with bearer authentication")
    else:
        logger.debug("Ledger session opened without authentication")
    return session


def build_win_payload(record: WinRecord) -> dict[str, Any]:
    """Return the JSON body reported to the ledger for ``record``."""
    payload = record.to_dict()
    payload["createdAt"] = dt_iso(from_epoch_ms(record.timestamp))
    return payload


def is_acknowledged(body: Any) -> bool:
    """Interpret a ledger response body as acceptance or rejection.

    An empty body or any object that does not explicitly report failure
    counts as accepted.
    """
    if body is None:
        return True
    if isinstance(body, dict):
        if body.get("success") is False:
            return False
        if str(body.get("status", "")).lower() == "error":
            return False
    return True
