import os
import logging
from urllib.parse import urljoin
from dotenv import load_dotenv
from requests import RequestException
from .utils import open_session, build_win_payload, is_acknowledged
from ..models.win_record import WinRecord
from typing import Any, Optional, Mapping

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = "/api/v1/wins"


class LedgerClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        log_path: Optional[str] = None,
        token: Optional[str] = None,
        timeout: int = 15,
    ):
        load_dotenv()
        url = base_url or os.getenv("LEDGER_BASE_URL")
        if not url:
            raise ValueError("Environment variable 'LEDGER_BASE_URL' is not set")

        self.base_url = url.rstrip("/")
        self.log_path = log_path or os.getenv("LEDGER_LOG_PATH", DEFAULT_LOG_PATH)
        self.session = open_session(token)
        self.timeout = timeout

    # -------- core request --------
    def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        url = urljoin(self.base_url + "/", path.lstrip("/"))
        r = self.session.request(
            method=method.upper(),
            url=url,
            headers=headers,
            params=params,
            json=json,
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json() if r.content else None

    # -------- API callers --------
    def log_win(self, record: WinRecord) -> bool:
        """
        Report a win to the ledger.

        Returns True only when the ledger confirms acceptance. Transport and
        HTTP errors, as well as unreadable response bodies, yield False.
        """
        try:
            body = self._request("POST", self.log_path, json=build_win_payload(record))
        except (RequestException, ValueError) as e:
            logger.warning(f"Ledger rejected win {record.id}: {e}")
            return False
        accepted = is_acknowledged(body)
        if not accepted:
            logger.warning(f"Ledger reported failure for win {record.id}")
        return accepted

    def close(self) -> None:
        self.session.close()
