import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from .errors import TransportError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


@dataclass(frozen=True)
class HttpResponse:
    status: int
    text: str


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class HttpClient:
    def __init__(
        self,
        user_agent: str,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            # Pooling only; failed exchanges are surfaced, never retried.
            adapter = HTTPAdapter(max_retries=0, pool_connections=4, pool_maxsize=16)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self.session = session
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})
        if api_key is not None:
            self.session.headers[API_KEY_HEADER] = api_key

    def send(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        effective_timeout = self.timeout if timeout is None else timeout
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(method, url, params=params, json=payload, timeout=effective_timeout)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed", cause=exc) from exc
        return HttpResponse(status=response.status_code, text=response.text)

    def close(self) -> None:
        self.session.close()
