import json
from typing import Any, Dict, List, Optional

from requests.structures import CaseInsensitiveDict


class FakeResponse:
    def __init__(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self.text = body if isinstance(body, str) else json.dumps(body)


class FakeSession:
    """Stands in for requests.Session, replaying canned responses in order."""

    def __init__(self, responses: List[Any]) -> None:
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, params=None, json=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": params,
                "json": json,
                "timeout": timeout,
                "headers": dict(self.headers),
            }
        )
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def close(self) -> None:
        self.closed = True

    def last_call(self) -> Optional[Dict[str, Any]]:
        return self.calls[-1] if self.calls else None
