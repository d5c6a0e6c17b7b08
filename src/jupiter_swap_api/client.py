import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import requests

from .config import ClientConfig
from .errors import ApiError, DecodeError
from .http_client import HttpClient, join_url
from .quote import QuoteRequest, QuoteResponse
from .swap import SwapInstructionsResponse, SwapRequest, SwapResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SwapApiClient:
    """Client for the /quote, /swap and /swap-instructions endpoints.

    Holds nothing but its immutable configuration and a pooled session, so one
    instance can serve concurrent callers.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        # Auth and timeout always come from config, whatever session is supplied.
        self.http = HttpClient(
            user_agent=config.user_agent,
            api_key=config.api_key,
            timeout=config.timeout,
            session=session,
        )

    @classmethod
    def new(cls, base_url: str) -> "SwapApiClient":
        return cls(ClientConfig(base_url=base_url))

    @classmethod
    def with_api_key(cls, base_url: str, api_key: str) -> "SwapApiClient":
        return cls(ClientConfig(base_url=base_url, api_key=api_key))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SwapApiClient":
        return cls(ClientConfig.from_env(environ))

    def quote(self, request: QuoteRequest, timeout: Optional[float] = None) -> QuoteResponse:
        return self._execute(
            "GET",
            "quote",
            QuoteResponse.from_dict,
            params=request.to_query(),
            timeout=timeout,
        )

    def swap(
        self,
        request: SwapRequest,
        extra_args: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> SwapResponse:
        return self._execute(
            "POST",
            "swap",
            SwapResponse.from_dict,
            params=dict(extra_args) if extra_args else None,
            payload=request.to_payload(),
            timeout=timeout,
        )

    def swap_instructions(self, request: SwapRequest, timeout: Optional[float] = None) -> SwapInstructionsResponse:
        return self._execute(
            "POST",
            "swap-instructions",
            SwapInstructionsResponse.from_dict,
            payload=request.to_payload(),
            timeout=timeout,
        )

    def _execute(
        self,
        method: str,
        path: str,
        decode: Callable[[Dict[str, Any]], T],
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> T:
        url = join_url(self.config.base_url, path)
        response = self.http.send(method, url, params=params, payload=payload, timeout=timeout)

        if response.status != 200:
            logger.warning("%s %s returned status %s", method, url, response.status)
            raise ApiError(
                f"{method} /{path} returned non-200 status",
                http_status=response.status,
                body=response.text,
            )

        try:
            data = json.loads(response.text)
        except ValueError as exc:
            raise DecodeError(
                f"{method} /{path} response was not valid JSON",
                http_status=response.status,
                body=response.text,
                cause=exc,
            ) from exc

        if not isinstance(data, dict):
            raise DecodeError(
                f"{method} /{path} response was not a JSON object",
                http_status=response.status,
                body=response.text,
            )

        try:
            return decode(data)
        except (ValueError, TypeError, KeyError) as exc:
            raise DecodeError(
                f"{method} /{path} response did not match the expected shape",
                http_status=response.status,
                body=response.text,
                cause=exc,
            ) from exc

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "SwapApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
