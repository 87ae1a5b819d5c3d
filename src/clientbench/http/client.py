"""
HTTP Client

Minimal async HTTP capability used by benchmark actions and the report sink.
Requests are sent with aiohttp; the client session is created lazily in the
running event loop so each action can run in its own loop.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import aiohttp

from clientbench.core.exceptions import StatusCodeError, TransportError
from clientbench.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Response:
    """A completed HTTP exchange."""
    method: str
    url: str
    status_code: int
    reason: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def error_for_status_code(self) -> None:
        """
        Raise if the status code does not denote success.

        Raises:
            StatusCodeError: If the status is outside the 2xx range
        """
        if self.is_success:
            return
        kind = "client" if 400 <= self.status_code < 500 else "server"
        if self.status_code < 400:
            kind = "unexpected"
        status = f"{self.status_code} {self.reason}".strip()
        raise StatusCodeError(
            f"{kind} error: status code {status} for {self.method} {self.url}",
            status_code=self.status_code,
            response_body=self.body,
        )

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


class HttpClient:
    """HTTP client bound to a single base URL."""

    def __init__(self, base_url: str, timeout_seconds: Optional[float] = None,
                 headers: Optional[Dict[str, str]] = None):
        """
        Initialize the HTTP client.

        Args:
            base_url: Base URL every request path is joined to
            timeout_seconds: Optional total timeout applied by aiohttp
            headers: Default headers sent with every request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.headers = dict(headers or {})
        self.session: Optional[aiohttp.ClientSession] = None

    def __repr__(self) -> str:
        return f"HttpClient({self.base_url!r})"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure an aiohttp session exists for the running loop."""
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self.session = aiohttp.ClientSession(timeout=timeout, headers=self.headers)
        return self.session

    def url_for(self, path: str) -> str:
        if not path:
            return self.base_url
        return f"{self.base_url}/{path.lstrip('/')}"

    async def send(self, method: str, path: str,
                   headers: Optional[Dict[str, str]] = None,
                   params: Optional[Dict[str, Any]] = None,
                   body: Any = None) -> Response:
        """
        Send an HTTP request.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            headers: Extra request headers
            params: Query string parameters
            body: Mapping/list (sent as JSON), str or bytes

        Returns:
            Response for any completed exchange, whatever its status code

        Raises:
            TransportError: If the exchange could not be completed
        """
        method = method.upper()
        url = self.url_for(path)
        request_headers = dict(headers or {})

        data = None
        if isinstance(body, (dict, list)):
            data = json.dumps(body)
            request_headers.setdefault("Content-Type", "application/json")
        elif body is not None:
            data = body

        session = await self._ensure_session()
        try:
            async with session.request(method, url, headers=request_headers,
                                       params=params, data=data) as response:
                text = await response.text(errors="replace")
                logger.debug(f"{method} {url} -> {response.status}")
                return Response(
                    method=method,
                    url=url,
                    status_code=response.status,
                    reason=response.reason or "",
                    headers=dict(response.headers),
                    body=text,
                )
        except aiohttp.ClientError as e:
            raise TransportError(f"error sending request for {method} {url}: {e}",
                                 method=method, url=url) from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"request timed out for {method} {url}",
                                 method=method, url=url) from e

    async def close(self) -> None:
        """Close the underlying session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None
