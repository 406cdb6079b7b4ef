"""
HTTP client for the MarketLens API
"""

import time
from typing import Callable, List, Optional

import httpx

from marketlens.core.config import settings
from marketlens.models.enums import Platform, SessionStatus
from marketlens.schemas.analysis import AnalysisResult
from marketlens.schemas.session import CleanupResponse, SearchResponse, SessionStatusResponse


TERMINAL_STATUSES = {SessionStatus.COMPLETED, SessionStatus.FAILED}


class APIError(Exception):
    """Transport failure or error response from the API"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def error_message(response: httpx.Response) -> str:
    """Best-effort human readable message from an error response"""
    try:
        payload = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text or response.reason_phrase}"

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error

        detail = payload.get("detail")
        if isinstance(detail, list):
            # FastAPI validation errors
            return "; ".join(
                f"{'.'.join(str(part) for part in item.get('loc', [])[1:])}: {item.get('msg')}" for item in detail
            )
        if detail:
            return str(detail)

    return f"HTTP {response.status_code}"


class MarketLensClient:
    """Thin synchronous wrapper over the REST API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.Client(
            base_url=f"{base_url}{settings.API_V1_STR}",
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": "marketlens-cli"},
        )

    def __enter__(self) -> "MarketLensClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise APIError(f"Could not reach MarketLens API: {e}") from e

        if response.is_error:
            raise APIError(error_message(response), status_code=response.status_code)
        return response.json()

    def search(self, query: str, platforms: List[Platform], session_id: Optional[str] = None) -> SearchResponse:
        payload = {"query": query, "platforms": [Platform(p).value for p in platforms]}
        if session_id:
            payload["session_id"] = session_id
        return SearchResponse.model_validate(self._request("POST", "/search", json=payload))

    def status(self, session_id: str) -> SessionStatusResponse:
        return SessionStatusResponse.model_validate(self._request("GET", f"/sessions/{session_id}/status"))

    def analysis(self, session_id: str) -> AnalysisResult:
        return AnalysisResult.model_validate(self._request("GET", f"/sessions/{session_id}/analysis"))

    def cleanup(self, session_id: str) -> CleanupResponse:
        return CleanupResponse.model_validate(self._request("DELETE", f"/sessions/{session_id}"))

    def wait_for_completion(
        self,
        session_id: str,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
        on_update: Optional[Callable[[SessionStatusResponse], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> SessionStatusResponse:
        """Poll the status endpoint until the session completes or fails"""
        interval = settings.poll_interval if interval is None else interval
        timeout = settings.poll_timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout

        while True:
            status = self.status(session_id)
            if on_update is not None:
                on_update(status)
            if status.status in TERMINAL_STATUSES:
                return status
            if time.monotonic() >= deadline:
                raise APIError(f"Timed out after {timeout:.0f}s waiting for session {session_id}")
            sleep(interval)
