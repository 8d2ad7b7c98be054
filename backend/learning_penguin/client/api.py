"""HTTP client for the Learning Penguin REST API."""

import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger("penguin.client")

DEFAULT_API_URL = "http://localhost:3000"


class ApiError(Exception):
    """Non-success HTTP response; `text` is the raw body the server sent."""

    def __init__(self, status_code: int, text: str):
        super().__init__(f"{status_code}: {text}")
        self.status_code = status_code
        self.text = text


def _jsonable(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v.isoformat() if isinstance(v, datetime) else v for k, v in payload.items()}


class PenguinClient:
    """Thin wrapper over the file and event endpoints.

    Pass `http` to reuse an existing `httpx.Client` (for example FastAPI's
    TestClient); otherwise one is created for `base_url`, which defaults
    to the `PENGUIN_API_URL` environment variable.
    """

    def __init__(self, base_url: Optional[str] = None, http: Optional[httpx.Client] = None, timeout: float = 30.0):
        self._owns_http = http is None
        if http is None:
            http = httpx.Client(base_url=base_url or os.getenv("PENGUIN_API_URL", DEFAULT_API_URL), timeout=timeout)
        self.http = http

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self.http.request(method, path, **kwargs)
        if response.status_code >= 400:
            raise ApiError(response.status_code, response.text)
        return response

    def list_pdfs(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/pdfs").json()

    def upload_pdf(self, filename: str, content: bytes, content_type: str = "application/pdf") -> str:
        files = {"pdfFile": (filename, content, content_type)}
        return self._request("POST", "/upload", files=files).text

    def delete_pdf(self, file_id: int) -> str:
        return self._request("DELETE", f"/pdfs/{file_id}/delete").text

    def clear_pdfs(self) -> Dict[str, Any]:
        return self._request("DELETE", "/pdfs/clear").json()

    def list_events(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/events").json()

    def create_event(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/events", json=_jsonable(fields)).json()

    def update_event(self, event_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/events/{event_id}", json=_jsonable(fields)).json()

    def delete_event(self, event_id: int) -> str:
        return self._request("DELETE", f"/events/{event_id}").text
