import time
import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from plagiarism_client.config import Settings
from plagiarism_client.models.schemas import (
    DetectionResult, PdfRequest, RewriteMode, RewriteRequest, RewriteResult, Task,
)
from plagiarism_client.utils.errors import (
    NotFoundError, ServiceError, TransportError, ValidationError,
)
from plagiarism_client.utils.file_types import PdfDocument, WordDocument

logger = logging.getLogger(__name__)


class BackendGateway:
    """
    Typed async operations over the analysis service.

    Every call is one request/response round trip: no retry, no caching.
    Use as an async context manager, or pass a ready ``httpx.AsyncClient``.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or Settings.from_env()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.settings.api_url,
            timeout=self.settings.timeout,
        )

    async def __aenter__(self) -> "BackendGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def submit_text(self, text: str, sources: Optional[List[str]] = None) -> Task:
        form: dict = {"text": text}
        if sources:
            form["sources"] = list(sources)
        response = await self._send("POST", "/check-text", data=form)
        return self._parse(Task, response)

    async def submit_file(self, file: "PdfDocument | WordDocument") -> Task:
        files = {"file": (file.name, file.data, file.content_type)}
        response = await self._send("POST", "/upload-file", files=files)
        return self._parse(Task, response)

    async def fetch_result(self, task_id: str) -> DetectionResult:
        response = await self._send("GET", f"/results/{task_id}")
        return self._parse(DetectionResult, response)

    async def fetch_report(self, task_id: str) -> bytes:
        response = await self._send("GET", f"/download-report/{task_id}")
        return response.content

    async def rewrite(self, text: str, mode: "RewriteMode | str" = RewriteMode.ACADEMIC) -> RewriteResult:
        try:
            request = RewriteRequest(text=text, mode=mode)
        except PydanticValidationError as e:
            raise ValidationError("Invalid rewrite request.", detail=_field_errors(e)) from e
        response = await self._send("POST", "/rewrite", json=request.model_dump(mode="json"))
        return self._parse(RewriteResult, response)

    async def render_pdf(self, text: str) -> bytes:
        request = PdfRequest(text=text)
        response = await self._send("POST", "/generate-pdf", json=request.model_dump())
        return response.content

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        start_time = time.time()
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"Could not reach the analysis service: {e}") from e

        elapsed_time = time.time() - start_time
        logger.info(f"{method} {path} -> {response.status_code} ({elapsed_time:.2f}s)")

        if response.is_success:
            return response

        detail = _response_detail(response)
        if response.status_code == 404:
            raise NotFoundError(_detail_message(detail, "Task not found"), detail=detail)
        if response.status_code in (400, 422):
            raise ValidationError(_detail_message(detail, "Request rejected"), detail=detail)
        raise ServiceError(
            _detail_message(detail, f"Service returned HTTP {response.status_code}"),
            detail=detail,
        )

    def _parse(self, model: type, response: httpx.Response) -> Any:
        try:
            return model.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Unexpected response shape for {model.__name__}: {e}")
            raise ServiceError(f"Malformed {model.__name__} response from the analysis service.") from e


def _response_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict) and "detail" in body:
        return body["detail"]
    return body


def _detail_message(detail: Any, default: str) -> str:
    if isinstance(detail, str) and detail:
        return detail
    return default


def _field_errors(error: PydanticValidationError) -> List[dict]:
    return [{"loc": list(e["loc"]), "msg": e["msg"]} for e in error.errors()]
