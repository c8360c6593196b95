"""
Client for the external announcement PDF service.

The service takes a JSON description of an announcement and answers with
``{"data": <artifact reference>, "msg": <text>}``. Rendering happens entirely
on its side.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from outage_admin.schemas.outage import PdfRequestIn

logger = logging.getLogger(__name__)


class PdfGenerationError(Exception):
    """Raised when the PDF service is unreachable or answers with a non-2xx status."""

    pass


def generate_pdf(payload: PdfRequestIn, service_url: str | None, timeout: float = 30.0) -> dict[str, Any]:
    if not service_url:
        raise PdfGenerationError("PDF service URL is not configured")

    body = payload.model_dump(by_alias=True)
    try:
        response = requests.post(service_url, json=body, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("PDF service request failed: %s", type(exc).__name__)
        raise PdfGenerationError("PDF service unavailable") from exc

    if not 200 <= response.status_code < 300:
        logger.warning("PDF service returned status=%s", response.status_code)
        raise PdfGenerationError(f"HTTP error! status: {response.status_code}")

    try:
        result = response.json()
    except ValueError as exc:
        raise PdfGenerationError("PDF service returned invalid JSON") from exc

    return {"data": result.get("data"), "message": result.get("msg")}
