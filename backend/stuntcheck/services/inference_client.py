"""
StuntCheck Gateway — Inference Service HTTP Client
====================================================

What:  Concrete InferenceService calling the remote model server.
How:   One httpx.AsyncClient request per call, bounded by
       settings.inference_timeout. Failures are translated into
       InferenceServiceError with the transport detail kept in `context`.
Who:   Singleton `inference_client`, used by PredictionService and the
       diagnostic/health routes.

Endpoints used:
    POST {INFERENCE_BASE_URL}/predict      → prediction
    GET  {INFERENCE_STATUS_URL or base}/   → status probe
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from stuntcheck.config import settings
from stuntcheck.exceptions import InferenceServiceError, InferenceUnavailableError
from stuntcheck.services.inference_base import InferenceService

logger = logging.getLogger(__name__)


class InferenceClient(InferenceService):
    """HTTP adapter for the model server. Holds no per-request state."""

    def __init__(
        self,
        predict_url: Optional[str] = None,
        status_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.predict_url = predict_url or settings.inference_predict_url
        self.status_url = status_url or settings.inference_probe_url
        self.timeout = timeout if timeout is not None else settings.inference_timeout
        # Injected by tests (httpx.MockTransport); None means real network
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def predict(self, features: Dict[str, Any]) -> Any:
        start_time = time.perf_counter()
        try:
            async with self._client() as client:
                response = await client.post(self.predict_url, json=features)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Inference service answered %d: %s",
                e.response.status_code,
                e.response.text[:200],
            )
            raise InferenceServiceError(
                context={"upstream_status": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.error("Error connecting to inference service: %s", str(e))
            raise InferenceServiceError(context={"error_type": type(e).__name__})
        except ValueError as e:
            logger.error("Inference service returned a non-JSON body: %s", str(e))
            raise InferenceServiceError(context={"error_type": "invalid_json"})

        # Any JSON body is passed on; the saved path checks the shape itself
        logger.info(
            "Inference completed in %.0fms: status=%s",
            (time.perf_counter() - start_time) * 1000,
            payload.get("status") if isinstance(payload, dict) else type(payload).__name__,
        )
        return payload

    async def status(self) -> Any:
        try:
            async with self._client() as client:
                response = await client.get(self.status_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Inference status probe failed: %s", str(e))
            raise InferenceUnavailableError(context={"error": str(e) or type(e).__name__})
        try:
            return response.json()
        except ValueError:
            return response.text


# ── Singleton Instance ────────────────────────────────────────────────────
inference_client = InferenceClient()
