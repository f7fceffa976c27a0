"""
Notes Gateway — Shared HTTP Backend Client
===========================================

What:  Common request/response handling for the httpx-based backend clients.
How:   One `httpx.AsyncClient` per backend (created in connections.py) with a
       base URL and timeout. Every call goes through `_post()`, which times
       the call, logs it, and maps every failure to BackendError.
Who:   Subclassed by HttpRecordService and HttpSearchService.

Failure mapping:
    httpx.TimeoutException   → BackendError("... did not answer in time")
    other httpx.HTTPError    → BackendError("... could not be reached")
    non-2xx status           → BackendError(context={"status": ...})
    unparseable body         → BackendError(context={"error_type": ...})

No retries: a failed call fails the operation. asyncio.CancelledError is
not an httpx error and propagates to the caller untouched.
"""

import logging
import time
from typing import Any, Dict, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gateway.exceptions import BackendError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class HttpServiceClient:
    """Base for clients that talk JSON over HTTP to one backend service."""

    # Used in log lines and in BackendError.service
    service_name = "backend"

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _post(
        self,
        path: str,
        payload: Dict[str, Any],
        response_model: Type[ModelT],
    ) -> ModelT:
        """
        POST `payload` to `path` and parse the body as `response_model`.

        Raises:
            BackendError: Transport failure, timeout, error status, or a body
                that does not match the expected model.
        """
        start_time = time.perf_counter()

        try:
            response = await self.client.post(path, json=payload)
        except httpx.TimeoutException as e:
            self._log_failure(path, start_time, e)
            raise BackendError(
                message=f"The {self.service_name} did not answer in time",
                service=self.service_name,
                context={"path": path, "error_type": type(e).__name__},
            )
        except httpx.HTTPError as e:
            self._log_failure(path, start_time, e)
            raise BackendError(
                message=f"The {self.service_name} could not be reached",
                service=self.service_name,
                context={"path": path, "error_type": type(e).__name__},
            )

        duration_ms = (time.perf_counter() - start_time) * 1000

        if response.is_error:
            logger.warning(
                "%s POST %s answered %d in %.0fms: %s",
                self.service_name,
                path,
                response.status_code,
                duration_ms,
                response.text[:200],
            )
            raise BackendError(
                service=self.service_name,
                context={"path": path, "status": response.status_code},
            )

        try:
            result = response_model.model_validate_json(response.content)
        except PydanticValidationError as e:
            logger.error(
                "%s POST %s returned a malformed body: %s",
                self.service_name,
                path,
                str(e),
            )
            raise BackendError(
                message=f"The {self.service_name} returned an unreadable response",
                service=self.service_name,
                context={"path": path, "error_type": type(e).__name__},
            )

        logger.debug(
            "%s POST %s completed in %.0fms",
            self.service_name,
            path,
            duration_ms,
        )
        return result

    def _log_failure(self, path: str, start_time: float, error: Exception) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.warning(
            "%s POST %s failed after %.0fms: %s",
            self.service_name,
            path,
            duration_ms,
            repr(error),
        )

    async def health_check(self) -> bool:
        """
        Check that the service answers on /health.

        Returns: True on HTTP 200, False on any other status or transport error.
        """
        try:
            response = await self.client.get("/health")
        except httpx.HTTPError as e:
            logger.warning("%s health check failed: %s", self.service_name, repr(e))
            return False
        return response.status_code == 200

    async def aclose(self) -> None:
        await self.client.aclose()


def build_client(base_url: str, timeout: float) -> httpx.AsyncClient:
    """Creates the pooled AsyncClient for one backend."""
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout),
    )
