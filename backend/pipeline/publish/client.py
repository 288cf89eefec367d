"""Client for publishing a regenerated structured view to a design service.

The endpoint and bearer token come from settings (``PUBLISH_ENDPOINT``,
``PUBLISH_TOKEN``) unless passed explicitly. Obtaining the token is outside
this module: it only ever sends an already-issued bearer string.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

from app.schemas.prototype import utc_now
from pipeline.errors import PublishError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
MAX_RETRIES = 3
RETRY_DELAY = 2.0  # seconds, doubled per attempt


@dataclass
class PublishReceipt:
    """Outcome of a successful publish."""

    status_code: int
    published_at: datetime
    body: Any


class PublishClient:
    """POSTs structured views to the publish endpoint with retries."""

    def __init__(
        self,
        endpoint: str | None = None,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the publish client.

        Args:
            endpoint: URL to POST to. Defaults to settings.publish_endpoint.
            token: Bearer token. Defaults to settings.publish_token.
            timeout: HTTP request timeout in seconds.
            transport: Optional httpx transport (tests inject a mock).

        Raises:
            ValueError: If no endpoint or token is configured.
        """
        if endpoint is None or token is None:
            # Import here to avoid circular imports
            from app.config import settings

            endpoint = endpoint or settings.publish_endpoint
            token = token or settings.publish_token
        if not endpoint:
            raise ValueError(
                "Publish endpoint required. Set PUBLISH_ENDPOINT or pass endpoint."
            )
        if not token:
            raise ValueError("Publish token required. Set PUBLISH_TOKEN or pass token.")

        self.endpoint = endpoint
        self.token = token
        self.timeout = timeout
        self.transport = transport
        self.max_retries = MAX_RETRIES
        self.retry_delay = RETRY_DELAY

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    async def _post_with_retry(
        self, client: httpx.AsyncClient, payload: dict[str, Any]
    ) -> httpx.Response:
        """POST with exponential backoff on 5xx responses and transport errors.

        Raises:
            PublishError: On a 4xx response, or once retries are exhausted.
        """
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                response = await client.post(
                    self.endpoint, json=payload, headers=self._headers()
                )
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status < 500:
                    raise PublishError(
                        f"Publish rejected with {status}: {e.response.text[:200]}",
                        status_code=status,
                    ) from e
                last_error = e
            except httpx.RequestError as e:
                last_error = e

            if attempt < self.max_retries - 1:
                delay = self.retry_delay * (2**attempt)
                logger.warning(
                    f"Publish failed ({last_error}), retrying in {delay}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                await asyncio.sleep(delay)

        status_code = (
            last_error.response.status_code
            if isinstance(last_error, httpx.HTTPStatusError)
            else None
        )
        raise PublishError(
            f"Publish failed after {self.max_retries} attempts: {last_error}",
            status_code=status_code,
        )

    async def publish(self, structured_view: dict[str, Any]) -> PublishReceipt:
        """Publish a structured view.

        Args:
            structured_view: Output of the regenerator's structured view.

        Returns:
            PublishReceipt with the response status and decoded body.
        """
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            response = await self._post_with_retry(client, structured_view)

        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        name = structured_view.get("metadata", {}).get("name", "<unnamed>")
        logger.info(f"Published {name!r} -> {response.status_code}")
        return PublishReceipt(
            status_code=response.status_code,
            published_at=utc_now(),
            body=body,
        )
