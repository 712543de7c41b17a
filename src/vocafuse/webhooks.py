"""Webhook configuration accessors."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .http import AsyncHttpClientProtocol
from .models import ApiResponse, Webhook, WebhookEvent
from .resources import BaseResource


def build_webhook_payload(
    url: str, events: Iterable[WebhookEvent | str], secret: str | None = None
) -> dict[str, Any]:
    """Return the request body shared by webhook create and update."""
    payload: dict[str, Any] = {
        "url": url,
        "events": [event.value if isinstance(event, WebhookEvent) else event for event in events],
    }
    if secret:
        payload["secret"] = secret
    return payload


class WebhookHandle(BaseResource):
    """Operations on one webhook addressed by id."""

    def __init__(self, http_client: AsyncHttpClientProtocol, webhook_id: str) -> None:
        """Bind the handle to *webhook_id*."""
        super().__init__(http_client)
        self._webhook_id = webhook_id

    @property
    def id(self) -> str:
        """Return the webhook identifier this handle addresses."""
        return self._webhook_id

    async def get(self) -> ApiResponse[Webhook]:
        """Fetch the webhook configuration."""
        return await self._get(f"webhooks/{self._webhook_id}", ApiResponse[Webhook])

    async def update(
        self, url: str, events: Iterable[WebhookEvent | str], secret: str | None = None
    ) -> ApiResponse[Webhook]:
        """Replace the webhook's URL, subscribed events and optionally its signing secret."""
        return await self._put(
            f"webhooks/{self._webhook_id}",
            ApiResponse[Webhook],
            build_webhook_payload(url, events, secret),
        )

    async def delete(self) -> None:
        """Delete the webhook."""
        await self._delete(f"webhooks/{self._webhook_id}")


class WebhooksResource(BaseResource):
    """Collection-level webhook operations."""

    def item(self, webhook_id: str) -> WebhookHandle:
        """Return a handle for the webhook identified by *webhook_id*."""
        return WebhookHandle(self._http_client, webhook_id)

    async def list(self) -> ApiResponse[list[Webhook]]:
        """Return every webhook configured for the account."""
        return await self._get("webhooks", ApiResponse[list[Webhook]])

    async def create(
        self, url: str, events: Iterable[WebhookEvent | str], secret: str | None = None
    ) -> ApiResponse[Webhook]:
        """Register a webhook delivering *events* to *url*."""
        return await self._post(
            "webhooks", ApiResponse[Webhook], build_webhook_payload(url, events, secret)
        )
