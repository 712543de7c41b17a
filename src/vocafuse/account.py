"""Account information accessor."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .models import Account, AccountSettings, ApiResponse
from .resources import BaseResource


class AccountResource(BaseResource):
    """Read and update the tenant account owning the credentials."""

    async def get(self) -> ApiResponse[Account]:
        """Return account details including plan, settings and usage."""
        return await self._get("account", ApiResponse[Account])

    async def update(
        self,
        *,
        name: str | None = None,
        settings: AccountSettings | Mapping[str, Any] | None = None,
    ) -> ApiResponse[Account]:
        """Update the account name and/or a partial set of settings."""
        payload: dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if settings is not None:
            payload["settings"] = (
                settings.model_dump(exclude_none=True)
                if isinstance(settings, AccountSettings)
                else dict(settings)
            )
        return await self._put("account", ApiResponse[Account], payload)
