"""API key management accessors."""

from __future__ import annotations

from .http import AsyncHttpClientProtocol
from .models import APIKey, ApiResponse
from .resources import BaseResource

API_KEYS_PATH = "account/api-keys"


class APIKeyHandle(BaseResource):
    """Operations on one API key addressed by id."""

    def __init__(self, http_client: AsyncHttpClientProtocol, api_key_id: str) -> None:
        """Bind the handle to *api_key_id*."""
        super().__init__(http_client)
        self._api_key_id = api_key_id

    @property
    def id(self) -> str:
        """Return the API key identifier this handle addresses."""
        return self._api_key_id

    async def get(self) -> ApiResponse[APIKey]:
        """Fetch the API key metadata; the secret is never included."""
        return await self._get(f"{API_KEYS_PATH}/{self._api_key_id}", ApiResponse[APIKey])

    async def delete(self) -> None:
        """Revoke the API key."""
        await self._delete(f"{API_KEYS_PATH}/{self._api_key_id}")


class APIKeysResource(BaseResource):
    """Collection-level API key operations."""

    def item(self, api_key_id: str) -> APIKeyHandle:
        """Return a handle for the API key identified by *api_key_id*."""
        return APIKeyHandle(self._http_client, api_key_id)

    async def list(self) -> ApiResponse[list[APIKey]]:
        """Return every API key on the account without secrets."""
        return await self._get(API_KEYS_PATH, ApiResponse[list[APIKey]])

    async def create(self, name: str) -> ApiResponse[APIKey]:
        """Create an API key named *name*.

        The response is the only place the new key's ``api_secret`` is ever
        returned; it is not retained by the client.
        """
        return await self._post(API_KEYS_PATH, ApiResponse[APIKey], {"name": name})
