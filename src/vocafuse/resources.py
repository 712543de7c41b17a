"""Shared request plumbing for VocaFuse API resources."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from .error_handler import classify_error
from .errors import VocaFuseError
from .http import AsyncHttpClientProtocol

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseResource:
    """Base class for API resources.

    Every failure, whether raised by the transport, by the status check or
    while parsing the response body, leaves these helpers as exactly one
    :class:`VocaFuseError`. Helpers carry a leading underscore so they do not
    collide with public ``get``/``delete`` methods on subclasses.
    """

    def __init__(self, http_client: AsyncHttpClientProtocol) -> None:
        """Bind the resource to *http_client*."""
        self._http_client = http_client

    async def _request(
        self,
        method: str,
        path: str,
        response_model: type[ModelT],
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> ModelT:
        """Send a request and parse the JSON body into *response_model*."""
        try:
            response = await self._http_client.request(method, path, params=params, json=json)
            return response_model.model_validate(response.json())
        except VocaFuseError:
            raise
        except Exception as exc:
            raise classify_error(exc) from exc

    async def _get(
        self,
        path: str,
        response_model: type[ModelT],
        params: Mapping[str, Any] | None = None,
    ) -> ModelT:
        return await self._request("GET", path, response_model, params=params)

    async def _post(self, path: str, response_model: type[ModelT], data: Any = None) -> ModelT:
        return await self._request("POST", path, response_model, json=data)

    async def _put(self, path: str, response_model: type[ModelT], data: Any = None) -> ModelT:
        return await self._request("PUT", path, response_model, json=data)

    async def _delete(self, path: str) -> None:
        try:
            await self._http_client.request("DELETE", path)
        except VocaFuseError:
            raise
        except Exception as exc:
            raise classify_error(exc) from exc
        logger.info("Deleted %s", path)
