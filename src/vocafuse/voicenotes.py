"""Voicenote and transcription accessors."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from datetime import date
from typing import Any

from .config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from .http import AsyncHttpClientProtocol
from .models import ApiResponse, PaginatedResponse, Transcription, Voicenote, VoicenoteStatus
from .resources import BaseResource

logger = logging.getLogger(__name__)

DateFilter = date | str


def clamp_page_limit(limit: int | None) -> int:
    """Return *limit* bounded to the range accepted by list endpoints."""
    if not limit:
        return DEFAULT_PAGE_LIMIT
    return max(1, min(limit, MAX_PAGE_LIMIT))


def _format_date(value: DateFilter) -> str:
    return value.isoformat() if isinstance(value, date) else value


def build_list_params(
    *,
    page: int = 0,
    limit: int | None = DEFAULT_PAGE_LIMIT,
    status: VoicenoteStatus | str | None = None,
    date_from: DateFilter | None = None,
    date_to: DateFilter | None = None,
) -> dict[str, Any]:
    """Return query parameters for the voicenote list endpoint, omitting unset filters."""
    params: dict[str, Any] = {"page": max(page, 0), "limit": clamp_page_limit(limit)}
    if status:
        params["status"] = status.value if isinstance(status, VoicenoteStatus) else status
    if date_from:
        params["date_from"] = _format_date(date_from)
    if date_to:
        params["date_to"] = _format_date(date_to)
    return params


class TranscriptionResource(BaseResource):
    """Read-only access to the transcription of a single voicenote."""

    def __init__(self, http_client: AsyncHttpClientProtocol, voicenote_id: str) -> None:
        """Bind the accessor to the voicenote identified by *voicenote_id*."""
        super().__init__(http_client)
        self._voicenote_id = voicenote_id

    async def get(self) -> ApiResponse[Transcription]:
        """Return the transcription for the voicenote.

        Raises a ``TRANSCRIPTION_NOT_FOUND`` error while the voicenote is still
        processing or when the voicenote itself does not exist.
        """
        return await self._get(
            f"voicenotes/{self._voicenote_id}/transcription", ApiResponse[Transcription]
        )


class VoicenoteHandle(BaseResource):
    """Operations on one voicenote addressed by id."""

    def __init__(self, http_client: AsyncHttpClientProtocol, voicenote_id: str) -> None:
        """Bind the handle to *voicenote_id*."""
        super().__init__(http_client)
        self._voicenote_id = voicenote_id
        self.transcription = TranscriptionResource(http_client, voicenote_id)

    @property
    def id(self) -> str:
        """Return the voicenote identifier this handle addresses."""
        return self._voicenote_id

    async def get(self) -> ApiResponse[Voicenote]:
        """Fetch the voicenote."""
        return await self._get(f"voicenotes/{self._voicenote_id}", ApiResponse[Voicenote])

    async def delete(self) -> None:
        """Delete the voicenote and its transcription."""
        await self._delete(f"voicenotes/{self._voicenote_id}")


class VoicenotesResource(BaseResource):
    """Collection-level voicenote operations."""

    def item(self, voicenote_id: str) -> VoicenoteHandle:
        """Return a handle for the voicenote identified by *voicenote_id*."""
        return VoicenoteHandle(self._http_client, voicenote_id)

    async def list(
        self,
        *,
        page: int = 0,
        limit: int | None = DEFAULT_PAGE_LIMIT,
        status: VoicenoteStatus | str | None = None,
        date_from: DateFilter | None = None,
        date_to: DateFilter | None = None,
    ) -> PaginatedResponse[Voicenote]:
        """Return one page of voicenotes matching the optional filters.

        ``page`` is zero-based and ``limit`` is clamped to 1..100.
        """
        params = build_list_params(
            page=page, limit=limit, status=status, date_from=date_from, date_to=date_to
        )
        return await self._get("voicenotes", PaginatedResponse[Voicenote], params)

    async def iterate(
        self,
        *,
        page: int = 0,
        limit: int | None = DEFAULT_PAGE_LIMIT,
        status: VoicenoteStatus | str | None = None,
        date_from: DateFilter | None = None,
        date_to: DateFilter | None = None,
    ) -> AsyncIterator[Voicenote]:
        """Yield voicenotes one at a time, fetching pages on demand.

        Pages are requested only when the previous page has been consumed, so
        stopping iteration early issues no further requests. Each call starts a
        fresh sequence at *page*.
        """
        current_page = max(page, 0)
        while True:
            response = await self.list(
                page=current_page,
                limit=limit,
                status=status,
                date_from=date_from,
                date_to=date_to,
            )
            for voicenote in response.data:
                yield voicenote
            has_more = response.pagination.has_more if response.pagination else False
            if not has_more:
                return
            current_page += 1
            logger.debug("Advancing voicenote iteration to page %d", current_page)
