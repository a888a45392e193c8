"""Deliver scan results to the remote thing registry."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import aiohttp

from .exceptions import ReportError
from .models import Thing

_LOGGER = logging.getLogger(__name__)

REPORT_TIMEOUT = 30


class ThingReporter:
    """PATCH the serialized entity trees to the configured endpoint."""

    def __init__(self, session: aiohttp.ClientSession, url: str) -> None:
        self._session = session
        self._url = url

    async def async_report(self, things: Sequence[Thing]) -> bool:
        """Send ``things``; failures are logged and reported as False."""

        _LOGGER.debug("Reporting %d things to %s", len(things), self._url)
        try:
            await self._async_patch([thing.as_dict() for thing in things])
        except ReportError as err:
            _LOGGER.error("Reporting things to %s failed: %s", self._url, err)
            return False

        _LOGGER.debug("Reporting things completed successfully")
        return True

    async def _async_patch(self, payload: list) -> None:
        try:
            async with asyncio.timeout(REPORT_TIMEOUT):
                async with self._session.patch(self._url, json=payload) as response:
                    response.raise_for_status()
        except aiohttp.ClientResponseError as err:
            raise ReportError(f"HTTP {err.status}: {err.message}") from err
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise ReportError(str(err) or type(err).__name__) from err
