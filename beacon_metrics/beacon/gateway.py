import asyncio
import json
import logging
from http import HTTPStatus
from typing import Any

import aiohttp

from beacon_metrics.beacon.exceptions import DecodeError, RemoteError, TransportError
from beacon_metrics.config.settings import BEACON_REQUEST_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

GET_REQUEST = 'GET'


class Gateway:
    """
    Sends requests to a single beacon node.

    Requests are serialized: a second caller waits until the request in flight
    completes. Every request gets its own session and timeout, released when
    the request returns.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = BEACON_REQUEST_TIMEOUT,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent
        self._lock = asyncio.Lock()

    async def get(self, path: str) -> Any:
        return await self.execute(GET_REQUEST, path)

    async def execute(self, method: str, path: str) -> Any:
        async with self._lock:
            status, body = await self._send(method, path)
        return unwrap_envelope(status, body)

    async def _send(self, method: str, path: str) -> tuple[int, bytes]:
        url = f'{self.base_url}{path}'
        logger.debug('%s %s', method, url)
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                async with session.request(
                    method,
                    url,
                    headers={
                        'content-type': 'application/json; charset=utf-8',
                        'accept': 'application/json; charset=utf-8',
                        'user-agent': self.user_agent,
                    },
                ) as response:
                    return response.status, await response.read()
        except asyncio.TimeoutError as e:
            raise TransportError(f'Request {method} {url} timed out after {self.timeout}s') from e
        except aiohttp.ClientError as e:
            raise TransportError(f'Request {method} {url} failed: {e}') from e


def unwrap_envelope(status: int, body: bytes) -> Any:
    """
    Returns the `data` member of a success body.
    Raises `RemoteError` with the node's `message` for error statuses.
    """
    if not HTTPStatus.OK <= status < HTTPStatus.BAD_REQUEST:
        try:
            message = json.loads(body)['message']
        except (ValueError, TypeError, KeyError):
            raise RemoteError(f'unknown error, status code: {status}', status) from None
        raise RemoteError(str(message), status)

    try:
        return json.loads(body)['data']
    except (ValueError, TypeError, KeyError) as e:
        raise DecodeError(f'Failed to decode response envelope: {e!r}') from e
