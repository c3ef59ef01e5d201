"""
Engine client for talking to the remote trading engine.

The engine exposes a small request/response surface: read the active
configuration, submit a new one, start and stop. Services receive an
``EngineClient`` at construction so the transport can be swapped in tests.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import aiohttp
import structlog

from api.services.errors import EngineUnavailable, ValidationRejected

logger = structlog.get_logger(__name__)

# Engine answers with these when it refuses the submitted configuration
VALIDATION_STATUSES = {400, 422}


class EngineClient(ABC):
    """Request/response capability of the remote engine."""

    @abstractmethod
    async def get_config(self) -> str:
        """Return the engine's active configuration document."""

    @abstractmethod
    async def submit_config(self, document: str) -> None:
        """Submit a configuration document. Raises ValidationRejected on refusal."""

    @abstractmethod
    async def start(self) -> None:
        """Ask the engine to start trading."""

    @abstractmethod
    async def stop(self) -> None:
        """Ask the engine to stop trading."""

    async def close(self) -> None:
        """Release transport resources."""


class HttpEngineClient(EngineClient):
    """
    Engine client speaking HTTP to the engine's control server.

    Connection errors, timeouts and unexpected statuses are raised as
    EngineUnavailable. A 400/422 answer to a config submission is raised
    as ValidationRejected with the engine's message.
    """

    def __init__(self, base_url: str, timeout_seconds: float = 10.0):
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None
        self.logger = logger.bind(component="HttpEngineClient", engine_url=self.base_url)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(self, method: str, path: str, data: Optional[str] = None) -> str:
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "text/plain; charset=utf-8"} if data is not None else None
        try:
            session = self._get_session()
            async with session.request(method, url, data=data, headers=headers) as response:
                body = await response.text()
                if 200 <= response.status < 300:
                    return body

                if path == "/config" and method == "POST" and response.status in VALIDATION_STATUSES:
                    self.logger.warning(f"Engine rejected configuration: HTTP {response.status}")
                    raise ValidationRejected(
                        body.strip() or "Engine rejected the configuration",
                        context={"status_code": response.status}
                    )

                self.logger.error(f"Engine returned HTTP {response.status} for {method} {path}")
                raise EngineUnavailable(
                    f"Engine returned HTTP {response.status} for {method} {path}",
                    context={"status_code": response.status, "endpoint": path}
                )
        except asyncio.TimeoutError:
            self.logger.error(f"Engine request timed out: {method} {path}")
            raise EngineUnavailable(
                f"Engine did not answer {method} {path} within {self.timeout_seconds}s",
                context={"endpoint": path}
            )
        except aiohttp.ClientError as e:
            self.logger.error(f"Engine request failed: {method} {path}: {e}")
            raise EngineUnavailable(
                f"Could not reach engine at {self.base_url}: {e}",
                context={"endpoint": path}
            )

    async def get_config(self) -> str:
        return await self._request("GET", "/config")

    async def submit_config(self, document: str) -> None:
        await self._request("POST", "/config", data=document)

    async def start(self) -> None:
        await self._request("POST", "/start")

    async def stop(self) -> None:
        await self._request("POST", "/stop")


async def call_engine(call, operation: str, timeout_seconds: float):
    """
    Run a single engine call bounded by ``timeout_seconds``.

    Any failure that is not already classified is reported as
    EngineUnavailable so callers only ever see the control plane taxonomy.
    """
    try:
        return await asyncio.wait_for(call(), timeout=timeout_seconds)
    except (EngineUnavailable, ValidationRejected):
        raise
    except asyncio.TimeoutError:
        logger.error(f"Engine {operation} timed out after {timeout_seconds}s")
        raise EngineUnavailable(
            f"Engine {operation} timed out after {timeout_seconds}s",
            context={"operation": operation}
        )
    except Exception as e:
        logger.error(f"Engine {operation} failed: {e}")
        raise EngineUnavailable(
            f"Engine {operation} failed: {e}",
            context={"operation": operation}
        )
