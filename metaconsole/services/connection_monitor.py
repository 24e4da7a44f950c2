import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel

from metaconsole.core.config import settings
from metaconsole.core.exceptions import BaseConsoleException
from metaconsole.services.graphql_client import CatalogGraphQLClient, graphqlClient

logger = logging.getLogger(__name__)

class ConnectionStatus(BaseModel):
    isConnected: bool = True
    isChecking: bool = False
    lastError: Optional[str] = None
    lastChecked: Optional[datetime] = None

class ConnectionMonitor:
    """Periodic ``__typename`` health check against the catalog GraphQL endpoint."""

    def __init__(self, client: CatalogGraphQLClient, interval: float = 30.0):
        self.client = client
        self.interval = interval
        self.status = ConnectionStatus()
        self._task: Optional[asyncio.Task] = None

    async def checkConnection(self) -> bool:
        self.status = self.status.model_copy(update={"isChecking": True})
        try:
            healthy = await self.client.healthCheck()
            error = None if healthy else "Health check returned no data"
        except BaseConsoleException as e:
            healthy = False
            error = e.message

        if not healthy and self.status.isConnected:
            logger.warning(f"GraphQL endpoint unreachable: {error}")
        elif healthy and not self.status.isConnected:
            logger.info("GraphQL endpoint reachable again")

        self.status = ConnectionStatus(
            isConnected=healthy,
            isChecking=False,
            lastError=error,
            lastChecked=datetime.now(timezone.utc),
        )
        return healthy

    async def _run(self) -> None:
        while True:
            await self.checkConnection()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.interval <= 0 or self.isRunning:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Connection monitor started, checking every {self.interval}s")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def isRunning(self) -> bool:
        return self._task is not None and not self._task.done()

connectionMonitor = ConnectionMonitor(client=graphqlClient, interval=settings.healthCheckInterval)

def getConnectionMonitor() -> ConnectionMonitor:
    return connectionMonitor
