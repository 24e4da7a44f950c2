from fastapi import APIRouter, Depends

from metaconsole.db.analytical_session import AnalyticalSession, SessionStatus
from metaconsole.db.session import getAnalyticalSession
from metaconsole.services.connection_monitor import ConnectionMonitor, ConnectionStatus, getConnectionMonitor
from metaconsole.core.exceptions import ErrorResponse

router = APIRouter(prefix="/v1/connection", tags=["Connection"], responses={
    503: {"model": ErrorResponse, "description": "Analytical database unavailable"},
})

@router.get("/analytical", response_model=SessionStatus)
async def analyticalStatusEndpoint(session: AnalyticalSession = Depends(getAnalyticalSession)):
    return session.status()

@router.post("/analytical/connect", response_model=SessionStatus)
async def connectAnalyticalEndpoint(session: AnalyticalSession = Depends(getAnalyticalSession)):
    # failures surface as ConnectionFailedException (503) with the session's lastError
    await session.connect()
    return session.status()

@router.post("/analytical/disconnect", response_model=SessionStatus)
async def disconnectAnalyticalEndpoint(session: AnalyticalSession = Depends(getAnalyticalSession)):
    await session.close()
    return session.status()

@router.get("/catalog", response_model=ConnectionStatus)
async def catalogStatusEndpoint(monitor: ConnectionMonitor = Depends(getConnectionMonitor)):
    return monitor.status

@router.post("/catalog/check", response_model=ConnectionStatus)
async def checkCatalogEndpoint(monitor: ConnectionMonitor = Depends(getConnectionMonitor)):
    await monitor.checkConnection()
    return monitor.status
