from fastapi import APIRouter
from metaconsole.models.console_models import ConsoleConfig
from metaconsole.core.config import settings

router = APIRouter()

@router.get("/config", response_model=ConsoleConfig)
async def getConfig():
    # the token itself never leaves the server
    return ConsoleConfig(
        restEndpoint=settings.restEndpoint,
        graphqlEndpoint=settings.graphqlEndpoint,
        analyticalDatabasePath=settings.analyticalDatabasePath,
        motherduckDatabase=settings.motherduckDatabase or None,
        motherduckSchema=settings.motherduckSchema or None,
        motherduckTokenConfigured=bool(settings.motherduckToken),
        gridWindowSize=settings.gridWindowSize,
        gridScrollThreshold=settings.gridScrollThreshold,
        healthCheckInterval=settings.healthCheckInterval,
    )
