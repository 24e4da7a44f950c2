import logging
from contextlib import asynccontextmanager

import duckdb
import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from metaconsole.api.router import apiRouter
from metaconsole.core.config import settings
from metaconsole.core.exceptions import (
    BaseConsoleException, InternalServerErrorException, QueryFailedException,
    TransportException, ValidationException,
)
from metaconsole.db.session import analyticalSession
from metaconsole.services.catalog_clients import catalogClients
from metaconsole.services.connection_monitor import connectionMonitor

logging.basicConfig(
    level=settings.logLevel.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    connectionMonitor.start()
    logger.info(f"Metadata console started against {settings.graphqlEndpoint}")
    yield
    await connectionMonitor.stop()
    await catalogClients.aclose()
    await analyticalSession.close()
    logger.info("Metadata console stopped")

app = FastAPI(
    title="Metadata Console",
    version="0.1.0",
    description="Console backend for browsing and editing a metadata catalog and previewing its warehouse tables.",
    lifespan=lifespan,
)

def errorJson(exc: BaseConsoleException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.toErrorBody()})

@app.exception_handler(BaseConsoleException)
async def consoleExceptionHandler(request: Request, exc: BaseConsoleException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return errorJson(exc)

@app.exception_handler(RequestValidationError)
async def validationExceptionHandler(request: Request, exc: RequestValidationError):
    errorMessages = []
    missingFields = []
    for error in exc.errors():
        loc = []
        for item in error["loc"]:
            if isinstance(item, int):
                loc.append(f"[{item}]")
            else:
                loc.append(str(item))

        locPath = ".".join(loc).replace(".[", "[") # body.[0].field -> body[0].field
        errorMessages.append(f"Field '{locPath}': {error['msg']}")
        if error.get("type") == "missing":
            missingFields.append(locPath)

    validationError = ValidationException(
        message="Validation Error: " + "; ".join(errorMessages),
        missingFields=missingFields or None,
    )
    return errorJson(validationError)

@app.exception_handler(httpx.HTTPError)
async def transportExceptionHandler(request: Request, exc: httpx.HTTPError):
    logger.error(f"Upstream call from {request.url.path} failed: {exc}")
    return errorJson(TransportException(message=f"Catalog service error: {exc}"))

@app.exception_handler(duckdb.Error)
async def duckdbExceptionHandler(request: Request, exc: duckdb.Error):
    logger.error(f"Analytical query from {request.url.path} failed: {exc}")
    serverError = QueryFailedException(str(exc))
    serverError.errorType = type(exc).__name__
    return errorJson(serverError)

@app.exception_handler(Exception)
async def genericExceptionHandler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    serverError = InternalServerErrorException(message="An unexpected internal server error occurred.")
    serverError.errorType = type(exc).__name__
    return errorJson(serverError)

app.include_router(apiRouter)

@app.get("/", include_in_schema=False)
async def root():
    return {"message": "Welcome to the Metadata Console!"}
