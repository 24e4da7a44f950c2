from enum import Enum
from fastapi import HTTPException
from fastapi import status as httpStatus
from typing import List, Optional, Any
from pydantic import BaseModel

class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    VALIDATION = "validation"
    CONNECTION = "connection"
    QUERY = "query"
    BAD_REQUEST = "bad_request"
    CONFLICT = "conflict"
    INTERNAL = "internal"

class ConsoleErrorModel(BaseModel):
    message: str
    type: str
    code: int
    kind: ErrorKind
    missingFields: Optional[List[str]] = None
    upstreamStatus: Optional[int] = None

class ErrorResponse(BaseModel):
    error: ConsoleErrorModel

class BaseConsoleException(HTTPException):
    def __init__(self, statusCode: int, message: str, errorType: str, errorKind: ErrorKind):
        self.errorType = errorType
        self.errorKind = errorKind
        self.message = message
        super().__init__(status_code=statusCode, detail={"error": {
            "message": message,
            "type": errorType,
            "code": statusCode,
            "kind": errorKind.value,
        }})

    def __str__(self) -> str:
        return self.message

    def toErrorBody(self) -> dict:
        errorDetail = dict(self.detail["error"])
        errorDetail["type"] = self.errorType # subclasses may rename after __init__
        return errorDetail

class BadRequestException(BaseConsoleException):
    def __init__(self, message: str = "The request was malformed or contained invalid parameters."):
        super().__init__(
            statusCode=httpStatus.HTTP_400_BAD_REQUEST,
            message=message,
            errorType="BadRequestException",
            errorKind=ErrorKind.BAD_REQUEST
        )

class ValidationException(BadRequestException):
    def __init__(self, message: str, missingFields: Optional[List[str]] = None):
        super().__init__(
            message=message
        )
        self.errorType = "ValidationException"
        self.errorKind = ErrorKind.VALIDATION
        self.missingFields = missingFields
        self.detail["error"]["kind"] = ErrorKind.VALIDATION.value
        if missingFields:
            self.detail["error"]["missingFields"] = missingFields

class NotFoundException(BaseConsoleException):
    def __init__(self, resourceType: str, identifier: Any):
        super().__init__(
            statusCode=httpStatus.HTTP_404_NOT_FOUND,
            message=f"{resourceType} with identifier '{identifier}' not found.",
            errorType="NotFoundException",
            errorKind=ErrorKind.NOT_FOUND
        )

class TableNotFoundException(NotFoundException):
    def __init__(self, tableIdentifier: List[str]):
        super().__init__(
            resourceType="Table",
            identifier='.'.join(tableIdentifier)
        )
        self.errorType = "TableNotFoundException"
        self.tableIdentifier = tableIdentifier

class ConflictException(BaseConsoleException):
    def __init__(self, message: str, errorType: str = "ConflictException"):
        super().__init__(
            statusCode=httpStatus.HTTP_409_CONFLICT,
            message=message,
            errorType=errorType,
            errorKind=ErrorKind.CONFLICT
        )

class GridStateException(ConflictException):
    def __init__(self, message: str):
        super().__init__(
            message=message,
            errorType="GridStateException"
        )

class UnsupportedMediaTypeException(BaseConsoleException):
    def __init__(self, mediaType: str, supportedMediaTypes: List[str]):
        super().__init__(
            statusCode=httpStatus.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            message=f"Media type '{mediaType}' is not supported. Supported types: {', '.join(supportedMediaTypes)}.",
            errorType="UnsupportedMediaTypeException",
            errorKind=ErrorKind.BAD_REQUEST
        )

class InternalServerErrorException(BaseConsoleException):
    def __init__(self, message: str = "An unexpected internal server error occurred."):
        super().__init__(
            statusCode=httpStatus.HTTP_500_INTERNAL_SERVER_ERROR,
            message=message,
            errorType="InternalServerErrorException",
            errorKind=ErrorKind.INTERNAL
        )

class QueryFailedException(BaseConsoleException):
    def __init__(self, message: str):
        super().__init__(
            statusCode=httpStatus.HTTP_500_INTERNAL_SERVER_ERROR,
            message=f"Query failed: {message}",
            errorType="QueryFailedException",
            errorKind=ErrorKind.QUERY
        )

class TransportException(BaseConsoleException):
    def __init__(self, message: str, upstreamStatus: Optional[int] = None):
        super().__init__(
            statusCode=httpStatus.HTTP_502_BAD_GATEWAY,
            message=message,
            errorType="TransportException",
            errorKind=ErrorKind.TRANSPORT
        )
        self.upstreamStatus = upstreamStatus
        if upstreamStatus is not None:
            self.detail["error"]["upstreamStatus"] = upstreamStatus

class ServiceUnavailableException(BaseConsoleException):
    def __init__(self, message: str = "The service is temporarily unavailable. Please try again later."):
        super().__init__(
            statusCode=httpStatus.HTTP_503_SERVICE_UNAVAILABLE,
            message=message,
            errorType="ServiceUnavailableException",
            errorKind=ErrorKind.CONNECTION
        )

class ConnectionFailedException(ServiceUnavailableException):
    def __init__(self, message: str):
        super().__init__(
            message=f"Database connection failed: {message}"
        )
        self.errorType = "ConnectionFailedException"

class GatewayTimeoutException(BaseConsoleException):
    def __init__(self, message: str = "The upstream server did not respond in time."):
        super().__init__(
            statusCode=httpStatus.HTTP_504_GATEWAY_TIMEOUT,
            message=message,
            errorType="GatewayTimeoutException",
            errorKind=ErrorKind.TRANSPORT
        )
