from fastapi import APIRouter, Depends, Query
from typing import List

from metaconsole.services.catalog_clients import CatalogClients, getCatalogClients
from metaconsole.crud.crud_namespace import crudNamespace
from metaconsole.models.catalog_models import Namespace, SubjectArea
from metaconsole.models.request_models import NamespaceRequest, SubjectAreaRequest
from metaconsole.models.console_models import IdsBody
from metaconsole.core.exceptions import BaseConsoleException, ErrorResponse, InternalServerErrorException

errorResponses = {
    400: {"model": ErrorResponse}, 404: {"model": ErrorResponse},
    500: {"model": ErrorResponse, "description": "Internal Server Error"},
    502: {"model": ErrorResponse, "description": "Catalog service error"},
    504: {"model": ErrorResponse, "description": "Catalog service timeout"},
}

router = APIRouter(prefix="/v1", tags=["Namespaces"], responses=errorResponses)

@router.get("/namespaces", response_model=List[Namespace])
async def listNamespacesEndpoint(
    clients: CatalogClients = Depends(getCatalogClients),
    status: str = Query("", description="Filter by status, empty for all"),
    type: str = Query("", description="Filter by namespace type, empty for all"),
):
    try:
        return await crudNamespace.listNamespaces(clients, status=status, type=type)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/namespaces", response_model=List[Namespace])
async def createNamespacesEndpoint(
    requests: List[NamespaceRequest],
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudNamespace.createNamespaces(clients, requests)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.delete("/namespaces", response_model=List[Namespace])
async def deleteNamespacesEndpoint(
    body: IdsBody,
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudNamespace.deleteNamespaces(clients, body.ids)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/subjectareas", response_model=List[SubjectArea], tags=["Subject Areas"])
async def listSubjectAreasEndpoint(
    clients: CatalogClients = Depends(getCatalogClients),
    nsId: str = Query("", description="Only subject areas of this namespace"),
):
    try:
        return await crudNamespace.listSubjectAreas(clients, nsId=nsId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/subjectareas", response_model=List[SubjectArea], tags=["Subject Areas"])
async def createSubjectAreasEndpoint(
    requests: List[SubjectAreaRequest],
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudNamespace.createSubjectAreas(clients, requests)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.delete("/subjectareas", response_model=List[SubjectArea], tags=["Subject Areas"])
async def deleteSubjectAreasEndpoint(
    body: IdsBody,
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudNamespace.deleteSubjectAreas(clients, body.ids)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))
