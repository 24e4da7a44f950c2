from fastapi import APIRouter, Depends, Query, Path
from typing import List, Any, Optional

from metaconsole.services.catalog_clients import CatalogClients, getCatalogClients
from metaconsole.db.analytical_session import AnalyticalSession
from metaconsole.db.session import getAnalyticalSession
from metaconsole.crud.crud_entity import crudEntity, EntityDataPreview
from metaconsole.models.catalog_models import Entity, Meta, EntityRelation, ConceptualModel
from metaconsole.models.request_models import EntityRequest
from metaconsole.models.console_models import IdsBody, EntityWithMetaBody
from metaconsole.api.v1.namespace_router import errorResponses
from metaconsole.core.exceptions import BaseConsoleException, InternalServerErrorException

router = APIRouter(prefix="/v1", tags=["Entities"], responses=errorResponses)

@router.get("/entities", response_model=List[Entity])
async def listEntitiesEndpoint(
    clients: CatalogClients = Depends(getCatalogClients),
    saId: str = Query("", description="Only entities of this subject area"),
    type: str = Query("", description="Filter by entity type, empty for all"),
):
    try:
        return await crudEntity.listEntities(clients, saId=saId, type=type)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/entities", response_model=List[Entity])
async def createEntitiesEndpoint(
    requests: List[EntityRequest],
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudEntity.createEntities(clients, requests)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/entities/with-meta")
async def createEntityWithMetaEndpoint(
    body: EntityWithMetaBody,
    clients: CatalogClients = Depends(getCatalogClients),
) -> Any:
    try:
        return await crudEntity.createEntityWithMeta(clients, body.entityRequest, body.metaRequests)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.delete("/entities", response_model=List[Entity])
async def deleteEntitiesEndpoint(
    body: IdsBody,
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudEntity.deleteEntities(clients, body.ids)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/entities/{enId}", response_model=Entity)
async def loadEntityEndpoint(
    enId: str = Path(..., description="Entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudEntity.getEntity(clients, enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/entities/{enId}/metas", response_model=List[Meta], tags=["Meta"])
async def listMetasEndpoint(
    enId: str = Path(..., description="Entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudEntity.listMetas(clients, enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.delete("/metas", response_model=List[Meta], tags=["Meta"])
async def deleteMetasEndpoint(
    body: IdsBody,
    clients: CatalogClients = Depends(getCatalogClients),
    enId: Optional[str] = Query(None, description="Entity whose meta fields are returned after the delete"),
):
    try:
        return await crudEntity.deleteMetas(clients, body.ids, enId=enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/entities/{enId}/relations", response_model=List[EntityRelation])
async def listRelationsEndpoint(
    enId: str = Path(..., description="Entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudEntity.listRelations(clients, enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/entities/{enId}/conceptual-models", response_model=List[ConceptualModel])
async def listConceptualModelsEndpoint(
    enId: str = Path(..., description="Glossary entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudEntity.listConceptualModels(clients, enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/entities/{enId}/data", response_model=EntityDataPreview)
async def previewEntityDataEndpoint(
    enId: str = Path(..., description="Entity id"),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of rows"),
    clients: CatalogClients = Depends(getCatalogClients),
    session: AnalyticalSession = Depends(getAnalyticalSession),
):
    try:
        return await crudEntity.previewEntityData(clients, session, enId, limit=limit)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))
