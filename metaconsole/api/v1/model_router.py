from fastapi import APIRouter, Depends, Path
from typing import List, Any

from metaconsole.services.catalog_clients import CatalogClients, getCatalogClients
from metaconsole.crud.crud_ruleset import crudRuleset
from metaconsole.models.catalog_models import Meta
from metaconsole.models.console_models import PublishBody
from metaconsole.api.v1.namespace_router import errorResponses
from metaconsole.core.exceptions import BaseConsoleException, InternalServerErrorException

router = APIRouter(prefix="/v1/models", tags=["Models"], responses=errorResponses)

@router.get("/{enId}/conceptual", response_model=List[Meta])
async def listConceptualMetasEndpoint(
    enId: str = Path(..., description="Glossary entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await clients.graphql.getMetaConceptual(enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/{enId}/build")
async def buildPublishEndpoint(
    body: PublishBody,
    enId: str = Path(..., description="Glossary entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
) -> Any:
    try:
        return await crudRuleset.buildGlossaryPublish(clients, enId, body.selectedMetas, projectCode=body.projectCode)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/{enId}/load")
async def loadPublishEndpoint(
    enId: str = Path(..., description="Glossary entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
) -> Any:
    try:
        return await crudRuleset.loadGlossaryPublish(clients, enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))
