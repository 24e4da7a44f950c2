import logging
from fastapi import APIRouter, Depends, File, Form, Path, UploadFile
from typing import List, Any

from metaconsole.services.catalog_clients import CatalogClients, getCatalogClients
from metaconsole.services import blueprint_service
from metaconsole.services.blueprint_service import Blueprint
from metaconsole.crud.crud_ruleset import crudRuleset
from metaconsole.models.catalog_models import Meta, Ruleset
from metaconsole.models.request_models import GlossarySuggestionsRequest, CustomBlueprintRequest
from metaconsole.models.console_models import SaveMappingsBody
from metaconsole.api.v1.namespace_router import errorResponses
from metaconsole.core.exceptions import BaseConsoleException, InternalServerErrorException, ValidationException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/glossary", tags=["Glossary"], responses=errorResponses)

@router.post("/suggestions", response_model=Blueprint)
async def glossarySuggestionsEndpoint(
    request: GlossarySuggestionsRequest,
    clients: CatalogClients = Depends(getCatalogClients),
):
    if not request.entityIds:
        raise ValidationException("Please select at least one source entity.")
    try:
        return await blueprint_service.generateSuggestions(clients.rest, request)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/custom-blueprint", response_model=Blueprint)
async def customBlueprintEndpoint(
    request: CustomBlueprintRequest,
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await blueprint_service.generateCustomBlueprint(clients.rest, request)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/{enId}/metas", response_model=List[Meta])
async def listGlossaryMetasEndpoint(
    enId: str = Path(..., description="Glossary entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await clients.graphql.getMetaConceptual(enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/{enId}/mappings", response_model=List[Ruleset])
async def listMappingsEndpoint(
    enId: str = Path(..., description="Glossary entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudRuleset.listMappingRulesets(clients, enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/{enId}/mappings", response_model=List[Ruleset])
async def saveMappingsEndpoint(
    body: SaveMappingsBody,
    enId: str = Path(..., description="Glossary entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudRuleset.saveGlossaryMappings(clients, enId, body.mappings)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/import-configuration")
async def importConfigurationEndpoint(
    file: UploadFile = File(..., description="Configuration spreadsheet"),
    sheetName: str = Form(..., min_length=1),
    clients: CatalogClients = Depends(getCatalogClients),
) -> Any:
    content = await file.read()
    if not content:
        raise ValidationException(f"Uploaded file '{file.filename}' is empty.")
    try:
        result = await clients.rest.importConfiguration(
            file.filename or "configuration.xlsx",
            content,
            sheetName,
            contentType=file.content_type or "application/octet-stream",
        )
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))
    logger.info(f"Imported configuration sheet '{sheetName}' from {file.filename}")
    return result
