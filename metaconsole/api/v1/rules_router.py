from fastapi import APIRouter, Depends, Path, Query
from typing import List, Optional

from metaconsole.services.catalog_clients import CatalogClients, getCatalogClients
from metaconsole.crud.crud_ruleset import crudRuleset
from metaconsole.models.catalog_models import Rule, Ruleset
from metaconsole.models.console_models import ApplyRulesBody
from metaconsole.api.v1.namespace_router import errorResponses
from metaconsole.core.exceptions import BaseConsoleException, InternalServerErrorException

router = APIRouter(prefix="/v1/rules", tags=["Data Quality"], responses=errorResponses)

@router.get("/entities/{enId}/rulesets", response_model=List[Ruleset])
async def listDqRulesetsEndpoint(
    enId: str = Path(..., description="Entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudRuleset.listDqRulesets(clients, enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.get("/entities/{enId}", response_model=List[Rule])
async def listDqRulesEndpoint(
    enId: str = Path(..., description="Entity id"),
    columnName: Optional[str] = Query(None, description="Only rules targeting this column"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudRuleset.listDqRules(clients, enId, columnName)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.post("/entities/{enId}", response_model=List[Rule])
async def applyDqRulesEndpoint(
    body: ApplyRulesBody,
    enId: str = Path(..., description="Entity id"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudRuleset.applyDqRules(clients, enId, body.columnName, body.rules)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))

@router.delete("/{ruleId}", response_model=List[Rule])
async def deleteRuleEndpoint(
    ruleId: str = Path(..., description="Rule id"),
    enId: Optional[str] = Query(None, description="Entity whose remaining rules are returned"),
    clients: CatalogClients = Depends(getCatalogClients),
):
    try:
        return await crudRuleset.deleteRule(clients, ruleId, enId=enId)
    except BaseConsoleException as e:
        raise e
    except Exception as e:
        raise InternalServerErrorException(message=str(e))
