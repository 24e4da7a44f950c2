import logging
from typing import List, Dict, Any, Optional
from pydantic import BaseModel, ConfigDict, Field

from metaconsole.models.request_models import MetaRequest, GlossarySuggestionsRequest, CustomBlueprintRequest
from metaconsole.services.rest_client import CatalogRestClient

logger = logging.getLogger(__name__)

class MappingSuggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    glossaryMetaName: str = Field(alias="glossary_meta_name")
    glossaryMetaAlias: Optional[str] = Field(None, alias="glossary_meta_alias")
    sourceNs: Optional[str] = Field(None, alias="source_ns")
    sourceSa: Optional[str] = Field(None, alias="source_sa")
    sourceEn: Optional[str] = Field(None, alias="source_en")
    sourceEnId: str = Field("", alias="source_en_id")
    sourceColumn: str = Field(alias="source_column")
    sourceExpression: str = Field(alias="source_expression")

class Blueprint(BaseModel):
    metas: List[MetaRequest] = Field(default_factory=list)
    mappings: List[MappingSuggestion] = Field(default_factory=list)

def standardizedMetas(response: Any) -> List[Dict[str, Any]]:
    if not isinstance(response, dict):
        return []
    returnData = response.get("return_data") or {}
    metas = returnData.get("standardized_metas") or []
    named = [meta for meta in metas if isinstance(meta, dict) and meta.get("name")]
    if len(named) != len(metas):
        logger.warning("Skipped %d suggested meta(s) without a name", len(metas) - len(named))
    return named

def toMetaDraft(meta: Dict[str, Any], index: int, defaultOrder: int) -> MetaRequest:
    nullable = meta.get("nullable")
    isPrimaryGrain = meta.get("is_primary_grain")
    return MetaRequest(
        id=f"temp-{index}",
        name=meta.get("name"),
        type=meta.get("type"),
        subtype=meta.get("subtype") or "",
        alias=meta.get("alias") or "",
        description=meta.get("description") or "",
        order=meta.get("order") or defaultOrder,
        length=meta.get("length") or None,
        default=meta.get("default") or None,
        nullable=True if nullable is None else nullable,
        format=meta.get("format") or None,
        # only the primary grain survives, the rest is chosen by the user
        isPrimaryGrain=False if isPrimaryGrain is None else isPrimaryGrain,
        isSecondaryGrain=False,
        isTertiaryGrain=False,
        tags="",
        customProps=[],
    )

def toMappingSuggestions(meta: Dict[str, Any]) -> List[MappingSuggestion]:
    return [
        MappingSuggestion(
            glossaryMetaName=meta.get("name"),
            glossaryMetaAlias=meta.get("alias"),
            sourceNs=rawColumn.get("ns"),
            sourceSa=rawColumn.get("sa"),
            sourceEn=rawColumn.get("en"),
            sourceEnId=rawColumn.get("en_id") or "",
            sourceColumn=rawColumn.get("name"),
            sourceExpression=rawColumn.get("name"),
        )
        for rawColumn in meta.get("raw_columns") or []
        if isinstance(rawColumn, dict) and rawColumn.get("name")
    ]

def transformSuggestions(response: Any) -> Blueprint:
    metas = standardizedMetas(response)
    return Blueprint(
        metas=[toMetaDraft(meta, index, 0) for index, meta in enumerate(metas)],
        mappings=[suggestion for meta in metas for suggestion in toMappingSuggestions(meta)],
    )

def transformCustomBlueprint(response: Any) -> Blueprint:
    metas = standardizedMetas(response)
    # no source entity behind a custom blueprint, so nothing to map
    return Blueprint(metas=[toMetaDraft(meta, index, index) for index, meta in enumerate(metas)])

async def generateSuggestions(rest: CatalogRestClient, request: GlossarySuggestionsRequest) -> Blueprint:
    return transformSuggestions(await rest.generateGlossarySuggestions(request))

async def generateCustomBlueprint(rest: CatalogRestClient, request: CustomBlueprintRequest) -> Blueprint:
    return transformCustomBlueprint(await rest.generateCustomBlueprint(request))
