import time
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Any, Optional, Literal

from metaconsole.models.catalog_models import Entity, Meta, Rule, Ruleset

class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def toPayload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

def clientId(row: Dict[str, Any]) -> Optional[str]:
    # Draft rows carry a client-local id the server has never seen
    if row.get("_status") == "draft":
        return None
    return row.get("id")

def blankToNone(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value

def parseYesNo(value: Any) -> Optional[bool]:
    if isinstance(value, bool) or value is None:
        return value
    text = str(value).strip().lower()
    if text in ("yes", "true", "y", "1"):
        return True
    if text in ("no", "false", "n", "0"):
        return False
    return None

class NamespaceRequest(RequestModel):
    id: Optional[str] = None
    name: str
    type: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[Any] = None

    @classmethod
    def fromRow(cls, row: Dict[str, Any]) -> "NamespaceRequest":
        return cls(
            id=clientId(row),
            name=row.get("name"),
            type=blankToNone(row.get("type")),
            status=blankToNone(row.get("status")),
            tags=blankToNone(row.get("tags")),
        )

class SubjectAreaRequest(RequestModel):
    id: Optional[str] = None
    name: str
    nsId: Optional[str] = Field(None, alias="ns_id")
    ns: Optional[str] = None
    type: Optional[str] = None
    tags: Optional[Any] = None

    @classmethod
    def fromRow(cls, row: Dict[str, Any]) -> "SubjectAreaRequest":
        return cls(
            id=clientId(row),
            name=row.get("name"),
            nsId=blankToNone(row.get("ns_id")),
            ns=blankToNone(row.get("namespace_name")),
            type=blankToNone(row.get("type")),
            tags=blankToNone(row.get("tags")),
        )

class EntityRequest(RequestModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    saId: Optional[str] = Field(None, alias="sa_id")
    ns: Optional[str] = None
    sa: Optional[str] = None
    isDelta: Optional[bool] = Field(None, alias="is_delta")
    primaryGrain: Optional[str] = Field(None, alias="primary_grain")
    secondaryGrain: Optional[str] = Field(None, alias="secondary_grain")
    tertiaryGrain: Optional[str] = Field(None, alias="tertiary_grain")

    @classmethod
    def fromRow(cls, row: Dict[str, Any]) -> "EntityRequest":
        return cls(
            id=clientId(row),
            name=row.get("name"),
            description=blankToNone(row.get("description")),
            type=blankToNone(row.get("type")),
            subtype=blankToNone(row.get("subtype")),
            saId=blankToNone(row.get("sa_id")),
            ns=blankToNone(row.get("namespace_name")),
            sa=blankToNone(row.get("subjectarea_name")),
            isDelta=parseYesNo(row.get("is_delta")),
            primaryGrain=blankToNone(row.get("primary_grain")),
        )

class MetaRequest(RequestModel):
    id: Optional[str] = None
    name: str
    alias: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    nullable: Optional[bool] = None
    order: Optional[int] = None
    length: Optional[int] = None
    default: Optional[str] = None
    description: Optional[str] = None
    format: Optional[str] = None
    isPrimaryGrain: Optional[bool] = Field(None, alias="is_primary_grain")
    isSecondaryGrain: Optional[bool] = Field(None, alias="is_secondary_grain")
    isTertiaryGrain: Optional[bool] = Field(None, alias="is_tertiary_grain")
    tags: Optional[str] = None
    customProps: Optional[List[Any]] = Field(None, alias="custom_props")

    @classmethod
    def fromRow(cls, row: Dict[str, Any]) -> "MetaRequest":
        order = blankToNone(row.get("order"))
        return cls(
            id=clientId(row),
            name=row.get("name"),
            alias=blankToNone(row.get("alias")),
            type=blankToNone(row.get("type")),
            nullable=parseYesNo(row.get("nullable")),
            order=int(order) if order is not None else None,
            default=blankToNone(row.get("default")),
            description=blankToNone(row.get("description")),
            isPrimaryGrain=row.get("is_primary_grain"),
            isSecondaryGrain=row.get("is_secondary_grain"),
            isTertiaryGrain=row.get("is_tertiary_grain"),
        )

class CreateEntityWithMetaRequest(RequestModel):
    entityRequest: EntityRequest = Field(alias="entity_request")
    metaRequests: List[MetaRequest] = Field(default_factory=list, alias="meta_requests")

ObjectType = Literal["namespace", "subjectarea", "entity", "meta"]

class DeleteRequest(RequestModel):
    objectType: ObjectType = Field(alias="object_type")
    ids: List[str]

class AutoDetectStagingParams(RequestModel):
    ns: str
    sa: str
    en: str
    nsType: str = Field("staging", alias="ns_type")
    createMeta: bool = Field(True, alias="create_meta")
    loadData: bool = Field(False, alias="load_data")
    primaryGrain: str = Field("", alias="primary_grain")

    def toQueryParams(self) -> Dict[str, str]:
        return {
            "ns": self.ns,
            "sa": self.sa,
            "en": self.en,
            "ns_type": self.nsType,
            "create_meta": str(self.createMeta).lower(),
            "load_data": str(self.loadData).lower(),
            "primary_grain": self.primaryGrain or "",
        }

class GlossarySuggestionsRequest(RequestModel):
    entityIds: List[str] = Field(alias="entity_ids")
    targetNs: str = Field(alias="target_ns")
    targetSa: str = Field(alias="target_sa")

class CustomBlueprintRequest(RequestModel):
    topic: str
    numFields: int = Field(alias="num_fields", ge=1)
    exampleData: str = Field("", alias="example_data")
    targetNs: str = Field(alias="target_ns")
    targetSa: str = Field(alias="target_sa")
    targetEn: str = Field(alias="target_en")

class EntityCore(RequestModel):
    ns: str
    sa: str
    en: str
    nsType: Optional[str] = Field(None, alias="ns_type")
    nsId: Optional[str] = Field(None, alias="ns_id")
    saId: Optional[str] = Field(None, alias="sa_id")
    enId: Optional[str] = Field(None, alias="en_id")

    @classmethod
    def fromEntity(cls, entity: Entity, nsType: Optional[str] = None) -> "EntityCore":
        nsId = None
        if entity.subjectarea and entity.subjectarea.namespace:
            nsId = entity.subjectarea.namespace.id
        return cls(
            ns=entity.namespaceName or "",
            sa=entity.subjectAreaName or "",
            en=entity.name,
            nsType=nsType,
            nsId=nsId,
            saId=entity.saId,
            enId=entity.id,
        )

class RuleRequest(RequestModel):
    id: Optional[str] = None
    type: str
    subtype: str
    name: str
    alias: Optional[str] = None
    description: Optional[str] = None
    ruleStatus: str = Field("active", alias="rule_status")
    isShared: Optional[bool] = Field(None, alias="is_shared")
    ruleExpression: str = Field(alias="rule_expression")
    rulePriority: Optional[int] = Field(None, alias="rule_priority")
    ruleCategory: Optional[str] = Field(None, alias="rule_category")
    ruleTags: Optional[str] = Field(None, alias="rule_tags")
    ruleParams: Optional[str] = Field(None, alias="rule_params")
    color: Optional[str] = None
    language: str = "sql"
    fnName: Optional[str] = Field(None, alias="fn_name")
    fnPackage: Optional[str] = Field(None, alias="fn_package")
    fnImports: Optional[str] = Field(None, alias="fn_imports")
    updateStrategy: Optional[str] = Field(None, alias="update_strategy_")
    metaId: Optional[str] = Field(None, alias="meta_id")
    meta: Optional[str] = None

class SourceRequest(RequestModel):
    type: str = "DIRECT"
    sourceNs: str = Field(alias="source_ns")
    sourceSa: str = Field(alias="source_sa")
    sourceEn: str = Field(alias="source_en")
    sourceFilter: Optional[str] = Field(None, alias="source_filter")
    sourceEnId: Optional[str] = Field(None, alias="source_en_id")
    sourceId: Optional[str] = Field(None, alias="source_id")
    sqlOverride: Optional[str] = Field(None, alias="sql_override")

class TransformRequest(RequestModel):
    id: str = ""
    strategy: str = "sql"
    type: str = "passive"
    subtype: str = "standard"
    name: str = "Direct mapping"
    status: str = "Active"
    transformConfig: Dict[str, Any] = Field(default_factory=dict, alias="transform_config")

class RulesetRequest(RequestModel):
    id: Optional[str] = None
    type: str
    name: str
    description: Optional[str] = None
    viewName: Optional[str] = Field(None, alias="view_name")
    targetEnId: Optional[str] = Field(None, alias="target_en_id")
    sourceId: Optional[str] = Field(None, alias="source_id")
    transformId: Optional[str] = Field(None, alias="transform_id")
    ruleRequests: List[RuleRequest] = Field(default_factory=list, alias="rule_requests")

class CreateRulesetRequest(RequestModel):
    entityCore: EntityCore = Field(alias="entity_core")
    rulesetRequest: RulesetRequest = Field(alias="ruleset_request")
    sourceRequest: Optional[SourceRequest] = Field(None, alias="source_request")
    transformRequest: Optional[TransformRequest] = Field(None, alias="transform_request")

class LocalRule(RequestModel):
    name: str
    ruleExpression: str = Field(alias="rule_expression")
    subtype: str = "check"
    enabled: bool = True

class GlossaryMapping(RequestModel):
    glossaryMetaId: Optional[str] = Field(None, alias="glossary_meta_id")
    glossaryMetaName: str = Field(alias="glossary_meta_name")
    sourceExpression: str = Field(alias="source_expression")
    sourceNs: Optional[str] = Field(None, alias="source_ns")
    sourceSa: Optional[str] = Field(None, alias="source_sa")
    sourceEnName: Optional[str] = Field(None, alias="source_en_name")
    sourceEnId: Optional[str] = Field(None, alias="source_en_id")

class PublishConfigRequest(RequestModel):
    glossaryEntityFqn: str = Field(alias="glossary_entity_fqn")
    targetRuntime: str = Field("duckdb", alias="target_runtime")
    targetProfile: str = Field(alias="target_profile")
    targetNamespace: str = Field(alias="target_namespace")
    targetSchema: str = Field(alias="target_schema")
    targetName: str = Field(alias="target_name")
    targetFqn: str = Field(alias="target_fqn")
    materializeAs: str = Field("table", alias="materialize_as")
    status: str = "draft"
    version: int = 1

class PublishColumn(RequestModel):
    target: str
    glossary: str
    description: str = ""

class BuildPublishRequest(RequestModel):
    publishConfigRequest: PublishConfigRequest = Field(alias="publish_config_request")
    publishColumns: List[PublishColumn] = Field(alias="publish_columns")
    entityCore: EntityCore = Field(alias="entity_core")
    sourceRequest: SourceRequest = Field(alias="source_request")
    rulesetRequest: RulesetRequest = Field(alias="ruleset_request")

class LoadPublishRequest(RequestModel):
    targetEnCore: EntityCore = Field(alias="target_en_core")
    loaderCfg: Dict[str, Any] = Field(default_factory=dict, alias="loader_cfg")

class DeleteRulesRequest(RequestModel):
    ids: List[str]


def buildDqRulesetRequest(
    entityCore: EntityCore,
    existingRules: List[Rule],
    localRules: List[LocalRule],
    columnName: str,
) -> CreateRulesetRequest:
    ruleRequests = [
        RuleRequest(
            id=rule.id,
            type=rule.type or "dq",
            subtype=rule.subtype or "check",
            name=rule.name,
            alias=rule.alias or rule.name,
            description=rule.description or rule.name,
            ruleStatus=rule.ruleStatus or "active",
            isShared=rule.isShared,
            ruleExpression=rule.ruleExpression,
            language=rule.language or "sql",
            metaId=rule.metaId,
            meta=rule.metaName,
        )
        for rule in existingRules
    ]
    ruleRequests.extend(
        RuleRequest(
            type="dq",
            subtype=rule.subtype,
            name=rule.name,
            description=rule.name,
            ruleStatus="active" if rule.enabled else "inactive",
            ruleExpression=rule.ruleExpression,
            meta=columnName,
            language="sql",
        )
        for rule in localRules
    )

    core = entityCore.model_copy(update={"nsType": "staging"})
    rulesetName = f"{core.ns}_{core.sa}_{core.en}_dq"
    return CreateRulesetRequest(
        entityCore=core,
        rulesetRequest=RulesetRequest(
            type="dq",
            name=rulesetName,
            description=rulesetName,
            ruleRequests=ruleRequests,
        ),
    )


def buildGlossaryMappingRequest(
    glossaryEntity: Entity,
    sourceEnId: str,
    mappings: List[GlossaryMapping],
    timestampMs: Optional[int] = None,
) -> CreateRulesetRequest:
    if not mappings:
        raise ValueError("At least one mapping is required to build a mapping ruleset.")
    stamp = timestampMs if timestampMs is not None else int(time.time() * 1000)
    firstMapping = mappings[0]

    ruleRequests = [
        RuleRequest(
            id=f"rule_{mapping.glossaryMetaId}_{stamp}_{index}",
            type="transformation",
            subtype="mapping",
            name=mapping.glossaryMetaName,
            alias=mapping.sourceExpression,
            description=f"Mapping for {mapping.glossaryMetaName}",
            ruleStatus="active",
            isShared=False,
            ruleExpression=mapping.sourceExpression,
            rulePriority=index,
            ruleCategory="mapping",
            ruleTags="",
            ruleParams="",
            color="",
            language="sql",
            fnName="",
            fnPackage="",
            fnImports="",
            updateStrategy="I",
            metaId=mapping.glossaryMetaId,
            meta=mapping.glossaryMetaName,
        )
        for index, mapping in enumerate(mappings)
    ]

    return CreateRulesetRequest(
        entityCore=EntityCore.fromEntity(glossaryEntity, nsType="glossary"),
        rulesetRequest=RulesetRequest(
            id=f"rs_{glossaryEntity.id}_{sourceEnId}_{stamp}",
            type="glossary_association",
            name=f"{glossaryEntity.name} to {firstMapping.sourceEnName} mapping",
            description="Auto-generated mapping from standardized blueprint",
            viewName="",
            targetEnId=glossaryEntity.id,
            sourceId=f"src_{sourceEnId}_{stamp}",
            transformId=f"trns_{stamp}",
            ruleRequests=ruleRequests,
        ),
        sourceRequest=SourceRequest(
            sourceNs=firstMapping.sourceNs or "",
            sourceSa=firstMapping.sourceSa or "",
            sourceEn=firstMapping.sourceEnName or "",
            sourceFilter="",
            sourceEnId=sourceEnId,
            sourceId="",
            sqlOverride="",
        ),
        transformRequest=TransformRequest(),
    )


def buildPublishRequest(
    glossaryEntity: Entity,
    sourceEntity: Entity,
    selectedMetas: List[str],
    metaFields: List[Meta],
    rulesets: List[Ruleset],
    projectCode: str,
) -> BuildPublishRequest:
    sourceExpressions: Dict[str, str] = {}
    for ruleset in rulesets:
        for rule in ruleset.rules:
            if rule.metaName:
                sourceExpressions[rule.metaName] = rule.ruleExpression

    metaByAlias = {meta.alias: meta for meta in metaFields if meta.alias}
    publishColumns = [
        PublishColumn(
            target=metaName,
            glossary=metaName,
            description=(metaByAlias[metaName].description or "") if metaName in metaByAlias else "",
        )
        for metaName in selectedMetas
    ]
    ruleRequests = [
        RuleRequest(
            meta=metaName,
            ruleExpression=sourceExpressions.get(metaName, metaName),
            name=f"{metaName}_rule",
            description=f"{metaName}_rule",
            language="sql",
            ruleStatus="active",
            subtype=".",
            type="model",
        )
        for metaName in selectedMetas
    ]

    ns = glossaryEntity.namespaceName or ""
    sa = glossaryEntity.subjectAreaName or ""
    publishNs = f"{ns}_publish"
    return BuildPublishRequest(
        publishConfigRequest=PublishConfigRequest(
            glossaryEntityFqn=glossaryEntity.fqn,
            targetProfile=projectCode,
            targetNamespace=publishNs,
            targetSchema=sa,
            targetName=glossaryEntity.name,
            targetFqn=f"{publishNs}.{sa}.{glossaryEntity.name}",
        ),
        publishColumns=publishColumns,
        entityCore=EntityCore(ns=publishNs, sa=sa, en=glossaryEntity.name, nsType="model"),
        sourceRequest=SourceRequest(
            sourceNs=sourceEntity.namespaceName or "",
            sourceSa=sourceEntity.subjectAreaName or "",
            sourceEn=sourceEntity.name,
        ),
        rulesetRequest=RulesetRequest(
            name=f"{glossaryEntity.name}_publish_ruleset",
            type="glossary_publish",
            description=f"Column selection and transforms for {glossaryEntity.name} publishing",
            ruleRequests=ruleRequests,
        ),
    )


def buildLoadPublishRequest(glossaryEntity: Entity) -> LoadPublishRequest:
    core = EntityCore.fromEntity(glossaryEntity, nsType="model")
    return LoadPublishRequest(
        targetEnCore=core.model_copy(update={"ns": f"{core.ns}_publish"}),
    )
