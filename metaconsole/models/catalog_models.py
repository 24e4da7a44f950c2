from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Any

class CatalogModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

class NamespaceRef(CatalogModel):
    id: Optional[str] = None
    name: str
    type: Optional[str] = None

class SubjectAreaRef(CatalogModel):
    name: str
    namespace: Optional[NamespaceRef] = None

class Namespace(CatalogModel):
    id: str
    name: str
    status: Optional[str] = None
    tags: Optional[Any] = None # server sends either a list or a comma separated string
    type: Optional[str] = None

class SubjectArea(CatalogModel):
    id: str
    name: str
    nsId: Optional[str] = Field(None, alias="ns_id")
    tags: Optional[Any] = None
    type: Optional[str] = None
    namespace: Optional[NamespaceRef] = None

class Meta(CatalogModel):
    id: str
    name: str
    alias: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    nullable: Optional[bool] = None
    order: Optional[int] = None
    length: Optional[int] = None
    default: Optional[str] = None
    description: Optional[str] = None
    isPrimaryGrain: Optional[bool] = Field(None, alias="is_primary_grain")
    isSecondaryGrain: Optional[bool] = Field(None, alias="is_secondary_grain")
    isTertiaryGrain: Optional[bool] = Field(None, alias="is_tertiary_grain")

    def grainInfo(self) -> str:
        levels = []
        if self.isPrimaryGrain:
            levels.append("Primary")
        if self.isSecondaryGrain:
            levels.append("Secondary")
        if self.isTertiaryGrain:
            levels.append("Tertiary")
        return f"{' '.join(levels)} Grain" if levels else ""

class Entity(CatalogModel):
    id: str
    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    saId: Optional[str] = Field(None, alias="sa_id")
    isDelta: Optional[bool] = Field(None, alias="is_delta")
    primaryGrain: Optional[str] = Field(None, alias="primary_grain")
    secondaryGrain: Optional[str] = Field(None, alias="secondary_grain")
    tertiaryGrain: Optional[str] = Field(None, alias="tertiary_grain")
    runtime: Optional[str] = None
    subjectarea: Optional[SubjectAreaRef] = None
    metas: Optional[List[Meta]] = None

    @property
    def namespaceName(self) -> Optional[str]:
        if self.subjectarea and self.subjectarea.namespace:
            return self.subjectarea.namespace.name
        return None

    @property
    def subjectAreaName(self) -> Optional[str]:
        return self.subjectarea.name if self.subjectarea else None

    @property
    def fqn(self) -> str:
        return f"{self.namespaceName}.{self.subjectAreaName}.{self.name}"

class RuleMetaRef(CatalogModel):
    name: str

class Rule(CatalogModel):
    id: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    name: str
    alias: Optional[str] = None
    description: Optional[str] = None
    ruleStatus: Optional[str] = Field(None, alias="rule_status")
    isShared: Optional[bool] = Field(None, alias="is_shared")
    ruleExpression: str = Field("", alias="rule_expression")
    language: Optional[str] = None
    metaId: Optional[str] = Field(None, alias="meta_id")
    meta: Optional[Any] = None # plain name on write, {name} on some reads

    @property
    def metaName(self) -> Optional[str]:
        if isinstance(self.meta, dict):
            return self.meta.get("name")
        return self.meta

class RulesetSource(CatalogModel):
    sourceEntity: Optional[Entity] = Field(None, alias="source_entity")

class Ruleset(CatalogModel):
    id: str
    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    viewName: Optional[str] = Field(None, alias="view_name")
    targetEnId: Optional[str] = Field(None, alias="target_en_id")
    sourceId: Optional[str] = Field(None, alias="source_id")
    transformId: Optional[str] = Field(None, alias="transform_id")
    rules: List[Rule] = Field(default_factory=list)
    source: Optional[RulesetSource] = None

class ConceptualModel(CatalogModel):
    id: str
    name: Optional[str] = None
    projectCode: Optional[str] = None
    conceptualModelFqn: Optional[str] = None
    glossaryEntityFqn: Optional[str] = None
    glossaryEntityId: Optional[str] = None
    selectedMetas: List[RuleMetaRef] = Field(default_factory=list, alias="selected_metas")
    associatedSourceEntities: List[Entity] = Field(default_factory=list, alias="associated_source_entities")

class RelatedEntity(Entity):
    conceptualModels: List[ConceptualModel] = Field(default_factory=list, alias="conceptual_models")

class EntityRelation(CatalogModel):
    id: str
    relatedEnId: Optional[str] = Field(None, alias="related_en_id")
    relationType: Optional[str] = Field(None, alias="relation_type")
    targetEnId: Optional[str] = Field(None, alias="target_en_id")
    relatedEntity: Optional[RelatedEntity] = Field(None, alias="related_entity")
