from pydantic import BaseModel, ConfigDict, Field
from typing import List, Any, Optional, Literal

from metaconsole.models.grid_models import GridView
from metaconsole.models.request_models import EntityRequest, MetaRequest, LocalRule, GlossaryMapping

class ConsoleConfig(BaseModel):
    restEndpoint: str
    graphqlEndpoint: str
    analyticalDatabasePath: str
    motherduckDatabase: Optional[str] = None
    motherduckSchema: Optional[str] = None
    motherduckTokenConfigured: bool
    gridWindowSize: int
    gridScrollThreshold: float
    healthCheckInterval: float

class IdsBody(BaseModel):
    ids: List[str] = Field(min_length=1)

class EntityWithMetaBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entityRequest: EntityRequest = Field(alias="entity_request")
    metaRequests: List[MetaRequest] = Field(default_factory=list, alias="meta_requests")

class ApplyRulesBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    columnName: str = Field(alias="column_name")
    rules: List[LocalRule]

class SaveMappingsBody(BaseModel):
    mappings: List[GlossaryMapping]

class PublishBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selectedMetas: List[str] = Field(alias="selected_metas")
    projectCode: str = Field("model", alias="project_code")

GridKind = Literal["namespace", "subjectarea", "entity", "meta"]

class CatalogGridCreate(BaseModel):
    kind: GridKind
    # entity id for meta grids, namespace id for subject areas, subject area id for entities
    parentId: Optional[str] = None

class PreviewGridCreate(BaseModel):
    enId: str
    limit: Optional[int] = Field(None, ge=1)

class GridCreated(BaseModel):
    gridId: str
    view: GridView

class StagingResult(BaseModel):
    draftRows: bool
    stagingRows: List[Any] = Field(default_factory=list)
    result: Any = None
