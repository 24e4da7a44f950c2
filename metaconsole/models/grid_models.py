from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional, Union, Literal

class ColumnType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    CHECKBOX = "checkbox"

class RowStatus(str, Enum):
    DRAFT = "draft"
    EDITED = "edited"
    NORMAL = "normal"

class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

class SelectOption(BaseModel):
    value: str
    label: str

class Column(BaseModel):
    key: str
    title: str
    type: ColumnType = ColumnType.TEXT
    options: Optional[List[Union[str, SelectOption]]] = None
    required: bool = False

    def defaultValue(self) -> Any:
        return False if self.type == ColumnType.CHECKBOX else ""

class SortState(BaseModel):
    column: Optional[str] = None
    direction: SortDirection = SortDirection.ASC

class GroupNode(BaseModel):
    path: str
    column: str
    value: str
    level: int
    count: int
    expanded: bool = False
    groups: Optional[List["GroupNode"]] = None
    rows: Optional[List[Dict[str, Any]]] = None

class GridView(BaseModel):
    gridId: Optional[str] = None
    entityType: str
    columns: List[Column]
    totalCount: int
    filteredCount: int
    visibleCount: int
    hasMore: bool
    rows: Optional[List[Dict[str, Any]]] = None
    groups: Optional[List[GroupNode]] = None
    searchTerm: str = ""
    columnFilters: Dict[str, str] = Field(default_factory=dict)
    sort: SortState = Field(default_factory=SortState)
    groupBy: List[str] = Field(default_factory=list)
    selectedIds: List[str] = Field(default_factory=list)
    editingIds: List[str] = Field(default_factory=list)
    hasChanges: bool = False
    newlyAddedIds: List[str] = Field(default_factory=list)

class SearchUpdate(BaseModel):
    term: str = ""

class FilterUpdate(BaseModel):
    value: str = ""

class GroupByUpdate(BaseModel):
    columns: List[str] = Field(default_factory=list)

class GroupToggle(BaseModel):
    path: str

class ScrollEvent(BaseModel):
    offset: float = Field(ge=0)
    viewportSize: float = Field(ge=0)
    contentSize: float = Field(ge=0)

class SelectionUpdate(BaseModel):
    ids: List[str] = Field(default_factory=list)

class EditModeUpdate(BaseModel):
    mode: Literal["toggle", "all", "selected", "clear"] = "toggle"

class CellUpdate(BaseModel):
    values: Dict[str, Any]

class RowDeletion(BaseModel):
    ids: Optional[List[str]] = None

class ExportLocation(BaseModel):
    location: str
    rowCount: int

GroupNode.model_rebuild()
