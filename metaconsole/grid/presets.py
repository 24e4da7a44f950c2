from typing import List, Dict, Any

from metaconsole.models.grid_models import Column, ColumnType
from metaconsole.models.catalog_models import Namespace, SubjectArea, Entity, Meta
from metaconsole.models.console_models import GridKind

NAMESPACE_COLUMNS = [
    Column(key="name", title="Name", required=True),
    Column(key="status", title="Status"),
    Column(key="type", title="Type"),
    Column(key="tags", title="Tags"),
]

SUBJECTAREA_COLUMNS = [
    Column(key="name", title="Subject Area Name", required=True),
    Column(key="namespace_name", title="NameSpace", required=True),
    Column(key="namespace_type", title="NameSpace Type"),
    Column(key="type", title="Type"),
    Column(key="tags", title="Tags"),
]

ENTITY_COLUMNS = [
    Column(key="name", title="Entity Name", required=True),
    Column(key="type", title="Type"),
    Column(key="subtype", title="Subtype"),
    Column(key="description", title="Description"),
    Column(key="subjectarea_name", title="Subject Area", required=True),
    Column(key="namespace_name", title="NameSpace", required=True),
    Column(key="is_delta", title="Delta Enabled", type=ColumnType.SELECT, options=["Yes", "No"]),
    Column(key="primary_grain", title="Primary Grain"),
]

META_COLUMNS = [
    Column(key="name", title="Field Name", required=True),
    Column(key="type", title="Data Type"),
    Column(key="nullable", title="Nullable", type=ColumnType.SELECT, options=["Yes", "No"]),
    Column(key="default", title="Default Value"),
    Column(key="description", title="Description"),
    Column(key="alias", title="Alias"),
    Column(key="order", title="Order", type=ColumnType.NUMBER),
    Column(key="grain_info", title="Grain Level"),
]

ENTITY_TYPES = {
    "namespace": "Namespace",
    "subjectarea": "Subject Area",
    "entity": "Entity",
    "meta": "Meta Field",
}

def joinTags(tags: Any) -> str:
    if isinstance(tags, list):
        return ", ".join(str(tag) for tag in tags)
    return tags or ""

def yesNo(flag: Any) -> str:
    return "Yes" if flag else "No"

def namespaceRow(namespace: Namespace) -> Dict[str, Any]:
    return {
        "id": namespace.id,
        "name": namespace.name,
        "status": namespace.status,
        "type": namespace.type,
        "tags": joinTags(namespace.tags),
    }

def subjectAreaRow(subjectArea: SubjectArea) -> Dict[str, Any]:
    namespace = subjectArea.namespace
    return {
        "id": subjectArea.id,
        "name": subjectArea.name,
        "namespace_name": namespace.name if namespace else "",
        "namespace_type": namespace.type if namespace else "",
        "type": subjectArea.type,
        "tags": joinTags(subjectArea.tags),
        # kept for writes, not displayed
        "ns_id": subjectArea.nsId,
    }

def entityRow(entity: Entity) -> Dict[str, Any]:
    return {
        "id": entity.id,
        "name": entity.name,
        "type": entity.type,
        "subtype": entity.subtype or "",
        "description": entity.description or "",
        "subjectarea_name": entity.subjectAreaName or "",
        "namespace_name": entity.namespaceName or "",
        "is_delta": yesNo(entity.isDelta),
        "primary_grain": entity.primaryGrain or "",
        "sa_id": entity.saId,
    }

def metaRow(meta: Meta) -> Dict[str, Any]:
    return {
        "id": meta.id,
        "name": meta.name,
        "type": meta.type,
        "nullable": yesNo(meta.nullable),
        "default": meta.default or "",
        "description": meta.description or "",
        "alias": meta.alias or "",
        "order": meta.order or 0,
        "grain_info": meta.grainInfo(),
        "is_primary_grain": bool(meta.isPrimaryGrain),
        "is_secondary_grain": bool(meta.isSecondaryGrain),
        "is_tertiary_grain": bool(meta.isTertiaryGrain),
    }

def columnsFor(kind: GridKind) -> List[Column]:
    return {
        "namespace": NAMESPACE_COLUMNS,
        "subjectarea": SUBJECTAREA_COLUMNS,
        "entity": ENTITY_COLUMNS,
        "meta": META_COLUMNS,
    }[kind]

def previewColumns(columnNames: List[str]) -> List[Column]:
    return [Column(key=name, title=name) for name in columnNames]

def previewRows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    # A table id column keys the rows only when it is non-null and unique; otherwise the position does
    tableIds = [row.get("id") for row in rows]
    useTableIds = None not in tableIds and len({str(rowId) for rowId in tableIds}) == len(rows)
    return [
        {**row, "id": str(row["id"]) if useTableIds else str(index)}
        for index, row in enumerate(rows)
    ]
