"""Row pipeline for the data grid: search, column filters, sort, group, CSV.

Every function here is pure. Rows are plain dicts carrying an ``id`` and an
optional ``_status`` marker; columns are ``Column`` descriptors.
"""
import csv
import io
import re
from datetime import date
from functools import cmp_to_key
from typing import List, Dict, Any, Optional, Iterable

from metaconsole.models.grid_models import Column, GroupNode, RowStatus, SortDirection, SortState

UNGROUPED = "Ungrouped"
GROUP_PATH_SEPARATOR = "/"
GROUP_PATH_ESCAPE = "\\"

Row = Dict[str, Any]

def stringifyValue(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

def isDraft(row: Row) -> bool:
    return row.get("_status") == RowStatus.DRAFT

def applySearch(rows: Iterable[Row], columns: List[Column], searchTerm: str) -> List[Row]:
    if not searchTerm:
        return list(rows)
    needle = searchTerm.lower()
    return [
        row for row in rows
        if any(needle in stringifyValue(row.get(col.key)).lower() for col in columns)
    ]

def applyColumnFilters(rows: Iterable[Row], columnFilters: Dict[str, str]) -> List[Row]:
    filtered = list(rows)
    for columnKey, filterValue in columnFilters.items():
        if not filterValue:
            continue
        needle = filterValue.lower()
        filtered = [row for row in filtered if needle in stringifyValue(row.get(columnKey)).lower()]
    return filtered

def _isNumber(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def compareValues(aValue: Any, bValue: Any) -> int:
    if isinstance(aValue, bool) and isinstance(bValue, bool):
        if aValue == bValue:
            return 0
        return -1 if aValue else 1
    if _isNumber(aValue) and _isNumber(bValue):
        return (aValue > bValue) - (aValue < bValue)
    aKey = collationKey(stringifyValue(aValue))
    bKey = collationKey(stringifyValue(bValue))
    return (aKey > bKey) - (aKey < bKey)

def collationKey(text: str) -> tuple:
    # Letters compare case-insensitively first; on a tie lowercase sorts ahead of uppercase
    return (text.casefold(), text.swapcase())

def sortRows(rows: Iterable[Row], sort: SortState) -> List[Row]:
    def compareRows(a: Row, b: Row) -> int:
        aDraft, bDraft = isDraft(a), isDraft(b)
        if aDraft and not bDraft:
            return -1
        if bDraft and not aDraft:
            return 1
        if sort.column is None:
            return 0

        aValue = a.get(sort.column)
        bValue = b.get(sort.column)
        # Missing values sink to the bottom in both directions
        if aValue is None and bValue is None:
            return 0
        if aValue is None:
            return 1
        if bValue is None:
            return -1

        comparison = compareValues(aValue, bValue)
        return comparison if sort.direction == SortDirection.ASC else -comparison

    return sorted(rows, key=cmp_to_key(compareRows))

def nextSortState(current: SortState, columnKey: str) -> SortState:
    if current.column != columnKey:
        return SortState(column=columnKey, direction=SortDirection.ASC)
    if current.direction == SortDirection.ASC:
        return SortState(column=columnKey, direction=SortDirection.DESC)
    return SortState()

def groupValue(value: Any) -> str:
    text = stringifyValue(value)
    return text if text != "" else UNGROUPED

def groupPathSegment(value: str) -> str:
    escaped = value.replace(GROUP_PATH_ESCAPE, GROUP_PATH_ESCAPE * 2)
    return escaped.replace(GROUP_PATH_SEPARATOR, GROUP_PATH_ESCAPE + GROUP_PATH_SEPARATOR)

def groupRows(rows: List[Row], groupColumns: List[str], level: int = 0, parentPath: str = "") -> List[GroupNode]:
    if level >= len(groupColumns):
        return []

    column = groupColumns[level]
    buckets: Dict[str, List[Row]] = {}
    for row in rows:
        buckets.setdefault(groupValue(row.get(column)), []).append(row)

    isLeafLevel = level + 1 >= len(groupColumns)
    nodes = []
    for value, members in buckets.items():
        segment = groupPathSegment(value)
        path = f"{parentPath}{GROUP_PATH_SEPARATOR}{segment}" if parentPath else segment
        node = GroupNode(path=path, column=column, value=value, level=level, count=len(members))
        if isLeafLevel:
            node.rows = members
        else:
            node.groups = groupRows(members, groupColumns, level + 1, path)
        nodes.append(node)
    return nodes

def countGroupedRows(nodes: List[GroupNode]) -> int:
    total = 0
    for node in nodes:
        if node.rows is not None:
            total += len(node.rows)
        elif node.groups:
            total += countGroupedRows(node.groups)
    return total

def collapseGroups(nodes: List[GroupNode], expandedPaths: set) -> List[GroupNode]:
    collapsed = []
    for node in nodes:
        expanded = node.path in expandedPaths
        collapsed.append(node.model_copy(update={
            "expanded": expanded,
            "rows": node.rows if expanded else None,
            "groups": collapseGroups(node.groups, expandedPaths) if expanded and node.groups else None,
        }))
    return collapsed

def exportCsv(rows: Iterable[Row], columns: List[Column]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([col.title for col in columns])
    for row in rows:
        writer.writerow([stringifyValue(row.get(col.key)) for col in columns])
    return buffer.getvalue()

def exportFileName(entityType: str, onDate: Optional[date] = None) -> str:
    slug = re.sub(r"\s+", "_", entityType.lower())
    return f"{slug}_data_{(onDate or date.today()).isoformat()}.csv"
