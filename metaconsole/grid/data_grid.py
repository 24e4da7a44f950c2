import inspect
import logging
from copy import deepcopy
from datetime import date
from typing import List, Dict, Any, Optional, Callable, Union

from metaconsole.models.grid_models import Column, GridView, RowStatus, SortState
from metaconsole.grid import table_view
from metaconsole.grid.edit_buffer import EditBuffer
from metaconsole.grid.row_window import RowWindow
from metaconsole.core.exceptions import BadRequestException, GridStateException, ValidationException

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Callback = Optional[Callable[..., Any]]

async def invokeCallback(callback: Callable[..., Any], *args: Any) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result

class DataGrid:
    """Generic editable grid over a list of row dicts.

    Holds the view state (search, column filters, sort, grouping, selection,
    rendered window) and an edit buffer. Persistence is delegated to the
    caller through ``onAdd``, ``onEdit``, ``onDelete``, ``onSave`` and
    ``onRefresh``; each may be a plain function or a coroutine function.
    ``onRefresh`` returns the fresh row list, or None to keep current data.
    """

    def __init__(
        self,
        columns: List[Union[Column, Dict[str, Any]]],
        rows: List[Row],
        entityType: str = "Row",
        onAdd: Callback = None,
        onEdit: Callback = None,
        onDelete: Callback = None,
        onSave: Callback = None,
        onRefresh: Callback = None,
        windowSize: int = 150,
        scrollThreshold: float = 200,
    ):
        self.columns = [col if isinstance(col, Column) else Column.model_validate(col) for col in columns]
        self.entityType = entityType
        self.onAdd = onAdd
        self.onEdit = onEdit
        self.onDelete = onDelete
        self.onSave = onSave
        self.onRefresh = onRefresh

        self.baseRows: List[Row] = self._checkRows(rows)
        self.searchTerm = ""
        self.columnFilters: Dict[str, str] = {}
        self.sort = SortState()
        self.groupBy: List[str] = []
        self.expandedGroups: set = set()
        self.selectedIds: List[str] = []
        self.newlyAddedIds: List[str] = []
        self.isSaving = False

        self.window = RowWindow(windowSize=windowSize, scrollThreshold=scrollThreshold)
        self.editBuffer = EditBuffer()

    def _checkRows(self, rows: List[Row]) -> List[Row]:
        for row in rows:
            if "id" not in row:
                raise BadRequestException("Every grid row must carry an 'id'.")
        return deepcopy(rows)

    def _checkColumn(self, columnKey: str) -> None:
        if columnKey not in {col.key for col in self.columns}:
            raise BadRequestException(f"Unknown column: {columnKey}")

    def currentRows(self) -> List[Row]:
        return self.editBuffer.source(self.baseRows)

    def filteredRows(self) -> List[Row]:
        rows = table_view.applySearch(self.currentRows(), self.columns, self.searchTerm)
        rows = table_view.applyColumnFilters(rows, self.columnFilters)
        return table_view.sortRows(rows, self.sort)

    # View state

    def setSearch(self, term: str) -> None:
        self.searchTerm = term
        self.window.reset()

    def setColumnFilter(self, columnKey: str, value: str) -> None:
        self._checkColumn(columnKey)
        if value:
            self.columnFilters[columnKey] = value
        else:
            self.columnFilters.pop(columnKey, None)
        self.window.reset()

    def clearColumnFilters(self) -> None:
        self.columnFilters = {}
        self.window.reset()

    def clearAll(self) -> None:
        self.searchTerm = ""
        self.columnFilters = {}
        self.window.reset()

    def toggleSort(self, columnKey: str) -> SortState:
        self._checkColumn(columnKey)
        self.sort = table_view.nextSortState(self.sort, columnKey)
        self.window.reset()
        return self.sort

    def setGroupBy(self, columnKeys: List[str]) -> None:
        for columnKey in columnKeys:
            self._checkColumn(columnKey)
        self.groupBy = list(columnKeys)
        self.expandedGroups = set()

    def toggleGroup(self, path: str) -> bool:
        if path in self.expandedGroups:
            self.expandedGroups.discard(path)
            return False
        self.expandedGroups.add(path)
        return True

    def scroll(self, offset: float, viewportSize: float, contentSize: float) -> bool:
        if self.groupBy:
            return False
        grew = self.window.onScroll(offset, viewportSize, contentSize, len(self.filteredRows()))
        if grew:
            logger.debug("Grid window grew to %d rows", self.window.visibleCount)
        return grew

    def select(self, ids: List[str]) -> List[str]:
        known = {row["id"] for row in self.currentRows()}
        self.selectedIds = [rowId for rowId in ids if rowId in known]
        return self.selectedIds

    def setData(self, rows: List[Row]) -> None:
        self.baseRows = self._checkRows(rows)
        known = {row["id"] for row in self.baseRows}
        self.selectedIds = [rowId for rowId in self.selectedIds if rowId in known]
        self.window.reset()

    # Editing

    def enterEditMode(self, mode: str = "toggle") -> None:
        if mode == "clear":
            self.exitEditMode()
        elif mode == "all":
            self.editBuffer.enterAll(self.baseRows, [row["id"] for row in self.filteredRows()])
        elif mode == "selected":
            if not self.selectedIds:
                raise GridStateException("Select at least one row to edit.")
            self.editBuffer.enterSelected(self.baseRows, self.selectedIds)
        elif self.editBuffer.isEditing:
            self.exitEditMode()
        elif self.selectedIds:
            self.editBuffer.enterSelected(self.baseRows, self.selectedIds)
        else:
            self.editBuffer.enterAll(self.baseRows, [row["id"] for row in self.filteredRows()])
        self.newlyAddedIds = []

    def exitEditMode(self) -> None:
        self.editBuffer.exitEditMode(self.baseRows)
        self.window.reset()

    async def addRow(self) -> Row:
        newRow = self.editBuffer.addDraft(self.baseRows, self.columns)
        self.window.reset()
        if self.onAdd:
            await invokeCallback(self.onAdd, dict(newRow))
        return newRow

    async def editCell(self, rowId: str, values: Dict[str, Any]) -> Row:
        updated = self.editBuffer.editCell(rowId, values, self.columns)
        if self.onEdit:
            await invokeCallback(self.onEdit, rowId, dict(values))
        return updated

    def hasChanges(self) -> bool:
        return self.editBuffer.hasChanges(self.baseRows)

    async def save(self) -> List[Row]:
        if self.isSaving:
            raise GridStateException("A save is already in progress.")
        if not self.editBuffer.active:
            return []

        missing = self.editBuffer.validate(self.columns)
        if missing:
            raise ValidationException(
                f"Please fill in all required fields: {', '.join(missing)}",
                missingFields=missing
            )

        self.isSaving = True
        try:
            savedRows = deepcopy(self.editBuffer.rows)
            draftIds = self.editBuffer.draftIds()
            if self.onSave:
                await invokeCallback(self.onSave, deepcopy(savedRows))
            logger.info("Saved %d %s row(s), %d new", len(savedRows), self.entityType, len(draftIds))

            self.editBuffer.clear()
            if self.onRefresh:
                await self.refresh()
            else:
                self.setData([{**row, "_status": RowStatus.NORMAL.value} for row in savedRows])
            self.newlyAddedIds = draftIds
            return savedRows
        finally:
            self.isSaving = False

    async def delete(self, ids: Optional[List[str]] = None) -> List[str]:
        targets = list(ids) if ids is not None else list(self.selectedIds)
        if not targets:
            return []

        draftIds = set(self.editBuffer.draftIds())
        persisted = [rowId for rowId in targets if rowId not in draftIds]
        self.editBuffer.removeRows([rowId for rowId in targets if rowId in draftIds])

        if persisted and self.onDelete:
            await invokeCallback(self.onDelete, persisted)
        self.selectedIds = [rowId for rowId in self.selectedIds if rowId not in targets]

        doomed = set(persisted)
        self.editBuffer.removeRows(doomed)
        if self.onRefresh:
            await self.refresh()
        else:
            self.setData([row for row in self.baseRows if row["id"] not in doomed])
        return targets

    async def refresh(self) -> None:
        if not self.onRefresh:
            return
        rows = await invokeCallback(self.onRefresh)
        if rows is not None:
            self.setData(rows)

    # Output

    def view(self, gridId: Optional[str] = None) -> GridView:
        rows = self.filteredRows()
        groups = None
        windowRows = None
        if self.groupBy:
            groups = table_view.collapseGroups(table_view.groupRows(rows, self.groupBy), self.expandedGroups)
            visibleCount = len(rows)
            hasMore = False
        else:
            windowRows = self.window.slice(rows)
            visibleCount = len(windowRows)
            hasMore = self.window.hasMore(len(rows))
        self.window.markRendered()

        return GridView(
            gridId=gridId,
            entityType=self.entityType,
            columns=self.columns,
            totalCount=len(self.currentRows()),
            filteredCount=len(rows),
            visibleCount=visibleCount,
            hasMore=hasMore,
            rows=windowRows,
            groups=groups,
            searchTerm=self.searchTerm,
            columnFilters=dict(self.columnFilters),
            sort=self.sort,
            groupBy=list(self.groupBy),
            selectedIds=list(self.selectedIds),
            editingIds=list(self.editBuffer.editingIds),
            hasChanges=self.hasChanges(),
            newlyAddedIds=list(self.newlyAddedIds),
        )

    def exportCsv(self) -> str:
        return table_view.exportCsv(self.filteredRows(), self.columns)

    def exportFileName(self, onDate: Optional[date] = None) -> str:
        return table_view.exportFileName(self.entityType, onDate)
