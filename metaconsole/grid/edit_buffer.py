import uuid
from copy import deepcopy
from typing import List, Dict, Any, Iterable

from metaconsole.models.grid_models import Column, RowStatus
from metaconsole.core.exceptions import NotFoundException, GridStateException, BadRequestException

Row = Dict[str, Any]

def isBlank(value: Any) -> bool:
    return value is None or str(value).strip() == ""

class EditBuffer:
    def __init__(self):
        self.rows: List[Row] = []
        self.editingIds: List[str] = []

    @property
    def active(self) -> bool:
        return len(self.rows) > 0

    @property
    def isEditing(self) -> bool:
        return len(self.editingIds) > 0

    def source(self, baseRows: List[Row]) -> List[Row]:
        return self.rows if self.rows else baseRows

    def _snapshot(self, baseRows: List[Row]) -> None:
        if not self.rows:
            self.rows = deepcopy(baseRows)

    def enterAll(self, baseRows: List[Row], visibleIds: Iterable[str]) -> None:
        self.editingIds = list(visibleIds)
        self._snapshot(baseRows)

    def enterSelected(self, baseRows: List[Row], selectedIds: Iterable[str]) -> None:
        for rowId in selectedIds:
            if rowId not in self.editingIds:
                self.editingIds.append(rowId)
        self._snapshot(baseRows)

    def exitEditMode(self, baseRows: List[Row]) -> None:
        self.editingIds = []
        baseById = {row["id"]: row for row in baseRows}
        reverted = []
        for row in self.rows:
            status = row.get("_status")
            if status == RowStatus.DRAFT:
                continue
            if status == RowStatus.EDITED and row["id"] in baseById:
                reverted.append(deepcopy(baseById[row["id"]]))
            else:
                reverted.append(row)
        self.rows = reverted
        if not self.hasChanges(baseRows):
            self.rows = []

    def addDraft(self, baseRows: List[Row], columns: List[Column]) -> Row:
        newRow: Row = {"id": f"new_{uuid.uuid4().hex[:12]}", "_status": RowStatus.DRAFT.value}
        for col in columns:
            newRow[col.key] = col.defaultValue()
        self._snapshot(baseRows)
        self.rows.append(newRow)
        self.editingIds.append(newRow["id"])
        return newRow

    def editCell(self, rowId: str, values: Dict[str, Any], columns: List[Column]) -> Row:
        knownKeys = {col.key for col in columns}
        unknownKeys = [key for key in values if key not in knownKeys]
        if unknownKeys:
            raise BadRequestException(f"Unknown column(s): {', '.join(unknownKeys)}")
        if rowId not in self.editingIds:
            raise GridStateException(f"Row '{rowId}' is not in edit mode.")

        for index, row in enumerate(self.rows):
            if row["id"] == rowId:
                status = RowStatus.DRAFT.value if row.get("_status") == RowStatus.DRAFT else RowStatus.EDITED.value
                updated = {**row, **values, "_status": status}
                self.rows[index] = updated
                return updated
        raise NotFoundException(resourceType="Row", identifier=rowId)

    def removeRows(self, rowIds: Iterable[str]) -> None:
        doomed = set(rowIds)
        self.rows = [row for row in self.rows if row["id"] not in doomed]
        self.editingIds = [rowId for rowId in self.editingIds if rowId not in doomed]

    def validate(self, columns: List[Column]) -> List[str]:
        missing = []
        for col in columns:
            if col.required and any(isBlank(row.get(col.key)) for row in self.rows):
                missing.append(col.title)
        return missing

    def draftIds(self) -> List[str]:
        return [row["id"] for row in self.rows if row.get("_status") == RowStatus.DRAFT]

    def hasChanges(self, baseRows: List[Row]) -> bool:
        if not self.rows:
            return False
        if len(self.rows) != len(baseRows):
            return True
        return any(row.get("_status") in (RowStatus.DRAFT, RowStatus.EDITED) for row in self.rows)

    def clear(self) -> None:
        self.rows = []
        self.editingIds = []
