"""
DataGrid: view state, edit mode, save/delete orchestration
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import makeRows, findRow
from metaconsole.grid import presets
from metaconsole.grid.data_grid import DataGrid
from metaconsole.grid.grid_store import GridStore
from metaconsole.models.grid_models import Column, ColumnType
from metaconsole.core.exceptions import BadRequestException, GridStateException, NotFoundException, ValidationException

COLUMNS = [
    Column(key="name", title="Name", required=True),
    Column(key="score", title="Score", type=ColumnType.NUMBER),
    Column(key="active", title="Active", type=ColumnType.CHECKBOX),
]


def makeGrid(rows=None, **kwargs) -> DataGrid:
    return DataGrid(columns=COLUMNS, rows=makeRows(5) if rows is None else rows, entityType="Item", **kwargs)


class TestViewState:

    def test_rows_without_id_are_rejected(self):
        with pytest.raises(BadRequestException):
            DataGrid(columns=COLUMNS, rows=[{"name": "x"}])

    def test_columns_accept_plain_dicts(self):
        grid = DataGrid(columns=[{"key": "name", "title": "Name"}], rows=[])
        assert grid.columns[0].title == "Name"

    def test_search_filter_and_clear(self):
        grid = makeGrid()
        grid.setSearch("item 00")
        assert grid.view().filteredCount == 5
        grid.setColumnFilter("name", "004")
        assert [row["id"] for row in grid.filteredRows()] == ["r4"]
        grid.clearColumnFilters()
        assert grid.searchTerm == "item 00"
        grid.clearAll()
        assert grid.view().filteredCount == 5

    def test_unknown_filter_column_is_rejected(self):
        with pytest.raises(BadRequestException):
            makeGrid().setColumnFilter("nope", "x")

    def test_sort_cycles(self):
        grid = makeGrid()
        grid.toggleSort("score")
        grid.toggleSort("score")
        assert grid.filteredRows()[0]["id"] == "r4"
        grid.toggleSort("score")
        assert grid.sort.column is None

    def test_window_grows_on_scroll_and_resets_on_search(self):
        grid = makeGrid(rows=makeRows(400), windowSize=150, scrollThreshold=200)
        view = grid.view()
        assert view.visibleCount == 150 and view.hasMore
        assert grid.scroll(offset=4900, viewportSize=500, contentSize=5500)
        assert grid.view().visibleCount == 300
        grid.setSearch("item")
        assert grid.view().visibleCount == 150

    def test_grouped_view_returns_collapsed_groups(self):
        rows = [{"id": str(i), "name": "a" if i % 2 else "b", "score": i} for i in range(4)]
        grid = makeGrid(rows=rows)
        grid.setGroupBy(["name"])
        view = grid.view()
        assert view.rows is None
        assert [group.value for group in view.groups] == ["b", "a"]
        assert all(group.rows is None for group in view.groups)
        assert grid.toggleGroup("a") is True
        expanded = {group.value: group for group in grid.view().groups}
        assert len(expanded["a"].rows) == 2
        assert not grid.scroll(offset=0, viewportSize=10, contentSize=10)

    def test_nested_group_toggles_independently_of_same_named_top_group(self):
        rows = [{"id": "1", "name": "a/b", "score": 1}, {"id": "2", "name": "a", "score": 2}]
        grid = makeGrid(rows=rows)
        grid.setGroupBy(["name", "score"])
        grid.toggleGroup("a")
        grid.toggleGroup("a/2")
        groups = {group.value: group for group in grid.view().groups}
        assert groups["a"].expanded and groups["a"].groups[0].expanded
        assert not groups["a/b"].expanded

    def test_selection_ignores_unknown_ids(self):
        grid = makeGrid()
        assert grid.select(["r1", "ghost"]) == ["r1"]

    def test_set_data_prunes_selection(self):
        grid = makeGrid()
        grid.select(["r1", "r2"])
        grid.setData(makeRows(2))
        assert grid.selectedIds == ["r1"]


class TestEditing:

    async def test_add_row_creates_draft_with_defaults(self):
        onAdd = MagicMock(return_value=None)
        grid = makeGrid(onAdd=onAdd)
        row = await grid.addRow()
        assert row["id"].startswith("new_")
        assert row["_status"] == "draft"
        assert row["name"] == "" and row["active"] is False
        assert row["id"] in grid.view().editingIds
        assert grid.filteredRows()[0]["id"] == row["id"]
        onAdd.assert_called_once()

    async def test_edit_cell_marks_row_edited(self):
        onEdit = AsyncMock()
        grid = makeGrid(onEdit=onEdit)
        grid.enterEditMode("all")
        await grid.editCell("r1", {"name": "renamed"})
        row = findRow(grid.currentRows(), "r1")
        assert row["name"] == "renamed" and row["_status"] == "edited"
        assert findRow(grid.baseRows, "r1")["name"] == "item 001"
        assert grid.hasChanges()
        onEdit.assert_awaited_once_with("r1", {"name": "renamed"})

    async def test_edit_outside_edit_mode_is_rejected(self):
        grid = makeGrid()
        with pytest.raises(GridStateException):
            await grid.editCell("r1", {"name": "x"})

    async def test_edit_unknown_column_is_rejected(self):
        grid = makeGrid()
        grid.enterEditMode("all")
        with pytest.raises(BadRequestException):
            await grid.editCell("r1", {"bogus": 1})

    def test_edit_selected_needs_a_selection(self):
        with pytest.raises(GridStateException):
            makeGrid().enterEditMode("selected")

    def test_toggle_prefers_selection(self):
        grid = makeGrid()
        grid.select(["r2"])
        grid.enterEditMode()
        assert grid.view().editingIds == ["r2"]
        grid.enterEditMode()
        assert grid.view().editingIds == []

    async def test_exit_edit_mode_reverts_edits_and_drops_drafts(self):
        grid = makeGrid()
        grid.enterEditMode("all")
        await grid.editCell("r1", {"name": "changed"})
        await grid.addRow()
        grid.exitEditMode()
        assert grid.currentRows() == grid.baseRows
        assert not grid.hasChanges()


class TestSave:

    async def test_missing_required_fields_block_save(self):
        onSave = AsyncMock()
        grid = makeGrid(onSave=onSave)
        await grid.addRow()
        with pytest.raises(ValidationException) as excInfo:
            await grid.save()
        assert excInfo.value.missingFields == ["Name"]
        onSave.assert_not_called()
        assert grid.hasChanges()

    async def test_save_hands_buffer_over_once_then_refreshes(self):
        onSave = AsyncMock()
        refreshed = makeRows(3, prefix="s")
        onRefresh = AsyncMock(return_value=refreshed)
        grid = makeGrid(onSave=onSave, onRefresh=onRefresh)
        draft = await grid.addRow()
        await grid.editCell(draft["id"], {"name": "fresh"})

        saved = await grid.save()

        onSave.assert_awaited_once()
        sentRows = onSave.await_args.args[0]
        assert findRow(sentRows, draft["id"])["_status"] == "draft"
        assert len(saved) == 6
        assert grid.baseRows == refreshed
        view = grid.view()
        assert view.newlyAddedIds == [draft["id"]]
        assert view.editingIds == [] and not view.hasChanges

    async def test_save_without_refresh_keeps_rows_as_normal(self):
        grid = makeGrid(onSave=MagicMock(return_value=None))
        grid.enterEditMode("all")
        await grid.editCell("r0", {"name": "zero"})
        await grid.save()
        row = findRow(grid.baseRows, "r0")
        assert row["name"] == "zero" and row["_status"] == "normal"

    async def test_save_with_nothing_to_save(self):
        onSave = AsyncMock()
        grid = makeGrid(onSave=onSave)
        assert await grid.save() == []
        onSave.assert_not_called()

    async def test_concurrent_save_is_rejected(self):
        grid = makeGrid()
        grid.isSaving = True
        with pytest.raises(GridStateException):
            await grid.save()

    async def test_failed_save_keeps_buffer(self):
        grid = makeGrid(onSave=AsyncMock(side_effect=RuntimeError("boom")))
        grid.enterEditMode("all")
        await grid.editCell("r0", {"name": "zero"})
        with pytest.raises(RuntimeError):
            await grid.save()
        assert grid.hasChanges()
        assert not grid.isSaving


class TestDelete:

    async def test_drafts_are_removed_locally(self):
        onDelete = AsyncMock()
        grid = makeGrid(onDelete=onDelete)
        draft = await grid.addRow()
        await grid.delete([draft["id"]])
        onDelete.assert_not_called()
        assert findRow(grid.currentRows(), draft["id"]) is None

    async def test_persisted_rows_go_to_callback_then_refresh(self):
        onDelete = AsyncMock()
        onRefresh = AsyncMock(return_value=makeRows(3))
        grid = makeGrid(onDelete=onDelete, onRefresh=onRefresh)
        grid.select(["r3", "r4"])
        deleted = await grid.delete()
        assert deleted == ["r3", "r4"]
        onDelete.assert_awaited_once_with(["r3", "r4"])
        assert len(grid.baseRows) == 3
        assert grid.selectedIds == []

    async def test_delete_during_edit_mode_drops_row_from_buffer(self):
        onRefresh = AsyncMock(return_value=[row for row in makeRows(3) if row["id"] != "r1"])
        grid = makeGrid(rows=makeRows(3), onDelete=AsyncMock(), onRefresh=onRefresh)
        grid.enterEditMode("all")
        await grid.delete(["r1"])
        view = grid.view()
        assert [row["id"] for row in view.rows] == ["r0", "r2"]
        assert "r1" not in view.editingIds
        assert not view.hasChanges
        with pytest.raises(GridStateException):
            await grid.editCell("r1", {"name": "gone"})

    async def test_without_refresh_rows_are_dropped_locally(self):
        grid = makeGrid(onDelete=MagicMock(return_value=None))
        await grid.delete(["r0"])
        assert findRow(grid.baseRows, "r0") is None


class TestExport:

    def test_export_uses_filtered_rows(self):
        grid = makeGrid()
        grid.setColumnFilter("name", "001")
        assert grid.exportCsv() == "Name,Score,Active\nitem 001,1,\n"
        assert grid.exportFileName().startswith("item_data_")


class TestGridStore:

    def test_idle_grids_are_evicted_on_open(self):
        now = [0.0]
        store = GridStore(maxGrids=10, idleSeconds=60, clock=lambda: now[0])
        stale = store.create(makeGrid())
        now[0] = 30.0
        fresh = store.create(makeGrid())
        now[0] = 80.0
        store.create(makeGrid())
        with pytest.raises(NotFoundException):
            store.get(stale)
        assert store.get(fresh).entityType == "Item"

    def test_least_recently_used_grid_goes_at_the_cap(self):
        store = GridStore(maxGrids=2, idleSeconds=0)
        first = store.create(makeGrid())
        second = store.create(makeGrid())
        store.get(first)
        store.create(makeGrid())
        store.get(first)
        with pytest.raises(NotFoundException):
            store.get(second)


class TestPreviewRows:

    def test_unique_table_ids_are_kept(self):
        rows = presets.previewRows([{"id": 7, "x": "a"}, {"id": 9, "x": "b"}])
        assert [row["id"] for row in rows] == ["7", "9"]

    def test_null_or_duplicate_ids_fall_back_to_position(self):
        nulls = presets.previewRows([{"id": None}, {"id": None}])
        duplicates = presets.previewRows([{"id": 1}, {"id": 1}, {"id": 2}])
        assert [row["id"] for row in nulls] == ["0", "1"]
        assert [row["id"] for row in duplicates] == ["0", "1", "2"]
