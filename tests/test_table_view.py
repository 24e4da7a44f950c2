"""
Row pipeline: search, filters, sort cycle, grouping, CSV export
"""
from datetime import date

from metaconsole.grid import table_view
from metaconsole.models.grid_models import Column, ColumnType, SortDirection, SortState

COLUMNS = [
    Column(key="name", title="Name"),
    Column(key="team", title="Team"),
    Column(key="score", title="Score", type=ColumnType.NUMBER),
]

ROWS = [
    {"id": "1", "name": "Alice", "team": "red", "score": 10},
    {"id": "2", "name": "bob", "team": "blue", "score": 2},
    {"id": "3", "name": "Carol", "team": "red", "score": None},
    {"id": "4", "name": "dave", "team": "", "score": 7},
]


class TestSearchAndFilters:

    def test_search_is_case_insensitive_across_columns(self):
        result = table_view.applySearch(ROWS, COLUMNS, "ALI")
        assert [row["id"] for row in result] == ["1"]

    def test_search_matches_numbers_as_text(self):
        result = table_view.applySearch(ROWS, COLUMNS, "10")
        assert [row["id"] for row in result] == ["1"]

    def test_empty_search_keeps_everything(self):
        assert table_view.applySearch(ROWS, COLUMNS, "") == ROWS

    def test_column_filters_combine_with_and(self):
        result = table_view.applyColumnFilters(ROWS, {"team": "red", "name": "car"})
        assert [row["id"] for row in result] == ["3"]

    def test_blank_filter_is_ignored(self):
        assert len(table_view.applyColumnFilters(ROWS, {"team": ""})) == len(ROWS)


class TestSort:

    def test_sort_cycle_asc_desc_none(self):
        state = table_view.nextSortState(SortState(), "score")
        assert state.column == "score" and state.direction == SortDirection.ASC
        state = table_view.nextSortState(state, "score")
        assert state.direction == SortDirection.DESC
        state = table_view.nextSortState(state, "score")
        assert state.column is None

    def test_other_column_restarts_ascending(self):
        state = SortState(column="score", direction=SortDirection.DESC)
        assert table_view.nextSortState(state, "name") == SortState(column="name", direction=SortDirection.ASC)

    def test_numbers_sort_numerically_and_missing_sinks(self):
        ascending = table_view.sortRows(ROWS, SortState(column="score", direction=SortDirection.ASC))
        assert [row["id"] for row in ascending] == ["2", "4", "1", "3"]
        descending = table_view.sortRows(ROWS, SortState(column="score", direction=SortDirection.DESC))
        assert [row["id"] for row in descending] == ["1", "4", "2", "3"]

    def test_drafts_stay_on_top(self):
        rows = ROWS + [{"id": "new", "name": "zed", "team": "red", "score": 99, "_status": "draft"}]
        for direction in (SortDirection.ASC, SortDirection.DESC):
            result = table_view.sortRows(rows, SortState(column="score", direction=direction))
            assert result[0]["id"] == "new"

    def test_unsorted_keeps_input_order(self):
        assert table_view.sortRows(ROWS, SortState()) == ROWS


class TestGrouping:

    def test_groups_use_ungrouped_for_blank_values(self):
        nodes = table_view.groupRows(ROWS, ["team"])
        assert [(node.value, node.count) for node in nodes] == [("red", 2), ("blue", 1), ("Ungrouped", 1)]
        assert all(node.rows is not None for node in nodes)

    def test_nested_groups_build_paths(self):
        nodes = table_view.groupRows(ROWS, ["team", "name"])
        red = nodes[0]
        assert red.groups is not None
        assert [child.path for child in red.groups] == ["red/Alice", "red/Carol"]
        assert table_view.countGroupedRows(nodes) == len(ROWS)

    def test_collapsed_groups_hide_members(self):
        nodes = table_view.groupRows(ROWS, ["team"])
        collapsed = table_view.collapseGroups(nodes, {"blue"})
        byValue = {node.value: node for node in collapsed}
        assert byValue["blue"].expanded and byValue["blue"].rows == [ROWS[1]]
        assert not byValue["red"].expanded and byValue["red"].rows is None
        assert byValue["red"].count == 2


class TestExport:

    def test_csv_uses_titles_and_quotes_when_needed(self):
        rows = [{"id": "1", "name": 'Smith, "J"', "team": "red", "score": None}]
        text = table_view.exportCsv(rows, COLUMNS)
        assert text == 'Name,Team,Score\n"Smith, ""J""",red,\n'

    def test_file_name_uses_entity_type_and_date(self):
        assert table_view.exportFileName("Meta Field", date(2024, 3, 5)) == "meta_field_data_2024-03-05.csv"


class TestPipelineProperties:

    def test_descending_is_reverse_of_ascending_except_drafts(self):
        rows = [{"id": str(i), "name": name} for i, name in enumerate(["b", "d", "a", "c"])]
        rows.append({"id": "draft", "name": "m", "_status": "draft"})
        ascending = table_view.sortRows(rows, SortState(column="name", direction=SortDirection.ASC))
        descending = table_view.sortRows(rows, SortState(column="name", direction=SortDirection.DESC))
        assert ascending[0]["id"] == descending[0]["id"] == "draft"
        assert ascending[1:] == list(reversed(descending[1:]))

    def test_two_level_grouping_example(self):
        rows = [{"A": "x", "B": "1"}, {"A": "x", "B": "2"}, {"A": "y", "B": "1"}]
        nodes = table_view.groupRows(rows, ["A", "B"])
        assert [(node.value, node.count) for node in nodes] == [("x", 2), ("y", 1)]
        assert [(child.value, child.count) for child in nodes[0].groups] == [("1", 1), ("2", 1)]
        assert table_view.countGroupedRows(nodes) == 3

    def test_same_filter_twice_is_idempotent(self):
        once = table_view.applyColumnFilters(ROWS, {"team": "red"})
        assert table_view.applyColumnFilters(once, {"team": "red"}) == once

    def test_mixed_case_names_sort_alphabetically(self):
        rows = [{"id": str(i), "name": name} for i, name in enumerate(["cherry", "Banana", "apple", "Apple"])]
        ascending = table_view.sortRows(rows, SortState(column="name", direction=SortDirection.ASC))
        assert [row["name"] for row in ascending] == ["apple", "Apple", "Banana", "cherry"]
        descending = table_view.sortRows(ROWS, SortState(column="name", direction=SortDirection.DESC))
        assert [row["name"] for row in descending] == ["dave", "Carol", "bob", "Alice"]

    def test_separator_in_values_keeps_group_paths_distinct(self):
        rows = [{"id": "1", "A": "a/b", "B": "x"}, {"id": "2", "A": "a", "B": "b"}]
        nodes = table_view.groupRows(rows, ["A", "B"])
        topLevel = {node.value: node for node in nodes}
        nestedPath = topLevel["a"].groups[0].path
        assert nestedPath == "a/b"
        assert topLevel["a/b"].path != nestedPath
        collapsed = {node.value: node for node in table_view.collapseGroups(nodes, {"a", nestedPath})}
        assert collapsed["a"].expanded and not collapsed["a/b"].expanded
