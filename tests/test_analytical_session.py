"""
Identifier quoting and the DuckDB session, against an in-memory database
"""
import asyncio

import pytest

from metaconsole.db.identifiers import quoteIdentifier, qualifiedTableName, quoteLiteral
from metaconsole.db.analytical_session import AnalyticalSession
from metaconsole.core.exceptions import (
    ConnectionFailedException, QueryFailedException, TableNotFoundException, ValidationException,
)


class TestIdentifiers:

    def test_every_part_is_quoted(self):
        assert qualifiedTableName("raw", "sales", "orders") == '"raw"."sales"."orders"'

    def test_embedded_quotes_are_doubled(self):
        assert quoteIdentifier('we"ird') == '"we""ird"'

    def test_percent_signs_survive(self):
        assert quoteIdentifier("100%") == '"100%"'

    def test_empty_identifier_is_rejected(self):
        with pytest.raises(ValidationException):
            quoteIdentifier("  ")

    def test_nul_is_rejected(self):
        with pytest.raises(ValidationException):
            qualifiedTableName("a", "b\x00", "c")

    def test_literal_quoting(self):
        assert quoteLiteral("it's") == "'it''s'"


@pytest.fixture()
async def salesSession(memorySession):
    await memorySession.evaluateQuery("CREATE SCHEMA sales")
    await memorySession.evaluateQuery(
        "CREATE TABLE sales.orders AS SELECT range AS order_id, range * 1.5 AS amount FROM range(5)"
    )
    await memorySession.evaluateQuery("CREATE TABLE sales.empty_orders (order_id INTEGER)")
    return memorySession


class TestAnalyticalSession:

    async def test_connect_is_lazy_and_idempotent(self, memorySession):
        assert not memorySession.ready
        await asyncio.gather(memorySession.connect(), memorySession.connect())
        assert memorySession.ready
        assert memorySession.status().ready

    async def test_query_entity_table(self, salesSession):
        result = await salesSession.queryEntityTable("memory", "sales", "orders")
        assert result.columns == ["order_id", "amount"]
        assert [row["order_id"] for row in result.rows] == [0, 1, 2, 3, 4]

    async def test_limit_is_bound_as_parameter(self, salesSession):
        result = await salesSession.queryEntityTable("memory", "sales", "orders", limit=2)
        assert len(result.rows) == 2

    async def test_empty_table_has_columns_but_no_rows(self, salesSession):
        result = await salesSession.queryEntityTable("memory", "sales", "empty_orders")
        assert result.columns == ["order_id"]
        assert result.rows == []

    async def test_missing_table_is_table_not_found(self, salesSession):
        with pytest.raises(TableNotFoundException) as excInfo:
            await salesSession.queryEntityTable("memory", "sales", "missing")
        assert excInfo.value.tableIdentifier == ["memory", "sales", "missing"]

    async def test_syntax_error_is_query_failure(self, memorySession):
        with pytest.raises(QueryFailedException):
            await memorySession.evaluateQuery("SELEC 1")

    async def test_close_then_reconnect(self, memorySession):
        await memorySession.connect()
        await memorySession.close()
        assert not memorySession.ready
        result = await memorySession.evaluateQuery("SELECT 42 AS answer")
        assert result.rows == [{"answer": 42}]

    async def test_motherduck_without_token_fails_fast(self):
        session = AnalyticalSession("md:", token="")
        with pytest.raises(ConnectionFailedException):
            await session.connect()
        assert session.status().error == "MotherDuck token is not configured"
        assert not session.ready
