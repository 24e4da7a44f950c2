import asyncio
import logging
import duckdb
from typing import List, Dict, Any, Optional, Sequence
from pydantic import BaseModel, Field

from metaconsole.core.exceptions import ConnectionFailedException, QueryFailedException, TableNotFoundException
from metaconsole.db.identifiers import quoteIdentifier, quoteLiteral, qualifiedTableName

logger = logging.getLogger(__name__)

MOTHERDUCK_PREFIX = "md:"

class QueryResult(BaseModel):
    columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)

class SessionStatus(BaseModel):
    ready: bool
    connecting: bool
    error: Optional[str] = None
    database: Optional[str] = None

class AnalyticalSession:
    """Single DuckDB connection shared by the whole process.

    DuckDB calls block, so they run in a worker thread. Connecting, querying
    and closing all take the same lock: only one statement is ever in flight
    on the connection and a second ``connect()`` waits for the first instead
    of opening another connection.
    """

    def __init__(self, databasePath: str, token: str = "", database: str = "", schema: str = ""):
        self.databasePath = databasePath
        self.token = token
        self.database = database
        self.schema = schema
        self.lastError: Optional[str] = None
        self.connecting = False
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = asyncio.Lock()

    @property
    def isMotherDuck(self) -> bool:
        return self.databasePath.startswith(MOTHERDUCK_PREFIX)

    @property
    def ready(self) -> bool:
        return self._connection is not None

    def _open(self) -> duckdb.DuckDBPyConnection:
        config = {"motherduck_token": self.token} if self.isMotherDuck else {}
        connection = duckdb.connect(self.databasePath, config=config)
        try:
            if self.database:
                connection.execute(f"USE {quoteIdentifier(self.database)}")
            if self.schema:
                connection.execute(f"SET schema={quoteLiteral(self.schema)}")
        except duckdb.Error:
            connection.close()
            raise
        return connection

    async def connect(self) -> None:
        if self._connection is not None:
            return
        async with self._lock:
            if self._connection is not None:
                return
            if self.isMotherDuck and not self.token:
                self.lastError = "MotherDuck token is not configured"
                raise ConnectionFailedException(self.lastError)

            self.connecting = True
            try:
                self._connection = await asyncio.to_thread(self._open)
            except duckdb.Error as e:
                self.lastError = str(e)
                logger.error(f"Could not open analytical database {self.databasePath}: {e}")
                raise ConnectionFailedException(str(e))
            finally:
                self.connecting = False
            self.lastError = None
            logger.info(f"Analytical database connected: {self.databasePath}")

    @staticmethod
    def _execute(connection: duckdb.DuckDBPyConnection, sql: str, parameters: Optional[Sequence[Any]]) -> QueryResult:
        connection.execute(sql, parameters)
        if connection.description is None:
            return QueryResult()
        columns = [column[0] for column in connection.description]
        return QueryResult(columns=columns, rows=[dict(zip(columns, row)) for row in connection.fetchall()])

    async def evaluateQuery(
        self,
        sql: str,
        parameters: Optional[Sequence[Any]] = None,
        tableIdentifier: Optional[List[str]] = None,
    ) -> QueryResult:
        await self.connect()
        async with self._lock:
            connection = self._connection
            if connection is None:
                raise ConnectionFailedException("The analytical session was closed.")

            worker = asyncio.ensure_future(asyncio.to_thread(self._execute, connection, sql, parameters))
            try:
                return await asyncio.shield(worker)
            except asyncio.CancelledError:
                connection.interrupt()
                try:
                    await worker
                except duckdb.Error:
                    # the interrupt surfaces in the worker as an error
                    logger.info("Analytical query interrupted after cancellation")
                raise
            except duckdb.CatalogException as e:
                if "does not exist" in str(e):
                    raise TableNotFoundException(tableIdentifier or [sql])
                raise QueryFailedException(str(e))
            except duckdb.Error as e:
                logger.warning(f"Analytical query failed: {e}")
                raise QueryFailedException(str(e))

    async def queryEntityTable(self, ns: str, sa: str, en: str, limit: Optional[int] = None) -> QueryResult:
        sql = f"SELECT * FROM {qualifiedTableName(ns, sa, en)}"
        parameters = None
        if limit is not None:
            sql += " LIMIT ?"
            parameters = [limit]
        return await self.evaluateQuery(sql, parameters, tableIdentifier=[ns, sa, en])

    async def close(self) -> None:
        async with self._lock:
            if self._connection is None:
                return
            connection = self._connection
            self._connection = None
            await asyncio.to_thread(connection.close)
            logger.info("Analytical database disconnected")

    def status(self) -> SessionStatus:
        return SessionStatus(
            ready=self.ready,
            connecting=self.connecting,
            error=self.lastError,
            database=self.database or None,
        )
