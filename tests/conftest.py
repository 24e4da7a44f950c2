"""
Shared fixtures: a fake catalog behind httpx.MockTransport, and the FastAPI app
wired to it through dependency overrides (lifespan is not run by ASGITransport).
"""
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from metaconsole.services.catalog_clients import CatalogClients, getCatalogClients
from metaconsole.services.graphql_client import CatalogGraphQLClient
from metaconsole.services.rest_client import CatalogRestClient
from metaconsole.services.storage_accessor import StorageAccessor, getStorageAccessor
from metaconsole.db.analytical_session import AnalyticalSession
from metaconsole.db.session import getAnalyticalSession
from metaconsole.grid.grid_store import GridStore, getGridStore

GRAPHQL_URL = "http://catalog.test/graphql"
REST_URL = "http://catalog.test"

SALES_ENTITY = {
    "id": "en-1",
    "name": "orders",
    "type": "table",
    "sa_id": "sa-1",
    "is_delta": False,
    "primary_grain": "order_id",
    "subjectarea": {"name": "sales", "namespace": {"id": "ns-1", "name": "memory", "type": "staging"}},
}


class FakeCatalog:
    """In-memory stand-in for the catalog's GraphQL and REST endpoints."""

    def __init__(self):
        self.namespaces: List[Dict[str, Any]] = [
            {"id": "ns-1", "name": "memory", "status": "active", "type": "staging", "tags": ["raw", "daily"]},
            {"id": "ns-2", "name": "finance", "status": "active", "type": "glossary", "tags": "gold"},
        ]
        self.subjectAreas: List[Dict[str, Any]] = [
            {"id": "sa-1", "name": "sales", "ns_id": "ns-1", "namespace": {"name": "memory", "type": "staging"}},
            {"id": "sa-2", "name": "ledger", "ns_id": "ns-2", "namespace": {"name": "finance", "type": "glossary"}},
        ]
        self.entities: List[Dict[str, Any]] = [SALES_ENTITY]
        self.metas: List[Dict[str, Any]] = [
            {"id": "m-1", "name": "order_id", "type": "int", "nullable": False, "order": 1, "is_primary_grain": True},
            {"id": "m-2", "name": "amount", "type": "decimal", "nullable": True, "order": 2},
        ]
        self.rulesets: List[Dict[str, Any]] = []
        self.graphqlCalls: List[Dict[str, Any]] = []
        self.restCalls: List[httpx.Request] = []
        self.restResponses: Dict[str, Any] = {}
        self.graphqlDown = False

    def graphqlData(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        if "meta_ruleset(" in query:
            return {"meta_ruleset": [rs for rs in self.rulesets if rs.get("target_en_id") == variables.get("targetEnId")]}
        if "meta_entity(" in query:
            enId = variables.get("id")
            return {"meta_entity": [en for en in self.entities if not enId or en["id"] == enId]}
        if "meta_meta(" in query:
            return {"meta_meta": self.metas}
        if "meta_subjectarea(" in query:
            return {"meta_subjectarea": self.subjectAreas}
        if "meta_namespace(" in query:
            return {"meta_namespace": self.namespaces}
        if "conceptual_model(" in query:
            return {"conceptual_model": []}
        if "entity_relation(" in query:
            return {"entity_relation": []}
        return {"__typename": "query_root"}

    def handleGraphql(self, request: httpx.Request) -> httpx.Response:
        if self.graphqlDown:
            return httpx.Response(503, text="unavailable")
        body = json.loads(request.content)
        self.graphqlCalls.append(body)
        return httpx.Response(200, json={"data": self.graphqlData(body["query"], body.get("variables") or {})})

    def handleRest(self, request: httpx.Request) -> httpx.Response:
        self.restCalls.append(request)
        response = self.restResponses.get(request.url.path, {"status": "ok"})
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    def restBodies(self, path: str) -> List[Any]:
        return [json.loads(call.content) for call in self.restCalls if call.url.path == path]


@pytest.fixture()
def fakeCatalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture()
async def catalogClients(fakeCatalog):
    clients = CatalogClients(
        graphql=CatalogGraphQLClient(GRAPHQL_URL, transport=httpx.MockTransport(fakeCatalog.handleGraphql)),
        rest=CatalogRestClient(REST_URL, transport=httpx.MockTransport(fakeCatalog.handleRest)),
    )
    yield clients
    await clients.aclose()


@pytest.fixture()
async def memorySession():
    session = AnalyticalSession(":memory:")
    yield session
    await session.close()


@pytest.fixture()
def gridStore() -> GridStore:
    return GridStore()


@pytest.fixture()
def app(catalogClients, memorySession, gridStore, tmp_path):
    from metaconsole.main import app as _app

    storage = StorageAccessor(basePath=str(tmp_path))
    _app.dependency_overrides[getCatalogClients] = lambda: catalogClients
    _app.dependency_overrides[getAnalyticalSession] = lambda: memorySession
    _app.dependency_overrides[getGridStore] = lambda: gridStore
    _app.dependency_overrides[getStorageAccessor] = lambda: storage
    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture()
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


def makeRows(count: int, prefix: str = "r") -> List[Dict[str, Any]]:
    return [{"id": f"{prefix}{index}", "name": f"item {index:03d}", "score": index} for index in range(count)]


def findRow(rows: List[Dict[str, Any]], rowId: str) -> Optional[Dict[str, Any]]:
    return next((row for row in rows if row["id"] == rowId), None)
