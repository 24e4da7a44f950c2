import logging
from typing import List, Dict, Any

from metaconsole.services.catalog_clients import CatalogClients
from metaconsole.models.catalog_models import Namespace, SubjectArea
from metaconsole.models.request_models import NamespaceRequest, SubjectAreaRequest

logger = logging.getLogger(__name__)

def changedRows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [row for row in rows if row.get("_status") in ("draft", "edited")]

class CRUDNamespace:
    async def listNamespaces(self, clients: CatalogClients, status: str = "", type: str = "") -> List[Namespace]:
        return await clients.graphql.getNamespaces(status=status, type=type)

    async def createNamespaces(self, clients: CatalogClients, requests: List[NamespaceRequest]) -> List[Namespace]:
        if requests:
            await clients.rest.createNamespaces(requests)
            logger.info(f"Wrote {len(requests)} namespace(s)")
        return await self.listNamespaces(clients)

    async def deleteNamespaces(self, clients: CatalogClients, ids: List[str]) -> List[Namespace]:
        if ids:
            await clients.rest.deleteObjects("namespace", ids)
            logger.info(f"Deleted namespace(s) {ids}")
        return await self.listNamespaces(clients)

    async def saveNamespaceRows(self, clients: CatalogClients, rows: List[Dict[str, Any]]) -> List[Namespace]:
        return await self.createNamespaces(clients, [NamespaceRequest.fromRow(row) for row in changedRows(rows)])

    async def listSubjectAreas(self, clients: CatalogClients, nsId: str = "") -> List[SubjectArea]:
        subjectAreas = await clients.graphql.getSubjectAreas()
        if nsId:
            subjectAreas = [sa for sa in subjectAreas if sa.nsId == nsId]
        return subjectAreas

    async def createSubjectAreas(self, clients: CatalogClients, requests: List[SubjectAreaRequest]) -> List[SubjectArea]:
        if requests:
            await clients.rest.createSubjectAreas(requests)
            logger.info(f"Wrote {len(requests)} subject area(s)")
        return await self.listSubjectAreas(clients)

    async def deleteSubjectAreas(self, clients: CatalogClients, ids: List[str]) -> List[SubjectArea]:
        if ids:
            await clients.rest.deleteObjects("subjectarea", ids)
            logger.info(f"Deleted subject area(s) {ids}")
        return await self.listSubjectAreas(clients)

    async def saveSubjectAreaRows(self, clients: CatalogClients, rows: List[Dict[str, Any]]) -> List[SubjectArea]:
        return await self.createSubjectAreas(clients, [SubjectAreaRequest.fromRow(row) for row in changedRows(rows)])

crudNamespace = CRUDNamespace()
