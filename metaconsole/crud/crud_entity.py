import logging
from typing import List, Dict, Any, Optional, Literal
from pydantic import BaseModel, Field

from metaconsole.services.catalog_clients import CatalogClients
from metaconsole.db.analytical_session import AnalyticalSession
from metaconsole.models.catalog_models import Entity, Meta, EntityRelation, ConceptualModel
from metaconsole.models.request_models import EntityRequest, MetaRequest
from metaconsole.core.exceptions import NotFoundException, TableNotFoundException
from metaconsole.crud.crud_namespace import changedRows

logger = logging.getLogger(__name__)

class EntityDataPreview(BaseModel):
    state: Literal["ready", "empty", "not_loaded"]
    table: str
    columns: List[str] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    message: Optional[str] = None

class CRUDEntity:
    async def listEntities(self, clients: CatalogClients, saId: str = "", type: str = "") -> List[Entity]:
        entities = await clients.graphql.getEntities(type=type)
        if saId:
            entities = [en for en in entities if en.saId == saId]
        return entities

    async def getEntity(self, clients: CatalogClients, enId: str) -> Entity:
        entity = await clients.graphql.getEntity(enId)
        if entity is None:
            raise NotFoundException(resourceType="Entity", identifier=enId)
        return entity

    async def createEntities(self, clients: CatalogClients, requests: List[EntityRequest]) -> List[Entity]:
        if requests:
            await clients.rest.createEntities(requests)
            logger.info(f"Wrote {len(requests)} entit(y/ies)")
        return await self.listEntities(clients)

    async def createEntityWithMeta(self, clients: CatalogClients, entity: EntityRequest, metas: List[MetaRequest]) -> Any:
        result = await clients.rest.createEntityWithMeta(entity, metas)
        logger.info(f"Created entity {entity.name} with {len(metas)} meta field(s)")
        return result

    async def deleteEntities(self, clients: CatalogClients, ids: List[str]) -> List[Entity]:
        if ids:
            await clients.rest.deleteObjects("entity", ids)
            logger.info(f"Deleted entit(y/ies) {ids}")
        return await self.listEntities(clients)

    async def saveEntityRows(self, clients: CatalogClients, rows: List[Dict[str, Any]]) -> List[Entity]:
        return await self.createEntities(clients, [EntityRequest.fromRow(row) for row in changedRows(rows)])

    async def listMetas(self, clients: CatalogClients, enId: str) -> List[Meta]:
        return await clients.graphql.getMetaForEntity(enId)

    async def saveMetaRows(self, clients: CatalogClients, enId: str, rows: List[Dict[str, Any]]) -> List[Meta]:
        metaRequests = [MetaRequest.fromRow(row) for row in changedRows(rows)]
        if metaRequests:
            entity = await self.getEntity(clients, enId)
            entityRequest = EntityRequest(
                id=entity.id,
                name=entity.name,
                description=entity.description,
                type=entity.type,
                subtype=entity.subtype,
                saId=entity.saId,
                ns=entity.namespaceName,
                sa=entity.subjectAreaName,
                isDelta=entity.isDelta,
                primaryGrain=entity.primaryGrain,
            )
            await self.createEntityWithMeta(clients, entityRequest, metaRequests)
        return await self.listMetas(clients, enId)

    async def deleteMetas(self, clients: CatalogClients, ids: List[str], enId: Optional[str] = None) -> List[Meta]:
        if ids:
            await clients.rest.deleteObjects("meta", ids)
            logger.info(f"Deleted meta field(s) {ids}")
        return await self.listMetas(clients, enId) if enId else []

    async def listRelations(self, clients: CatalogClients, enId: str) -> List[EntityRelation]:
        return await clients.graphql.getEntityRelations(relatedEnId=enId)

    async def listConceptualModels(self, clients: CatalogClients, enId: str) -> List[ConceptualModel]:
        return await clients.graphql.getConceptualModels(glossaryEntityId=enId)

    async def previewEntityData(
        self, clients: CatalogClients, session: AnalyticalSession, enId: str, limit: Optional[int] = None
    ) -> EntityDataPreview:
        entity = await self.getEntity(clients, enId)
        ns, sa = entity.namespaceName or "", entity.subjectAreaName or ""
        try:
            result = await session.queryEntityTable(ns, sa, entity.name, limit=limit)
        except TableNotFoundException as e:
            return EntityDataPreview(state="not_loaded", table=entity.fqn, message=e.message)

        if not result.rows:
            return EntityDataPreview(state="empty", table=entity.fqn, columns=result.columns)
        return EntityDataPreview(state="ready", table=entity.fqn, columns=result.columns, rows=result.rows)

crudEntity = CRUDEntity()
