from typing import List, Dict, Any, Optional

from metaconsole.core.config import settings
from metaconsole.core.exceptions import BadRequestException, NotFoundException
from metaconsole.services.catalog_clients import CatalogClients
from metaconsole.db.analytical_session import AnalyticalSession
from metaconsole.grid.data_grid import DataGrid
from metaconsole.grid.grid_store import GridStore
from metaconsole.grid import presets
from metaconsole.models.console_models import GridKind
from metaconsole.crud.crud_namespace import crudNamespace
from metaconsole.crud.crud_entity import crudEntity

Row = Dict[str, Any]

class CRUDGrid:
    async def _loadRows(self, clients: CatalogClients, kind: GridKind, parentId: Optional[str]) -> List[Row]:
        if kind == "namespace":
            return [presets.namespaceRow(ns) for ns in await crudNamespace.listNamespaces(clients)]
        if kind == "subjectarea":
            return [presets.subjectAreaRow(sa) for sa in await crudNamespace.listSubjectAreas(clients, nsId=parentId or "")]
        if kind == "entity":
            return [presets.entityRow(en) for en in await crudEntity.listEntities(clients, saId=parentId or "")]
        return [presets.metaRow(meta) for meta in await crudEntity.listMetas(clients, parentId)]

    async def _saveRows(self, clients: CatalogClients, kind: GridKind, parentId: Optional[str], rows: List[Row]) -> None:
        if kind == "namespace":
            await crudNamespace.saveNamespaceRows(clients, rows)
        elif kind == "subjectarea":
            await crudNamespace.saveSubjectAreaRows(clients, rows)
        elif kind == "entity":
            await crudEntity.saveEntityRows(clients, rows)
        else:
            await crudEntity.saveMetaRows(clients, parentId, rows)

    async def _deleteRows(self, clients: CatalogClients, kind: GridKind, ids: List[str]) -> None:
        if kind == "namespace":
            await crudNamespace.deleteNamespaces(clients, ids)
        elif kind == "subjectarea":
            await crudNamespace.deleteSubjectAreas(clients, ids)
        elif kind == "entity":
            await crudEntity.deleteEntities(clients, ids)
        else:
            await crudEntity.deleteMetas(clients, ids)

    async def openCatalogGrid(
        self, clients: CatalogClients, store: GridStore, kind: GridKind, parentId: Optional[str] = None
    ) -> str:
        if kind == "meta" and not parentId:
            raise BadRequestException("A meta grid needs the entity id as parentId.")

        async def onSave(rows: List[Row]) -> None:
            await self._saveRows(clients, kind, parentId, rows)

        async def onDelete(ids: List[str]) -> None:
            await self._deleteRows(clients, kind, ids)

        async def onRefresh() -> List[Row]:
            return await self._loadRows(clients, kind, parentId)

        grid = DataGrid(
            columns=presets.columnsFor(kind),
            rows=await self._loadRows(clients, kind, parentId),
            entityType=presets.ENTITY_TYPES[kind],
            onSave=onSave,
            onDelete=onDelete,
            onRefresh=onRefresh,
            windowSize=settings.gridWindowSize,
            scrollThreshold=settings.gridScrollThreshold,
        )
        return store.create(grid)

    async def openPreviewGrid(
        self,
        clients: CatalogClients,
        session: AnalyticalSession,
        store: GridStore,
        enId: str,
        limit: Optional[int] = None,
    ) -> str:
        preview = await crudEntity.previewEntityData(clients, session, enId, limit=limit)
        if preview.state == "not_loaded":
            raise NotFoundException(resourceType="Table data", identifier=preview.table)

        # table data is browsed and exported here, never written back
        grid = DataGrid(
            columns=presets.previewColumns(preview.columns),
            rows=presets.previewRows(preview.rows),
            entityType=preview.table.split(".")[-1],
            windowSize=settings.gridWindowSize,
            scrollThreshold=settings.gridScrollThreshold,
        )
        return store.create(grid)

crudGrid = CRUDGrid()
