from fastapi import APIRouter, Depends, Path, Query, Response, status

from metaconsole.services.catalog_clients import CatalogClients, getCatalogClients
from metaconsole.services.storage_accessor import StorageAccessor, getStorageAccessor
from metaconsole.db.analytical_session import AnalyticalSession
from metaconsole.db.session import getAnalyticalSession
from metaconsole.grid.grid_store import GridStore, getGridStore
from metaconsole.crud.crud_grid import crudGrid
from metaconsole.models.grid_models import (
    GridView, SearchUpdate, FilterUpdate, GroupByUpdate, GroupToggle, ScrollEvent,
    SelectionUpdate, EditModeUpdate, CellUpdate, RowDeletion, ExportLocation,
)
from metaconsole.models.console_models import CatalogGridCreate, PreviewGridCreate, GridCreated
from metaconsole.core.exceptions import ErrorResponse

router = APIRouter(
    prefix="/v1/grids",
    tags=["Grids"],
    responses={
        400: {"model": ErrorResponse}, 404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
        502: {"model": ErrorResponse, "description": "Catalog service error"},
    }
)

@router.post("", response_model=GridCreated, status_code=status.HTTP_201_CREATED)
async def openCatalogGridEndpoint(
    request: CatalogGridCreate,
    clients: CatalogClients = Depends(getCatalogClients),
    store: GridStore = Depends(getGridStore),
):
    gridId = await crudGrid.openCatalogGrid(clients, store, request.kind, request.parentId)
    return GridCreated(gridId=gridId, view=store.get(gridId).view(gridId))

@router.post("/preview", response_model=GridCreated, status_code=status.HTTP_201_CREATED)
async def openPreviewGridEndpoint(
    request: PreviewGridCreate,
    clients: CatalogClients = Depends(getCatalogClients),
    session: AnalyticalSession = Depends(getAnalyticalSession),
    store: GridStore = Depends(getGridStore),
):
    gridId = await crudGrid.openPreviewGrid(clients, session, store, request.enId, limit=request.limit)
    return GridCreated(gridId=gridId, view=store.get(gridId).view(gridId))

@router.get("/{gridId}", response_model=GridView)
async def viewGridEndpoint(gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    return store.get(gridId).view(gridId)

@router.delete("/{gridId}", status_code=status.HTTP_204_NO_CONTENT)
async def dropGridEndpoint(gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    store.remove(gridId)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.put("/{gridId}/search", response_model=GridView)
async def searchGridEndpoint(body: SearchUpdate, gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    grid.setSearch(body.term)
    return grid.view(gridId)

@router.put("/{gridId}/filters/{columnKey}", response_model=GridView)
async def setColumnFilterEndpoint(
    body: FilterUpdate,
    gridId: str = Path(..., description="Grid session id"),
    columnKey: str = Path(..., description="Column key"),
    store: GridStore = Depends(getGridStore),
):
    grid = store.get(gridId)
    grid.setColumnFilter(columnKey, body.value)
    return grid.view(gridId)

@router.delete("/{gridId}/filters", response_model=GridView)
async def clearFiltersEndpoint(
    gridId: str = Path(..., description="Grid session id"),
    includeSearch: bool = Query(False, description="Also clear the search term"),
    store: GridStore = Depends(getGridStore),
):
    grid = store.get(gridId)
    if includeSearch:
        grid.clearAll()
    else:
        grid.clearColumnFilters()
    return grid.view(gridId)

@router.post("/{gridId}/sort/{columnKey}", response_model=GridView)
async def cycleSortEndpoint(
    gridId: str = Path(..., description="Grid session id"),
    columnKey: str = Path(..., description="Column key"),
    store: GridStore = Depends(getGridStore),
):
    grid = store.get(gridId)
    grid.toggleSort(columnKey)
    return grid.view(gridId)

@router.put("/{gridId}/group-by", response_model=GridView)
async def groupByEndpoint(body: GroupByUpdate, gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    grid.setGroupBy(body.columns)
    return grid.view(gridId)

@router.post("/{gridId}/groups/toggle", response_model=GridView)
async def toggleGroupEndpoint(body: GroupToggle, gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    grid.toggleGroup(body.path)
    return grid.view(gridId)

@router.post("/{gridId}/scroll", response_model=GridView)
async def scrollGridEndpoint(body: ScrollEvent, gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    grid.scroll(body.offset, body.viewportSize, body.contentSize)
    return grid.view(gridId)

@router.put("/{gridId}/selection", response_model=GridView)
async def selectRowsEndpoint(body: SelectionUpdate, gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    grid.select(body.ids)
    return grid.view(gridId)

@router.post("/{gridId}/edit-mode", response_model=GridView)
async def editModeEndpoint(body: EditModeUpdate, gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    grid.enterEditMode(body.mode)
    return grid.view(gridId)

@router.post("/{gridId}/rows", response_model=GridView, status_code=status.HTTP_201_CREATED)
async def addRowEndpoint(gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    await grid.addRow()
    return grid.view(gridId)

@router.patch("/{gridId}/rows/{rowId}", response_model=GridView)
async def editCellEndpoint(
    body: CellUpdate,
    gridId: str = Path(..., description="Grid session id"),
    rowId: str = Path(..., description="Row id"),
    store: GridStore = Depends(getGridStore),
):
    grid = store.get(gridId)
    await grid.editCell(rowId, body.values)
    return grid.view(gridId)

@router.post("/{gridId}/save", response_model=GridView)
async def saveGridEndpoint(gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    await grid.save()
    return grid.view(gridId)

@router.post("/{gridId}/delete", response_model=GridView)
async def deleteRowsEndpoint(body: RowDeletion, gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    await grid.delete(body.ids)
    return grid.view(gridId)

@router.post("/{gridId}/refresh", response_model=GridView)
async def refreshGridEndpoint(gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    await grid.refresh()
    return grid.view(gridId)

@router.get("/{gridId}/export")
async def downloadCsvEndpoint(gridId: str = Path(..., description="Grid session id"), store: GridStore = Depends(getGridStore)):
    grid = store.get(gridId)
    return Response(
        content=grid.exportCsv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{grid.exportFileName()}"'},
    )

@router.post("/{gridId}/export", response_model=ExportLocation)
async def saveCsvEndpoint(
    gridId: str = Path(..., description="Grid session id"),
    store: GridStore = Depends(getGridStore),
    storage: StorageAccessor = Depends(getStorageAccessor),
):
    grid = store.get(gridId)
    location = await storage.writeTextFile(grid.exportFileName(), grid.exportCsv())
    return ExportLocation(location=location, rowCount=len(grid.filteredRows()))
