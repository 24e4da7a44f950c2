import time
import uuid
import logging
from collections import OrderedDict
from typing import Callable, Tuple

from metaconsole.core.config import settings
from metaconsole.grid.data_grid import DataGrid
from metaconsole.core.exceptions import NotFoundException

logger = logging.getLogger(__name__)

class GridStore:
    """Grid sessions by id, least recently used first.

    Sessions idle for longer than ``idleSeconds`` are evicted whenever a grid
    is opened, and the oldest ones go once more than ``maxGrids`` are open.
    """

    def __init__(self, maxGrids: int = 200, idleSeconds: float = 1800, clock: Callable[[], float] = time.monotonic):
        self.maxGrids = maxGrids
        self.idleSeconds = idleSeconds
        self.clock = clock
        self.grids: "OrderedDict[str, Tuple[DataGrid, float]]" = OrderedDict()

    def _evict(self) -> None:
        now = self.clock()
        if self.idleSeconds > 0:
            for gridId, (_, lastUsed) in list(self.grids.items()):
                if now - lastUsed > self.idleSeconds:
                    del self.grids[gridId]
                    logger.info("Evicted idle grid %s", gridId)
        while self.maxGrids > 0 and len(self.grids) >= self.maxGrids:
            gridId, _ = self.grids.popitem(last=False)
            logger.info("Evicted grid %s, session limit of %d reached", gridId, self.maxGrids)

    def create(self, grid: DataGrid) -> str:
        self._evict()
        gridId = uuid.uuid4().hex
        self.grids[gridId] = (grid, self.clock())
        logger.info("Opened %s grid %s with %d rows", grid.entityType, gridId, len(grid.baseRows))
        return gridId

    def get(self, gridId: str) -> DataGrid:
        entry = self.grids.get(gridId)
        if entry is None:
            raise NotFoundException(resourceType="Grid", identifier=gridId)
        self.grids[gridId] = (entry[0], self.clock())
        self.grids.move_to_end(gridId)
        return entry[0]

    def remove(self, gridId: str) -> None:
        if self.grids.pop(gridId, None) is None:
            raise NotFoundException(resourceType="Grid", identifier=gridId)
        logger.info("Dropped grid %s", gridId)

gridStore = GridStore(maxGrids=settings.gridMaxSessions, idleSeconds=settings.gridIdleSeconds)

def getGridStore() -> GridStore:
    return gridStore
