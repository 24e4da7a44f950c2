from enum import Enum
from typing import List, TypeVar

T = TypeVar("T")

class WindowState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"

class RowWindow:
    """Contiguous prefix of the row list that is actually rendered.

    Grows by ``windowSize`` rows when a scroll lands within ``scrollThreshold``
    of the bottom. A growth puts the window in LOADING until the next render
    acknowledges it, so scroll bursts between two renders grow it once.
    """

    def __init__(self, windowSize: int = 150, scrollThreshold: float = 200):
        if windowSize < 1:
            raise ValueError("windowSize must be at least 1")
        self.windowSize = windowSize
        self.scrollThreshold = scrollThreshold
        self.visibleCount = windowSize
        self.state = WindowState.IDLE

    def reset(self) -> None:
        self.visibleCount = self.windowSize
        self.state = WindowState.IDLE

    def visible(self, total: int) -> int:
        return min(self.visibleCount, total)

    def hasMore(self, total: int) -> bool:
        return self.visibleCount < total

    def isNearBottom(self, offset: float, viewportSize: float, contentSize: float) -> bool:
        return contentSize - (offset + viewportSize) <= self.scrollThreshold

    def loadMore(self, total: int) -> bool:
        if self.state == WindowState.LOADING or not self.hasMore(total):
            return False
        self.state = WindowState.LOADING
        self.visibleCount += self.windowSize
        return True

    def onScroll(self, offset: float, viewportSize: float, contentSize: float, total: int) -> bool:
        if not self.isNearBottom(offset, viewportSize, contentSize):
            return False
        return self.loadMore(total)

    def markRendered(self) -> None:
        self.state = WindowState.IDLE

    def slice(self, rows: List[T]) -> List[T]:
        return rows[:self.visibleCount]
