import os
import aiofiles
import aiofiles.os as aios
from metaconsole.core.config import settings
from metaconsole.core.exceptions import ValidationException, InternalServerErrorException

class StorageAccessor:
    def __init__(self, basePath: str):
        self.basePath = basePath

    def _resolvePath(self, relativePath: str) -> str:
        if "://" in relativePath or os.path.isabs(relativePath):
            raise ValidationException(f"Only paths relative to the export directory are accepted: {relativePath}")

        baseDir = os.path.abspath(self.basePath)
        fullPath = os.path.abspath(os.path.join(baseDir, relativePath))
        if os.path.commonpath([baseDir, fullPath]) != baseDir or fullPath == baseDir:
            raise ValidationException(f"Path traversal attempt detected for relative path: {relativePath}")
        return fullPath

    async def writeTextFile(self, path: str, content: str) -> str:
        resolvedPath = self._resolvePath(path)
        try:
            parentDir = os.path.dirname(resolvedPath)
            if not await aios.path.exists(parentDir):
                await aios.makedirs(parentDir, exist_ok=True)
            async with aiofiles.open(resolvedPath, mode='w', encoding='utf-8', newline='') as f:
                await f.write(content)
        except OSError as e:
            raise InternalServerErrorException(f"Failed to write file to {resolvedPath}: {str(e)}")
        return resolvedPath

storageAccessor = StorageAccessor(basePath=settings.exportPath)

def getStorageAccessor() -> StorageAccessor:
    return storageAccessor
