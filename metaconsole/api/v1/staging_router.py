import logging
from fastapi import APIRouter, Depends, File, Query, UploadFile
from typing import Any, List

from metaconsole.services.catalog_clients import CatalogClients, getCatalogClients
from metaconsole.models.request_models import AutoDetectStagingParams
from metaconsole.models.console_models import StagingResult
from metaconsole.api.v1.namespace_router import errorResponses
from metaconsole.core.exceptions import ErrorResponse, UnsupportedMediaTypeException, ValidationException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/staging", tags=["Staging"], responses={
    **errorResponses, 415: {"model": ErrorResponse, "description": "Only CSV files are accepted"},
})

CSV_MEDIA_TYPES = ["text/csv", "application/csv", "application/vnd.ms-excel"]

def isCsvUpload(file: UploadFile) -> bool:
    return (file.filename or "").lower().endswith(".csv") or file.content_type in CSV_MEDIA_TYPES

def stagingRows(result: Any) -> List[Any]:
    if isinstance(result, list):
        return result
    if isinstance(result, dict):
        for key in ("staging_data", "data"):
            if isinstance(result.get(key), list):
                return result[key]
    return []

@router.post("/auto-detect", response_model=StagingResult)
async def autoDetectStagingEndpoint(
    file: UploadFile = File(..., description="CSV file to stage"),
    ns: str = Query(..., min_length=1),
    sa: str = Query(..., min_length=1),
    en: str = Query(..., min_length=1),
    nsType: str = Query("staging"),
    createMeta: bool = Query(True),
    loadData: bool = Query(False),
    primaryGrain: str = Query(""),
    clients: CatalogClients = Depends(getCatalogClients),
):
    if not isCsvUpload(file):
        raise UnsupportedMediaTypeException(file.content_type or file.filename or "unknown", CSV_MEDIA_TYPES)

    content = await file.read()
    if not content:
        raise ValidationException(f"Uploaded file '{file.filename}' is empty.")

    params = AutoDetectStagingParams(
        ns=ns, sa=sa, en=en, nsType=nsType, createMeta=createMeta, loadData=loadData, primaryGrain=primaryGrain
    )
    result = await clients.rest.autoDetectStaging(file.filename, content, params)
    logger.info(f"Staged {file.filename} into {ns}.{sa}.{en} (create_meta={createMeta}, load_data={loadData})")

    # with neither meta creation nor loading the server only detects, and the rows come back as drafts
    return StagingResult(
        draftRows=not createMeta and not loadData,
        stagingRows=stagingRows(result),
        result=result,
    )
