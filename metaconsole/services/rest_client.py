import logging
import httpx
from typing import List, Dict, Any, Optional

from metaconsole.core.config import settings
from metaconsole.core.exceptions import TransportException, GatewayTimeoutException
from metaconsole.models.request_models import (
    NamespaceRequest, SubjectAreaRequest, EntityRequest, MetaRequest, CreateEntityWithMetaRequest,
    DeleteRequest, ObjectType, AutoDetectStagingParams, GlossarySuggestionsRequest,
    CustomBlueprintRequest, CreateRulesetRequest, BuildPublishRequest, LoadPublishRequest,
    DeleteRulesRequest,
)

logger = logging.getLogger(__name__)

def errorMessage(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"API Error: {response.status_code} - {response.reason_phrase}"

class CatalogRestClient:
    def __init__(self, baseUrl: str, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.baseUrl = baseUrl.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.baseUrl, timeout=self.timeout, transport=self.transport)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise GatewayTimeoutException(f"Catalog service did not respond in time: {path}")
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportException(f"Catalog request failed: {e}")

        if response.is_error:
            message = errorMessage(response)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise TransportException(message, upstreamStatus=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def _postJson(self, path: str, payload: Any, params: Optional[Dict[str, str]] = None) -> Any:
        return await self._request("POST", path, json=payload, params=params)

    async def _upload(self, path: str, fileName: str, content: bytes, contentType: str, params: Dict[str, str]) -> Any:
        return await self._request("POST", path, params=params, files={"file": (fileName, content, contentType)})

    async def createNamespaces(self, namespaces: List[NamespaceRequest]) -> Any:
        return await self._postJson("/mwn/create_namespaces", [ns.toPayload() for ns in namespaces])

    async def createSubjectAreas(self, subjectAreas: List[SubjectAreaRequest]) -> Any:
        return await self._postJson("/mwn/create_subjectareas", [sa.toPayload() for sa in subjectAreas])

    async def createEntities(self, entities: List[EntityRequest]) -> Any:
        return await self._postJson("/mwn/create_entities", [en.toPayload() for en in entities])

    async def createEntityWithMeta(self, entity: EntityRequest, metas: List[MetaRequest]) -> Any:
        request = CreateEntityWithMetaRequest(entityRequest=entity, metaRequests=metas)
        return await self._postJson("/mwn/create_entity", request.toPayload())

    async def deleteObjects(self, objectType: ObjectType, ids: List[str]) -> Any:
        request = DeleteRequest(objectType=objectType, ids=ids)
        return await self._postJson("/mwn/delete", request.toPayload())

    async def autoDetectStaging(self, fileName: str, content: bytes, params: AutoDetectStagingParams) -> Any:
        return await self._upload("/mwn/auto_detect_staging", fileName, content, "text/csv", params.toQueryParams())

    async def importConfiguration(self, fileName: str, content: bytes, sheetName: str, contentType: str = "application/octet-stream") -> Any:
        return await self._upload("/mwn/import_configuration", fileName, content, contentType, {"sheet_name": sheetName})

    async def createRuleset(self, request: CreateRulesetRequest) -> Any:
        return await self._postJson("/mwn/create_ruleset", request.toPayload())

    async def generateGlossarySuggestions(self, request: GlossarySuggestionsRequest) -> Any:
        return await self._postJson("/mwn/generate_glossary_suggestions", request.toPayload())

    async def generateCustomBlueprint(self, request: CustomBlueprintRequest) -> Any:
        return await self._postJson("/mwn/generate_custom_blueprint", request.toPayload())

    async def applyRuleset(self, request: CreateRulesetRequest) -> Any:
        return await self._postJson("/api/v1/ruleset", request.toPayload())

    async def deleteRules(self, ids: List[str]) -> Any:
        return await self._request("DELETE", "/api/v1/rule", json=DeleteRulesRequest(ids=ids).toPayload())

    async def buildGlossaryPublish(self, request: BuildPublishRequest) -> Any:
        return await self._postJson("/mwn/build_glossary_publish", request.toPayload())

    async def loadGlossaryPublish(self, request: LoadPublishRequest) -> Any:
        return await self._postJson("/mwn/load_glossary_publish", request.toPayload())

restClient = CatalogRestClient(baseUrl=settings.restEndpoint, timeout=settings.requestTimeout)
