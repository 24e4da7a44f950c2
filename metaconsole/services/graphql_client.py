import logging
import httpx
from typing import List, Dict, Any, Optional

from metaconsole.core.config import settings
from metaconsole.core.exceptions import TransportException, GatewayTimeoutException
from metaconsole.graphql import queries
from metaconsole.models.catalog_models import (
    Namespace, SubjectArea, Entity, Meta, Ruleset, ConceptualModel, EntityRelation
)

logger = logging.getLogger(__name__)

class CatalogGraphQLClient:
    def __init__(self, endpoint: str, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self.client.post(
                self.endpoint,
                json={"query": query, "variables": variables or {}},
            )
        except httpx.TimeoutException as e:
            logger.error(f"GraphQL request to {self.endpoint} timed out: {e}")
            raise GatewayTimeoutException(f"GraphQL endpoint did not respond in time: {self.endpoint}")
        except httpx.HTTPError as e:
            logger.error(f"GraphQL request to {self.endpoint} failed: {e}")
            raise TransportException(f"GraphQL request failed: {e}")

        if response.is_error:
            raise TransportException(
                f"GraphQL Error: {response.status_code} - {response.reason_phrase}",
                upstreamStatus=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            raise TransportException("GraphQL endpoint returned a non-JSON response.", upstreamStatus=response.status_code)

        errors = body.get("errors")
        data = body.get("data")
        if errors:
            messages = "; ".join(error.get("message", str(error)) for error in errors)
            if data is None:
                raise TransportException(f"GraphQL Error: {messages}")
            # partial data is still returned
            logger.warning(f"GraphQL returned errors alongside data: {messages}")
        return data or {}

    async def getNamespaces(self, status: str = "", type: str = "") -> List[Namespace]:
        data = await self.execute(queries.GET_NAMESPACES, {"status": status, "type": type})
        return [Namespace.model_validate(item) for item in data.get("meta_namespace") or []]

    async def getSubjectAreas(self, id: str = "") -> List[SubjectArea]:
        data = await self.execute(queries.GET_SUBJECTAREAS, {"id": id})
        return [SubjectArea.model_validate(item) for item in data.get("meta_subjectarea") or []]

    async def getEntities(self, grain: str = "", id: str = "", name: str = "", type: str = "") -> List[Entity]:
        data = await self.execute(queries.GET_ENTITIES, {"grain": grain, "id": id, "name": name, "type": type})
        return [Entity.model_validate(item) for item in data.get("meta_entity") or []]

    async def getEntity(self, enId: str) -> Optional[Entity]:
        entities = await self.getEntities(id=enId)
        return entities[0] if entities else None

    async def getMetaForEntity(self, enId: str) -> List[Meta]:
        data = await self.execute(queries.GET_META_FOR_ENTITY, {"enid": enId})
        return [Meta.model_validate(item) for item in data.get("meta_meta") or []]

    async def getMetaConceptual(self, enId: str) -> List[Meta]:
        data = await self.execute(queries.GET_META_CONCEPTUAL, {"entity": enId})
        return [Meta.model_validate(item) for item in data.get("meta_meta") or []]

    async def getRulesets(self, targetEnId: str = "", type: str = "", id: str = "", sourceId: str = "") -> List[Ruleset]:
        data = await self.execute(
            queries.GET_META_RULESETS,
            {"id": id, "sourceId": sourceId, "targetEnId": targetEnId, "type": type},
        )
        return [Ruleset.model_validate(item) for item in data.get("meta_ruleset") or []]

    async def getRulesetsWithSource(self, targetEnId: str, type: str) -> List[Ruleset]:
        data = await self.execute(queries.GET_RULESETS_BY_ENTITY, {"targetEnId": targetEnId, "type": type})
        return [Ruleset.model_validate(item) for item in data.get("meta_ruleset") or []]

    async def getConceptualModels(
        self,
        glossaryEntityId: str = "",
        glossaryEntityFqn: str = "",
        id: str = "",
        name: str = "",
        projectCode: str = "",
    ) -> List[ConceptualModel]:
        data = await self.execute(queries.GET_CONCEPTUAL_MODEL, {
            "glossaryEntityFqn": glossaryEntityFqn,
            "glossaryEntityId": glossaryEntityId,
            "id": id,
            "name": name,
            "projectCode": projectCode,
        })
        return [ConceptualModel.model_validate(item) for item in data.get("conceptual_model") or []]

    async def getEntityRelations(self, relatedEnId: str = "") -> List[EntityRelation]:
        data = await self.execute(queries.GET_ENTITY_RELATIONS, {"relatedEnId": relatedEnId})
        return [EntityRelation.model_validate(item) for item in data.get("entity_relation") or []]

    async def healthCheck(self) -> bool:
        data = await self.execute(queries.HEALTH_CHECK)
        return "__typename" in data

graphqlClient = CatalogGraphQLClient(endpoint=settings.graphqlEndpoint, timeout=settings.requestTimeout)
