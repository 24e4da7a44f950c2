import logging
from typing import List, Dict, Any, Optional

from metaconsole.services.catalog_clients import CatalogClients
from metaconsole.models.catalog_models import Ruleset, Rule
from metaconsole.models.request_models import (
    EntityCore, LocalRule, GlossaryMapping,
    buildDqRulesetRequest, buildGlossaryMappingRequest, buildPublishRequest, buildLoadPublishRequest,
)
from metaconsole.core.exceptions import ValidationException
from metaconsole.crud.crud_entity import crudEntity

logger = logging.getLogger(__name__)

DQ_RULESET_TYPE = "dq"
MAPPING_RULESET_TYPE = "glossary_association"

def rulesForColumn(rulesets: List[Ruleset], columnName: Optional[str]) -> List[Rule]:
    rules = [rule for ruleset in rulesets for rule in ruleset.rules]
    if columnName is None:
        return rules
    return [rule for rule in rules if rule.metaName == columnName]

class CRUDRuleset:
    async def listDqRulesets(self, clients: CatalogClients, enId: str) -> List[Ruleset]:
        return await clients.graphql.getRulesets(targetEnId=enId, type=DQ_RULESET_TYPE)

    async def listDqRules(self, clients: CatalogClients, enId: str, columnName: Optional[str] = None) -> List[Rule]:
        return rulesForColumn(await self.listDqRulesets(clients, enId), columnName)

    async def applyDqRules(
        self, clients: CatalogClients, enId: str, columnName: str, localRules: List[LocalRule]
    ) -> List[Rule]:
        if not localRules:
            raise ValidationException("Please add at least one rule before applying.")

        entity = await crudEntity.getEntity(clients, enId)
        existingRules = await self.listDqRules(clients, enId, columnName)
        request = buildDqRulesetRequest(EntityCore.fromEntity(entity), existingRules, localRules, columnName)
        await clients.rest.applyRuleset(request)
        logger.info(f"Applied {len(localRules)} new rule(s) to {entity.fqn}.{columnName}")
        return await self.listDqRules(clients, enId, columnName)

    async def deleteRule(self, clients: CatalogClients, ruleId: str, enId: Optional[str] = None) -> List[Rule]:
        await clients.rest.deleteRules([ruleId])
        logger.info(f"Deleted rule {ruleId}")
        return await self.listDqRules(clients, enId) if enId else []

    async def listMappingRulesets(self, clients: CatalogClients, glossaryEnId: str) -> List[Ruleset]:
        return await clients.graphql.getRulesetsWithSource(targetEnId=glossaryEnId, type=MAPPING_RULESET_TYPE)

    async def saveGlossaryMappings(
        self, clients: CatalogClients, glossaryEnId: str, mappings: List[GlossaryMapping]
    ) -> List[Ruleset]:
        if not mappings:
            raise ValidationException("There are no mappings to save.")

        glossaryEntity = await crudEntity.getEntity(clients, glossaryEnId)
        # one ruleset per source entity
        mappingsBySource: Dict[str, List[GlossaryMapping]] = {}
        for mapping in mappings:
            mappingsBySource.setdefault(mapping.sourceEnId or "", []).append(mapping)

        for sourceEnId, sourceMappings in mappingsBySource.items():
            request = buildGlossaryMappingRequest(glossaryEntity, sourceEnId, sourceMappings)
            await clients.rest.createRuleset(request)
            logger.info(f"Saved {len(sourceMappings)} mapping(s) from {sourceEnId} to {glossaryEntity.fqn}")
        return await self.listMappingRulesets(clients, glossaryEnId)

    async def buildGlossaryPublish(
        self, clients: CatalogClients, glossaryEnId: str, selectedMetas: List[str], projectCode: str = "model"
    ) -> Any:
        if not selectedMetas:
            raise ValidationException("Please select at least one metadata attribute.")

        glossaryEntity = await crudEntity.getEntity(clients, glossaryEnId)
        rulesets = await self.listMappingRulesets(clients, glossaryEnId)
        if not rulesets:
            raise ValidationException("No source associations found. Please create mappings in the Glossary first.")

        firstSource = rulesets[0].source
        sourceEntity = firstSource.sourceEntity if firstSource else None
        if sourceEntity is None:
            raise ValidationException("Source entity information not found in rulesets.")

        metaFields = await crudEntity.listMetas(clients, glossaryEnId)
        request = buildPublishRequest(glossaryEntity, sourceEntity, selectedMetas, metaFields, rulesets, projectCode)
        result = await clients.rest.buildGlossaryPublish(request)
        logger.info(f"Built publish artifacts for {glossaryEntity.fqn} with {len(selectedMetas)} column(s)")
        return result

    async def loadGlossaryPublish(self, clients: CatalogClients, glossaryEnId: str) -> Any:
        glossaryEntity = await crudEntity.getEntity(clients, glossaryEnId)
        result = await clients.rest.loadGlossaryPublish(buildLoadPublishRequest(glossaryEntity))
        logger.info(f"Loaded publish table for {glossaryEntity.fqn}")
        return result

crudRuleset = CRUDRuleset()
