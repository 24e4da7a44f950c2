"""
Blueprint transforms, export storage, connection monitor, request builders
"""
from unittest.mock import AsyncMock

import pytest

from metaconsole.services import blueprint_service
from metaconsole.services.connection_monitor import ConnectionMonitor
from metaconsole.services.storage_accessor import StorageAccessor
from metaconsole.models.catalog_models import Entity, Rule
from metaconsole.models.request_models import (
    EntityCore, GlossaryMapping, LocalRule, MetaRequest, NamespaceRequest,
    buildDqRulesetRequest, buildGlossaryMappingRequest,
)
from metaconsole.core.exceptions import TransportException, ValidationException

from conftest import SALES_ENTITY

SUGGESTIONS = {
    "return_data": {
        "standardized_metas": [
            {
                "name": "customer_id",
                "type": "string",
                "is_primary_grain": True,
                "raw_columns": [
                    {"ns": "raw", "sa": "crm", "en": "customers", "en_id": "en-9", "name": "cust_id"},
                    {"ns": "raw", "sa": "erp", "en": "accounts", "en_id": "en-8", "name": "account_customer"},
                ],
            },
            {"name": "email", "type": "string", "nullable": False, "order": 4},
        ]
    }
}


class TestBlueprints:

    def test_suggestions_become_meta_drafts_and_mappings(self):
        blueprint = blueprint_service.transformSuggestions(SUGGESTIONS)
        first, second = blueprint.metas
        assert first.id == "temp-0" and first.isPrimaryGrain is True and first.nullable is True
        assert first.order == 0
        assert second.nullable is False and second.order == 4
        assert not second.isSecondaryGrain
        assert [m.sourceColumn for m in blueprint.mappings] == ["cust_id", "account_customer"]
        assert blueprint.mappings[0].sourceEnId == "en-9"

    def test_custom_blueprint_orders_by_position_without_mappings(self):
        blueprint = blueprint_service.transformCustomBlueprint(SUGGESTIONS)
        assert [meta.order for meta in blueprint.metas] == [0, 4]
        assert blueprint.mappings == []

    def test_unexpected_response_yields_empty_blueprint(self):
        assert blueprint_service.transformSuggestions(["not", "a", "dict"]).metas == []

    def test_entries_without_a_name_are_skipped(self):
        response = {"return_data": {"standardized_metas": [
            {"type": "string"},
            {"name": "order_id", "raw_columns": [{"en": "orders"}, {"en": "orders", "name": "id"}]},
        ]}}
        blueprint = blueprint_service.transformSuggestions(response)
        assert [meta.name for meta in blueprint.metas] == ["order_id"]
        assert blueprint.metas[0].id == "temp-0"
        assert [m.sourceColumn for m in blueprint.mappings] == ["id"]


class TestStorageAccessor:

    async def test_write_creates_parent_dirs(self, tmp_path):
        storage = StorageAccessor(basePath=str(tmp_path))
        location = await storage.writeTextFile("exports/meta_data.csv", "a,b\n")
        assert location.endswith("meta_data.csv")
        assert (tmp_path / "exports" / "meta_data.csv").read_text(encoding="utf-8") == "a,b\n"

    @pytest.mark.parametrize("path", ["../escape.csv", "/etc/passwd", "s3://bucket/x.csv"])
    async def test_paths_outside_export_dir_are_rejected(self, tmp_path, path):
        with pytest.raises(ValidationException):
            await StorageAccessor(basePath=str(tmp_path)).writeTextFile(path, "x")


class TestConnectionMonitor:

    async def test_failed_health_check_flips_status_and_recovers(self):
        client = AsyncMock()
        client.healthCheck.side_effect = TransportException("GraphQL Error: 503 - Service Unavailable")
        monitor = ConnectionMonitor(client=client, interval=0)

        assert await monitor.checkConnection() is False
        assert not monitor.status.isConnected
        assert monitor.status.lastError.startswith("GraphQL Error")
        assert monitor.status.lastChecked is not None

        client.healthCheck.side_effect = None
        client.healthCheck.return_value = True
        assert await monitor.checkConnection() is True
        assert monitor.status.isConnected and monitor.status.lastError is None

    async def test_zero_interval_disables_background_task(self):
        monitor = ConnectionMonitor(client=AsyncMock(), interval=0)
        monitor.start()
        assert not monitor.isRunning

    async def test_start_and_stop(self):
        client = AsyncMock()
        client.healthCheck.return_value = True
        monitor = ConnectionMonitor(client=client, interval=60)
        monitor.start()
        assert monitor.isRunning
        await monitor.stop()
        assert not monitor.isRunning


class TestRequestBuilders:

    def test_draft_rows_lose_their_local_id(self):
        request = NamespaceRequest.fromRow({"id": "new_abc", "_status": "draft", "name": "raw", "type": " "})
        assert request.toPayload() == {"name": "raw"}

    def test_meta_row_parses_yes_no_and_order(self):
        request = MetaRequest.fromRow({"id": "m-1", "_status": "edited", "name": "x", "nullable": "No", "order": "3"})
        assert request.id == "m-1" and request.nullable is False and request.order == 3

    def test_dq_ruleset_keeps_existing_rules_and_maps_enabled_flag(self):
        core = EntityCore.fromEntity(Entity.model_validate(SALES_ENTITY))
        existing = [Rule.model_validate({"id": "r1", "name": "not_null", "rule_expression": "x IS NOT NULL", "meta": {"name": "amount"}})]
        local = [LocalRule(name="positive", ruleExpression="amount > 0", enabled=False)]
        payload = buildDqRulesetRequest(core, existing, local, "amount").toPayload()

        rules = payload["ruleset_request"]["rule_requests"]
        assert [rule["name"] for rule in rules] == ["not_null", "positive"]
        assert rules[0]["id"] == "r1" and rules[0]["meta"] == "amount"
        assert rules[1]["rule_status"] == "inactive"
        assert payload["entity_core"]["ns_type"] == "staging"
        assert payload["ruleset_request"]["name"] == "memory_sales_orders_dq"

    def test_mapping_ruleset_ids_use_timestamp(self):
        glossary = Entity.model_validate({**SALES_ENTITY, "id": "g-1", "name": "customer"})
        mapping = GlossaryMapping(glossaryMetaId="m-1", glossaryMetaName="customer_id", sourceExpression="cust_id",
                                  sourceNs="raw", sourceSa="crm", sourceEnName="customers", sourceEnId="en-9")
        payload = buildGlossaryMappingRequest(glossary, "en-9", [mapping], timestampMs=1700).toPayload()
        assert payload["ruleset_request"]["id"] == "rs_g-1_en-9_1700"
        assert payload["ruleset_request"]["type"] == "glossary_association"
        assert payload["ruleset_request"]["rule_requests"][0]["id"] == "rule_m-1_1700_0"
        assert payload["source_request"]["source_en"] == "customers"
        assert payload["entity_core"]["ns_type"] == "glossary"
