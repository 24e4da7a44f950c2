# Query documents for the catalog GraphQL endpoint.
# An empty string filter variable means "return all".

ENTITY_FIELDS = """
      id
      description
      is_delta
      name
      primary_grain
      secondary_grain
      tertiary_grain
      runtime
      subtype
      type
      sa_id
"""

META_FIELDS = """
      id
      name
      alias
      type
      subtype
      nullable
      order
      length
      default
      description
      is_primary_grain
      is_secondary_grain
      is_tertiary_grain
"""

RULE_FIELDS = """
        id
        type
        subtype
        name
        alias
        description
        rule_status
        is_shared
        rule_expression
        language
        meta_id
"""

GET_NAMESPACES = """
  query GET_NAMESPACES($status: String, $type: String) {
    meta_namespace(status: $status, type: $type) {
      id
      name
      status
      tags
      type
    }
  }
"""

GET_SUBJECTAREAS = """
  query GET_SUBJECTAREAS($id: String) {
    meta_subjectarea(id: $id) {
      id
      name
      ns_id
      tags
      type
      namespace {
        id
        name
        type
      }
    }
  }
"""

GET_ENTITIES = """
  query GET_ENTITIES($grain: String, $id: String, $name: String, $type: String) {
    meta_entity(grain: $grain, id: $id, name: $name, type: $type) {
""" + ENTITY_FIELDS + """
      subjectarea {
        name
        namespace {
          id
          name
          type
        }
      }
    }
  }
"""

GET_META_FOR_ENTITY = """
  query GET_META_FOR_ENTITY($enid: String!) {
    meta_meta(enid: $enid) {
""" + META_FIELDS + """
    }
  }
"""

GET_META_RULESETS = """
  query GET_META_RULESETS($id: String!, $sourceId: String!, $targetEnId: String!, $type: String!) {
    meta_ruleset(id: $id, sourceId: $sourceId, targetEnId: $targetEnId, type: $type) {
      id
      name
      type
      view_name
      source_id
      target_en_id
      rules {
""" + RULE_FIELDS + """
        meta {
          name
        }
      }
    }
  }
"""

GET_RULESETS_BY_ENTITY = """
  query GET_RULESETS_BY_ENTITY($targetEnId: String!, $type: String!) {
    meta_ruleset(id: "", sourceId: "", targetEnId: $targetEnId, type: $type) {
      id
      name
      type
      view_name
      source_id
      target_en_id
      transform_id
      rules {
""" + RULE_FIELDS + """
        meta {
          name
        }
      }
      source {
        source_entity {
          id
          name
          subjectarea {
            name
            namespace {
              name
            }
          }
        }
      }
    }
  }
"""

GET_CONCEPTUAL_MODEL = """
  query GET_CONCEPTUAL_MODEL(
    $glossaryEntityFqn: String
    $glossaryEntityId: String
    $id: String
    $name: String
    $projectCode: String
  ) {
    conceptual_model(
      glossaryEntityFqn: $glossaryEntityFqn
      glossaryEntityId: $glossaryEntityId
      id: $id
      name: $name
      projectCode: $projectCode
    ) {
      id
      name
      projectCode
      conceptualModelFqn
      glossaryEntityFqn
      glossaryEntityId
      selected_metas {
        name
      }
      associated_source_entities {
""" + ENTITY_FIELDS + """
        subjectarea {
          name
          namespace {
            name
          }
        }
      }
    }
  }
"""

GET_META_CONCEPTUAL = """
  query GET_META_CONCEPTUAL($entity: String!) {
    meta_meta(enid: $entity, includedInDatapipeByType: "glossary_association") {
""" + META_FIELDS + """
    }
  }
"""

GET_ENTITY_RELATIONS = """
  query GET_ENTITY_RELATIONS($relatedEnId: String) {
    entity_relation(related_en_id: $relatedEnId) {
      id
      related_en_id
      relation_type
      target_en_id
      related_entity {
""" + ENTITY_FIELDS + """
        conceptual_models {
          id
          name
          projectCode
          conceptualModelFqn
          glossaryEntityFqn
          glossaryEntityId
          associated_source_entities {
""" + ENTITY_FIELDS + """
            metas {
""" + META_FIELDS + """
            }
          }
        }
      }
    }
  }
"""

HEALTH_CHECK = """
  query HealthCheck {
    __typename
  }
"""
