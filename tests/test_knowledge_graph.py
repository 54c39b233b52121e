import json

import pytest

from ummon.graph.entity import (
    BaseEntity,
    DomainConceptEntity,
    EntityId,
    EntityType,
    FunctionEntity,
    TypeEntity,
    Visibility,
)
from ummon.graph.knowledge_graph import KnowledgeGraph
from ummon.graph.relationship import Relationship, RelationshipType


def make_function(entity_id, name=None, file_path="test.rs"):
    return FunctionEntity(
        id=EntityId(entity_id),
        name=name or entity_id,
        entity_type=EntityType.FUNCTION,
        file_path=file_path,
        visibility=Visibility.PUBLIC,
    )


def make_class(entity_id, name, file_path):
    return TypeEntity(
        id=EntityId(entity_id),
        name=name,
        entity_type=EntityType.CLASS,
        file_path=file_path,
        visibility=Visibility.PUBLIC,
    )


def make_concept(entity_id, name, attributes, description, confidence):
    return DomainConceptEntity(
        id=EntityId(entity_id),
        name=name,
        entity_type=EntityType.DOMAIN_CONCEPT,
        attributes=attributes,
        description=description,
        confidence=confidence,
    )


def test_new_knowledge_graph():
    kg = KnowledgeGraph()
    assert len(kg.all_entities()) == 0
    assert kg.relationship_count() == 0
    assert kg.domain_concepts() == []


def test_add_entity():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("test::function", "testFunction"))
    assert len(kg.all_entities()) == 1
    entity = kg.get_entity("test::function")
    assert entity.name == "testFunction"
    assert entity.entity_type == EntityType.FUNCTION
    assert entity.file_path == "test.rs"


def test_get_missing_entity():
    assert KnowledgeGraph().get_entity("nothing") is None


def test_add_entity_with_wrong_class_raises():
    kg = KnowledgeGraph()
    plain = BaseEntity(id=EntityId("x"), name="x", entity_type=EntityType.FUNCTION)
    with pytest.raises(TypeError, match="FunctionEntity"):
        kg.add_entity(plain)
    assert kg.all_entities() == []


def test_add_base_entity_for_custom_type():
    kg = KnowledgeGraph()
    plain = BaseEntity(id=EntityId("x"), name="x", entity_type=EntityType.other("Thing"))
    kg.add_entity(plain)
    assert kg.get_entity("x") is plain


def test_add_relationship():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("function1"))
    kg.add_entity(make_function("function2"))
    rel_id = Relationship.generate_id("function1", "function2", RelationshipType.CALLS)
    kg.add_relationship(
        Relationship(rel_id, EntityId("function1"), EntityId("function2"), RelationshipType.CALLS)
    )
    assert kg.relationship_count() == 1

    outgoing = kg.outgoing_relationships("function1")
    assert len(outgoing) == 1
    assert outgoing[0].relationship_type == RelationshipType.CALLS
    assert outgoing[0].target_id == "function2"

    incoming = kg.incoming_relationships("function2")
    assert len(incoming) == 1
    assert incoming[0].relationship_type == RelationshipType.CALLS
    assert incoming[0].source_id == "function1"


def test_get_entities_by_type():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("function1"))
    kg.add_entity(make_concept("concept1", "User", ["username"], "A user in the system", 0.9))

    functions = kg.entities_by_type(EntityType.FUNCTION)
    assert [f.name for f in functions] == ["function1"]
    concepts = kg.entities_by_type(EntityType.DOMAIN_CONCEPT)
    assert [c.name for c in concepts] == ["User"]
    assert kg.entities_by_type(EntityType.METHOD) == []


def test_domain_concepts():
    kg = KnowledgeGraph()
    kg.add_entity(
        make_concept("user", "User", ["username", "email"], "A user in the system", 0.9)
    )
    concepts = kg.domain_concepts()
    assert len(concepts) == 1
    assert concepts[0].name == "User"
    assert len(concepts[0].attributes) == 2

    kg.add_entity(make_class("user_class", "UserClass", "user.rs"))
    kg.create_relationship("user", "user_class", RelationshipType.REPRESENTED_BY)

    related = kg.related_entities("user", RelationshipType.REPRESENTED_BY)
    assert [e.name for e in related] == ["UserClass"]
    assert kg.related_entities("user", RelationshipType.CALLS) == []


def test_add_entity_duplicate():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("test::func", "testFunc"))
    kg.add_entity(make_function("test::func", "duplicateFunc"))
    assert len(kg.all_entities()) == 1
    assert kg.get_entity("test::func").name == "duplicateFunc"


def test_add_relationship_with_nonexistent_entity():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("A"))
    rel = kg.create_relationship("A", "NonExistent", RelationshipType.CALLS)
    assert rel.id == "A->NonExistent::Calls"
    assert kg.relationship_count() == 1
    assert kg.related_entities("A", RelationshipType.CALLS) == []


def test_add_bidirectional_relationship():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("A"))
    kg.add_entity(make_function("B"))
    kg.create_relationship("A", "B", RelationshipType.CALLS)
    kg.create_relationship("B", "A", RelationshipType.CALLS)

    outgoing_a = kg.outgoing_relationships("A")
    assert [r.target_id for r in outgoing_a] == ["B"]
    outgoing_b = kg.outgoing_relationships("B")
    assert [r.target_id for r in outgoing_b] == ["A"]


def test_get_entities_with_multiple_filters():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("func1", "testFunc1", "file1.rs"))
    kg.add_entity(make_function("func2", "testFunc2", "file2.rs"))
    kg.add_entity(make_class("class", "TestClass", "file1.rs"))

    assert len(kg.entities_by_type(EntityType.FUNCTION)) == 2
    from_file1 = {e.name for e in kg.all_entities() if e.file_path == "file1.rs"}
    assert from_file1 == {"testFunc1", "TestClass"}


def test_domain_concept_relationships():
    kg = KnowledgeGraph()
    kg.add_entity(
        make_concept("domain::User", "User", ["username", "email"], "A user in the system", 0.95)
    )
    kg.add_entity(
        make_concept("domain::Order", "Order", ["items", "total"], "An order made by a user", 0.9)
    )
    kg.create_relationship("domain::User", "domain::Order", RelationshipType.RELATES_TO)

    outgoing = kg.outgoing_relationships("domain::User")
    assert len(outgoing) == 1
    assert outgoing[0].target_id == "domain::Order"
    assert outgoing[0].relationship_type == RelationshipType.RELATES_TO

    kg.add_entity(make_function("func::place_order", "place_order", "order.rs"))
    kg.create_relationship("domain::Order", "func::place_order", RelationshipType.REPRESENTED_BY)

    order_rels = kg.outgoing_relationships("domain::Order")
    assert len(order_rels) == 1
    assert order_rels[0].target_id == "func::place_order"
    assert order_rels[0].relationship_type == RelationshipType.REPRESENTED_BY


def test_dependent_entities():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("A"))
    kg.add_entity(make_function("B"))
    kg.add_entity(make_function("C"))
    kg.create_relationship("A", "C", RelationshipType.CALLS)
    kg.create_relationship("B", "C", RelationshipType.USES)
    assert [e.name for e in kg.dependent_entities("C")] == ["A", "B"]
    assert [e.name for e in kg.dependent_entities("C", RelationshipType.USES)] == ["B"]


def test_relationships_for_entity_and_all_relationships():
    kg = KnowledgeGraph()
    kg.create_relationship("A", "B", RelationshipType.CALLS)
    kg.create_relationship("C", "B", RelationshipType.CALLS)
    kg.create_relationship("B", "D", RelationshipType.IMPORTS)
    rels = kg.relationships_for_entity("B")
    assert [r.id for r in rels] == ["B->D::Imports", "A->B::Calls", "C->B::Calls"]
    all_rels = kg.all_relationships()
    assert len(all_rels) == 3
    all_rels.clear()
    assert kg.relationship_count() == 3


def test_serialization_deserialization():
    kg = KnowledgeGraph()
    kg.add_entity(make_function("A"))
    kg.add_entity(make_function("B"))
    kg.create_relationship("A", "B", RelationshipType.CALLS)

    data = json.loads(json.dumps(kg.to_dict()))
    restored = KnowledgeGraph.from_dict(data)

    assert len(restored.all_entities()) == 2
    assert restored.get_entity("A").name == "A"
    assert restored.get_entity("B").name == "B"
    rels = restored.all_relationships()
    assert len(rels) == 1
    assert rels[0].source_id == "A"
    assert rels[0].target_id == "B"
    assert [r.target_id for r in restored.outgoing_relationships("A")] == ["B"]


def test_to_dict_layout():
    kg = KnowledgeGraph()
    kg.add_entity(make_concept("domain::User", "User", ["email"], None, 0.5))
    data = kg.to_dict()
    assert set(data) == {"entities", "relationship_data", "domain_concepts"}
    assert list(data["entities"]["domain::User"]) == ["DomainConcept"]
    assert data["domain_concepts"]["User"]["attributes"] == ["email"]


def test_save_and_load(tmp_path):
    kg = KnowledgeGraph()
    kg.add_entity(make_function("A"))
    kg.add_entity(make_concept("domain::User", "User", ["email"], "A user", 0.8))
    kg.create_relationship("domain::User", "A", RelationshipType.REPRESENTED_BY)
    path = tmp_path / "graph.json"
    kg.save(path)

    loaded = KnowledgeGraph.load(path)
    assert {e.name for e in loaded.all_entities()} == {"A", "User"}
    assert [c.name for c in loaded.domain_concepts()] == ["User"]
    related = loaded.related_entities("domain::User", RelationshipType.REPRESENTED_BY)
    assert [e.name for e in related] == ["A"]


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        KnowledgeGraph.load(tmp_path / "absent.json")


def test_from_dict_rejects_missing_fields():
    with pytest.raises(ValueError, match="relationship_data"):
        KnowledgeGraph.from_dict({"entities": {}, "domain_concepts": {}})