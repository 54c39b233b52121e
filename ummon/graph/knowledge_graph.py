"""A knowledge graph of code entities, domain concepts and their relationships."""

from __future__ import annotations

import json
from os import PathLike
from typing import Any, Union

from ummon.graph.entity import (
    BaseEntity,
    DomainConceptEntity,
    EntityId,
    EntityType,
    FunctionEntity,
    ModuleEntity,
    TypeEntity,
    VariableEntity,
    entity_from_dict,
)
from ummon.graph.relationship import Relationship, RelationshipStore, RelationshipType

DEFAULT_GRAPH_FILE = "knowledge_graph.json"

_PathArg = Union[str, "PathLike[str]"]

_CLASS_FOR_TYPE: dict[EntityType, type[BaseEntity]] = {
    EntityType.FUNCTION: FunctionEntity,
    EntityType.METHOD: FunctionEntity,
    EntityType.CLASS: TypeEntity,
    EntityType.INTERFACE: TypeEntity,
    EntityType.TRAIT: TypeEntity,
    EntityType.STRUCT: TypeEntity,
    EntityType.ENUM: TypeEntity,
    EntityType.TYPE: TypeEntity,
    EntityType.MODULE: ModuleEntity,
    EntityType.FILE: ModuleEntity,
    EntityType.VARIABLE: VariableEntity,
    EntityType.FIELD: VariableEntity,
    EntityType.CONSTANT: VariableEntity,
    EntityType.DOMAIN_CONCEPT: DomainConceptEntity,
}


def _check_entity_class(entity: BaseEntity) -> None:
    expected = _CLASS_FOR_TYPE.get(entity.entity_type)
    if expected is None:
        if type(entity) is not BaseEntity:
            raise TypeError("Entity could not be converted to a specific type")
    elif not isinstance(entity, expected):
        raise TypeError(f"Entity is not a {expected.__name__}")


class KnowledgeGraph:
    """Entities keyed by id plus an indexed set of relationships between them."""

    def __init__(self) -> None:
        self._entities: dict[EntityId, BaseEntity] = {}
        self._store = RelationshipStore()
        self._relationships: list[Relationship] = []
        self._domain_concepts: dict[str, DomainConceptEntity] = {}

    # Entities

    def add_entity(self, entity: BaseEntity) -> None:
        """Add or replace an entity; its class must match its entity type."""
        _check_entity_class(entity)
        if isinstance(entity, DomainConceptEntity):
            self._domain_concepts[entity.name] = entity
        self._entities[EntityId(entity.id)] = entity

    def get_entity(self, entity_id: str) -> BaseEntity | None:
        return self._entities.get(EntityId(entity_id))

    def all_entities(self) -> list[BaseEntity]:
        return list(self._entities.values())

    def entities_by_type(self, entity_type: EntityType) -> list[BaseEntity]:
        return [e for e in self._entities.values() if e.entity_type == entity_type]

    def domain_concepts(self) -> list[DomainConceptEntity]:
        return list(self._domain_concepts.values())

    # Relationships

    def add_relationship(self, relationship: Relationship) -> None:
        self._relationships.append(relationship)
        self._store.add(relationship)

    def create_relationship(
        self, source_id: str, target_id: str, rel_type: RelationshipType
    ) -> Relationship:
        """Create and add a relationship; the entities need not exist yet."""
        rel_id = Relationship.generate_id(source_id, target_id, rel_type)
        relationship = Relationship(rel_id, EntityId(source_id), EntityId(target_id), rel_type)
        self.add_relationship(relationship)
        return relationship

    def outgoing_relationships(self, source_id: str) -> list[Relationship]:
        return self._store.outgoing(source_id)

    def incoming_relationships(self, target_id: str) -> list[Relationship]:
        return self._store.incoming(target_id)

    def related_entities(
        self, source_id: str, rel_type: RelationshipType | None = None
    ) -> list[BaseEntity]:
        """Existing targets of the entity's outgoing relationships, optionally of one type."""
        return [
            entity
            for rel in self._store.outgoing(source_id)
            if rel_type is None or rel.relationship_type == rel_type
            if (entity := self.get_entity(rel.target_id)) is not None
        ]

    def dependent_entities(
        self, target_id: str, rel_type: RelationshipType | None = None
    ) -> list[BaseEntity]:
        """Existing sources of the entity's incoming relationships, optionally of one type."""
        return [
            entity
            for rel in self._store.incoming(target_id)
            if rel_type is None or rel.relationship_type == rel_type
            if (entity := self.get_entity(rel.source_id)) is not None
        ]

    def relationship_count(self) -> int:
        return len(self._relationships)

    def all_relationships(self) -> list[Relationship]:
        return list(self._relationships)

    def relationships_for_entity(self, entity_id: str) -> list[Relationship]:
        """Outgoing relationships of the entity followed by its incoming ones."""
        return self._store.outgoing(entity_id) + self._store.incoming(entity_id)

    # Serialisation

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": {str(eid): e.to_dict() for eid, e in self._entities.items()},
            "relationship_data": [r.to_dict() for r in self._relationships],
            "domain_concepts": {
                name: concept.to_dict()[DomainConceptEntity._storage_tag]
                for name, concept in self._domain_concepts.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KnowledgeGraph:
        """Rebuild a graph, including its relationship index, from ``to_dict`` output."""
        if not isinstance(data, dict):
            raise ValueError("knowledge graph data must be a dict")
        try:
            entities = data["entities"]
            relationships = data["relationship_data"]
            concepts = data["domain_concepts"]
        except KeyError as exc:
            raise ValueError(f"missing knowledge graph field: {exc.args[0]!r}") from None
        graph = cls()
        for eid, entity_data in entities.items():
            graph._entities[EntityId(eid)] = entity_from_dict(entity_data)
        for rel_data in relationships:
            graph.add_relationship(Relationship.from_dict(rel_data))
        for name, payload in concepts.items():
            concept = entity_from_dict({DomainConceptEntity._storage_tag: payload})
            graph._domain_concepts[name] = concept  # type: ignore[assignment]
        return graph

    def save(self, path: _PathArg = DEFAULT_GRAPH_FILE) -> None:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(self.to_dict(), fh, indent=2)

    @classmethod
    def load(cls, path: _PathArg = DEFAULT_GRAPH_FILE) -> KnowledgeGraph:
        with open(path, encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))