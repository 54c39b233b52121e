"""Path finding and domain-concept lookups over a knowledge graph."""

from __future__ import annotations

from ummon.graph.entity import BaseEntity, DomainConceptEntity, EntityId, EntityType
from ummon.graph.knowledge_graph import KnowledgeGraph
from ummon.graph.relationship import RelationshipType


def find_paths(
    graph: KnowledgeGraph, from_id: str, to_id: str, max_depth: int
) -> list[list[BaseEntity]]:
    """All simple paths of existing entities from one entity to another.

    A path holds at most ``max_depth`` entities, counting both ends. Nothing is
    found when the starting entity is not in the graph.
    """
    start = graph.get_entity(from_id)
    if start is None:
        return []

    target = EntityId(to_id)
    paths: list[list[BaseEntity]] = []
    visited: set[EntityId] = {EntityId(from_id)}
    current_path: list[BaseEntity] = [start]

    def walk(current_id: EntityId) -> None:
        if current_id == target:
            paths.append(list(current_path))
            return
        if len(current_path) >= max_depth:
            return
        for rel in graph.outgoing_relationships(current_id):
            next_id = rel.target_id
            if next_id in visited:
                continue
            next_entity = graph.get_entity(next_id)
            if next_entity is None:
                continue
            visited.add(next_id)
            current_path.append(next_entity)
            walk(next_id)
            current_path.pop()
            visited.discard(next_id)

    walk(EntityId(from_id))
    return paths


def entities_for_domain_concept(
    graph: KnowledgeGraph, concept_name: str
) -> list[BaseEntity]:
    """Code entities that represent the named domain concept."""
    concepts = {concept.name: concept for concept in graph.domain_concepts()}
    concept = concepts.get(concept_name)
    if concept is None:
        return []
    return graph.related_entities(concept.id, RelationshipType.REPRESENTED_BY)


def domain_concepts_for_entity(
    graph: KnowledgeGraph, entity_id: str
) -> list[DomainConceptEntity]:
    """Domain concepts that are represented by the given code entity."""
    concepts = {concept.name: concept for concept in graph.domain_concepts()}
    return [
        concept
        for entity in graph.dependent_entities(entity_id, RelationshipType.REPRESENTED_BY)
        if entity.entity_type == EntityType.DOMAIN_CONCEPT
        if (concept := concepts.get(entity.name)) is not None
    ]