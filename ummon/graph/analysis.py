"""Relevance search and change-impact estimation over a knowledge graph."""

from __future__ import annotations

from ummon.graph.entity import BaseEntity, EntityId, EntityType
from ummon.graph.knowledge_graph import KnowledgeGraph
from ummon.graph.relationship import RelationshipType

MAX_SEARCH_RESULTS = 20
_IMPACT_THRESHOLD = 0.1
_DEFAULT_RELATIONSHIP_IMPACT = 0.5

_RELATIONSHIP_IMPACT: dict[RelationshipType, float] = {
    RelationshipType.CALLS: 0.9,
    RelationshipType.IMPLEMENTS: 0.9,
    RelationshipType.INHERITS: 0.9,
    RelationshipType.CONTAINS: 0.8,
    RelationshipType.IMPORTS: 0.7,
    RelationshipType.REFERENCES: 0.6,
    RelationshipType.USES: 0.5,
    RelationshipType.DEPENDS: 0.8,
    RelationshipType.DEPENDS_ON: 0.7,
}

# Entity kinds that get a bonus when the query mentions one of the given words.
_TYPE_BOOSTS: tuple[tuple[frozenset[EntityType], tuple[str, ...]], ...] = (
    (frozenset({EntityType.FUNCTION, EntityType.METHOD}), ("function", "method", "call")),
    (
        frozenset({EntityType.CLASS, EntityType.STRUCT, EntityType.TYPE}),
        ("class", "type", "struct"),
    ),
    (frozenset({EntityType.MODULE, EntityType.FILE}), ("module", "file")),
    (frozenset({EntityType.DOMAIN_CONCEPT}), ("domain", "concept", "business")),
)


def _token_matches(entity: BaseEntity, tokens: list[str]) -> int:
    name = entity.name.lower()
    path = entity.file_path.lower() if entity.file_path is not None else None
    type_str = str(entity.entity_type).lower()
    metadata_values = [value.lower() for value in entity.metadata.values()]

    matches = 0
    for token in tokens:
        matches += token in name
        if path is not None:
            matches += token in path
        matches += token in type_str
        matches += any(token in value for value in metadata_values)
    return matches


def _type_boost(entity_type: EntityType, query: str) -> float:
    for kinds, words in _TYPE_BOOSTS:
        if entity_type in kinds:
            return 2.0 if any(word in query for word in words) else 0.0
    return 0.0


def _score(entity: BaseEntity, query: str, tokens: list[str]) -> float:
    score = 0.0
    name = entity.name.lower()
    if name == query:
        score += 10.0
    elif query in name:
        score += 5.0

    matches = _token_matches(entity, tokens)
    if matches:
        score += matches / len(tokens) * 3.0

    return score + _type_boost(entity.entity_type, query)


def search(graph: KnowledgeGraph, query: str) -> list[BaseEntity]:
    """Entities matching a free-text query, most relevant first, at most 20.

    Matching is case-insensitive over names, file paths, entity types and
    metadata values; a blank query finds nothing.
    """
    query = query.lower()
    tokens = query.split()
    if not tokens:
        return []

    scored = [
        (score, entity)
        for entity in graph.all_entities()
        if (score := _score(entity, query, tokens)) > 0.0
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [entity for _, entity in scored[:MAX_SEARCH_RESULTS]]


def calculate_impact(
    graph: KnowledgeGraph, entity_id: str, max_depth: int
) -> dict[EntityId, float]:
    """Estimated impact of changing an entity on the entities that depend on it.

    The entity itself has impact 1.0; impact spreads backwards along incoming
    relationships, decaying by relationship kind and weight, for at most
    ``max_depth`` levels and only while it stays above 0.1.
    """
    impact: dict[EntityId, float] = {}
    queue: list[tuple[EntityId, float]] = [(EntityId(entity_id), 1.0)]

    for _ in range(max_depth):
        if not queue:
            break
        next_queue: list[tuple[EntityId, float]] = []
        for current_id, weight in queue:
            if weight > impact.get(current_id, 0.0):
                impact[current_id] = weight
            else:
                impact.setdefault(current_id, 0.0)

            for rel in graph.incoming_relationships(current_id):
                factor = _RELATIONSHIP_IMPACT.get(
                    rel.relationship_type, _DEFAULT_RELATIONSHIP_IMPACT
                )
                new_weight = weight * factor * rel.weight
                if new_weight > _IMPACT_THRESHOLD:
                    next_queue.append((EntityId(rel.source_id), new_weight))
        queue = next_queue

    return impact