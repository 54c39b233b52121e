"""Typed, weighted relationships between entities, and an indexed store for them."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, ClassVar

from ummon.graph.entity import EntityId

_BUILTIN_TYPE_NAMES = (
    "Calls",
    "Contains",
    "Imports",
    "Inherits",
    "Implements",
    "References",
    "Defines",
    "Uses",
    "Depends",
    "RepresentedBy",
    "RelatesTo",
    "DependsOn",
)
_OTHER = "Other"


@dataclass(frozen=True)
class RelationshipType:
    """Kind of a relationship; a built-in kind or a custom one made with ``other``."""

    name: str
    custom: str | None = None

    CALLS: ClassVar[RelationshipType]
    CONTAINS: ClassVar[RelationshipType]
    IMPORTS: ClassVar[RelationshipType]
    INHERITS: ClassVar[RelationshipType]
    IMPLEMENTS: ClassVar[RelationshipType]
    REFERENCES: ClassVar[RelationshipType]
    DEFINES: ClassVar[RelationshipType]
    USES: ClassVar[RelationshipType]
    DEPENDS: ClassVar[RelationshipType]
    REPRESENTED_BY: ClassVar[RelationshipType]
    RELATES_TO: ClassVar[RelationshipType]
    DEPENDS_ON: ClassVar[RelationshipType]

    def __post_init__(self) -> None:
        if self.name == _OTHER:
            if self.custom is None:
                raise ValueError("a custom relationship type needs a name")
        elif self.name not in _BUILTIN_TYPE_NAMES:
            raise ValueError(f"unknown relationship type: {self.name!r}")
        elif self.custom is not None:
            raise ValueError(f"relationship type {self.name!r} takes no custom name")

    @classmethod
    def other(cls, name: str) -> RelationshipType:
        """A custom relationship type with the given name."""
        return cls(_OTHER, name)

    @property
    def is_other(self) -> bool:
        return self.name == _OTHER

    def __str__(self) -> str:
        if self.is_other:
            return f"Other({self.custom})"
        return self.name

    def _to_json(self) -> Any:
        if self.is_other:
            return {_OTHER: self.custom}
        return self.name

    @classmethod
    def _from_json(cls, data: Any) -> RelationshipType:
        if isinstance(data, str):
            return cls(data)
        if isinstance(data, dict) and set(data) == {_OTHER}:
            return cls.other(data[_OTHER])
        raise ValueError(f"invalid relationship type: {data!r}")


for _type_name, _attr in zip(
    _BUILTIN_TYPE_NAMES,
    (
        "CALLS",
        "CONTAINS",
        "IMPORTS",
        "INHERITS",
        "IMPLEMENTS",
        "REFERENCES",
        "DEFINES",
        "USES",
        "DEPENDS",
        "REPRESENTED_BY",
        "RELATES_TO",
        "DEPENDS_ON",
    ),
):
    setattr(RelationshipType, _attr, RelationshipType(_type_name))


@dataclass
class Relationship:
    """A directed relationship from one entity to another."""

    id: str
    source_id: EntityId
    target_id: EntityId
    relationship_type: RelationshipType
    weight: float = 1.0
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.source_id = EntityId(self.source_id)
        self.target_id = EntityId(self.target_id)

    @staticmethod
    def generate_id(
        source_id: str, target_id: str, rel_type: RelationshipType
    ) -> str:
        """Default identifier built from source, target and type."""
        type_str = rel_type.custom if rel_type.is_other else rel_type.name
        return f"{source_id}->{target_id}::{type_str}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source_id": str(self.source_id),
            "target_id": str(self.target_id),
            "relationship_type": self.relationship_type._to_json(),
            "weight": self.weight,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Relationship:
        """Rebuild a relationship from the dict produced by ``to_dict``."""
        if not isinstance(data, dict):
            raise ValueError("relationship data must be a dict")
        try:
            return cls(
                id=data["id"],
                source_id=EntityId(data["source_id"]),
                target_id=EntityId(data["target_id"]),
                relationship_type=RelationshipType._from_json(data["relationship_type"]),
                weight=float(data["weight"]),
                metadata=dict(data["metadata"]),
            )
        except KeyError as exc:
            raise ValueError(f"missing relationship field: {exc.args[0]!r}") from None
        except TypeError as exc:
            raise ValueError(f"malformed relationship data: {exc}") from exc


class RelationshipStore:
    """Relationships indexed by id, source and target."""

    def __init__(self) -> None:
        self._relationships: dict[str, Relationship] = {}
        self._outgoing: defaultdict[str, list[str]] = defaultdict(list)
        self._incoming: defaultdict[str, list[str]] = defaultdict(list)

    def add(self, relationship: Relationship) -> None:
        """Store a relationship; a repeated id replaces the stored one but is indexed again."""
        rel_id = relationship.id
        self._relationships[rel_id] = relationship
        self._outgoing[relationship.source_id].append(rel_id)
        self._incoming[relationship.target_id].append(rel_id)

    def outgoing(self, entity_id: str) -> list[Relationship]:
        """Relationships whose source is the given entity, in insertion order."""
        return [self._relationships[rid] for rid in self._outgoing.get(entity_id, ())]

    def incoming(self, entity_id: str) -> list[Relationship]:
        """Relationships whose target is the given entity, in insertion order."""
        return [self._relationships[rid] for rid in self._incoming.get(entity_id, ())]