"""Entities stored in the knowledge graph: code elements and domain concepts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


@dataclass(frozen=True)
class Position:
    """A position in a source file."""

    line: int
    column: int
    offset: int

    def _to_json(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> Position:
        return cls(line=data["line"], column=data["column"], offset=data["offset"])


@dataclass(frozen=True)
class Location:
    """A range in a source file."""

    start: Position
    end: Position

    def _to_json(self) -> dict[str, Any]:
        return {"start": self.start._to_json(), "end": self.end._to_json()}

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> Location:
        return cls(
            start=Position._from_json(data["start"]),
            end=Position._from_json(data["end"]),
        )


class Visibility(Enum):
    """Visibility level of a code entity."""

    PUBLIC = "Public"
    PRIVATE = "Private"
    PROTECTED = "Protected"
    PACKAGE = "Package"
    INTERNAL = "Internal"
    DEFAULT = "Default"


@dataclass(frozen=True)
class Parameter:
    """A parameter of a function or method."""

    name: str
    type_annotation: str | None = None
    default_value: str | None = None

    def _to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type_annotation": self.type_annotation,
            "default_value": self.default_value,
        }

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> Parameter:
        return cls(
            name=data["name"],
            type_annotation=data.get("type_annotation"),
            default_value=data.get("default_value"),
        )


class EntityId(str):
    """Unique identifier of an entity."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"EntityId({str.__repr__(self)})"


_BUILTIN_TYPE_NAMES = (
    "Function",
    "Method",
    "Class",
    "Interface",
    "Trait",
    "Struct",
    "Enum",
    "Module",
    "File",
    "Variable",
    "Field",
    "Constant",
    "DomainConcept",
    "Type",
)
_OTHER = "Other"


@dataclass(frozen=True)
class EntityType:
    """Kind of an entity; one of the built-in kinds or a custom one made with ``other``."""

    name: str
    custom: str | None = None

    FUNCTION: ClassVar[EntityType]
    METHOD: ClassVar[EntityType]
    CLASS: ClassVar[EntityType]
    INTERFACE: ClassVar[EntityType]
    TRAIT: ClassVar[EntityType]
    STRUCT: ClassVar[EntityType]
    ENUM: ClassVar[EntityType]
    MODULE: ClassVar[EntityType]
    FILE: ClassVar[EntityType]
    VARIABLE: ClassVar[EntityType]
    FIELD: ClassVar[EntityType]
    CONSTANT: ClassVar[EntityType]
    DOMAIN_CONCEPT: ClassVar[EntityType]
    TYPE: ClassVar[EntityType]

    def __post_init__(self) -> None:
        if self.name == _OTHER:
            if self.custom is None:
                raise ValueError("a custom entity type needs a name")
        elif self.name not in _BUILTIN_TYPE_NAMES:
            raise ValueError(f"unknown entity type: {self.name!r}")
        elif self.custom is not None:
            raise ValueError(f"entity type {self.name!r} takes no custom name")

    @classmethod
    def other(cls, name: str) -> EntityType:
        """A custom entity type with the given name."""
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
    def _from_json(cls, data: Any) -> EntityType:
        if isinstance(data, str):
            return cls(data)
        if isinstance(data, dict) and set(data) == {_OTHER}:
            return cls.other(data[_OTHER])
        raise ValueError(f"invalid entity type: {data!r}")


for _type_name, _attr in zip(
    _BUILTIN_TYPE_NAMES,
    (
        "FUNCTION",
        "METHOD",
        "CLASS",
        "INTERFACE",
        "TRAIT",
        "STRUCT",
        "ENUM",
        "MODULE",
        "FILE",
        "VARIABLE",
        "FIELD",
        "CONSTANT",
        "DOMAIN_CONCEPT",
        "TYPE",
    ),
):
    setattr(EntityType, _attr, EntityType(_type_name))


def _optional(value: Any, convert: Any) -> Any:
    return None if value is None else convert(value)


@dataclass
class BaseEntity:
    """Properties shared by every entity; also usable as a plain entity."""

    _storage_tag: ClassVar[str] = "Base"

    id: EntityId
    name: str
    entity_type: EntityType
    file_path: str | None = None
    location: Location | None = None
    containing_entity: EntityId | None = None
    documentation: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.id = EntityId(self.id)
        if self.containing_entity is not None:
            self.containing_entity = EntityId(self.containing_entity)

    def _base_json(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "entity_type": self.entity_type._to_json(),
            "location": _optional(self.location, Location._to_json),
            "file_path": self.file_path,
            "containing_entity": _optional(self.containing_entity, str),
            "documentation": self.documentation,
            "metadata": dict(self.metadata),
        }

    def _payload(self) -> dict[str, Any]:
        return self._base_json()

    def to_dict(self) -> dict[str, Any]:
        """Serialise as a single-key dict tagged with the entity's storage kind."""
        return {self._storage_tag: self._payload()}

    @staticmethod
    def _base_kwargs(data: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": EntityId(data["id"]),
            "name": data["name"],
            "entity_type": EntityType._from_json(data["entity_type"]),
            "location": _optional(data.get("location"), Location._from_json),
            "file_path": data.get("file_path"),
            "containing_entity": _optional(data.get("containing_entity"), EntityId),
            "documentation": data.get("documentation"),
            "metadata": dict(data.get("metadata") or {}),
        }

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> BaseEntity:
        return cls(**cls._base_kwargs(payload))


@dataclass
class FunctionEntity(BaseEntity):
    """A function or method definition."""

    _storage_tag: ClassVar[str] = "Function"

    parameters: list[Parameter] = field(default_factory=list)
    return_type: str | None = None
    visibility: Visibility = Visibility.DEFAULT
    is_async: bool = False
    is_static: bool = False
    is_constructor: bool = False
    is_abstract: bool = False

    def _payload(self) -> dict[str, Any]:
        return {
            "base": self._base_json(),
            "parameters": [p._to_json() for p in self.parameters],
            "return_type": self.return_type,
            "visibility": self.visibility.value,
            "is_async": self.is_async,
            "is_static": self.is_static,
            "is_constructor": self.is_constructor,
            "is_abstract": self.is_abstract,
        }

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> FunctionEntity:
        return cls(
            **cls._base_kwargs(payload["base"]),
            parameters=[Parameter._from_json(p) for p in payload["parameters"]],
            return_type=payload.get("return_type"),
            visibility=Visibility(payload["visibility"]),
            is_async=payload["is_async"],
            is_static=payload["is_static"],
            is_constructor=payload["is_constructor"],
            is_abstract=payload["is_abstract"],
        )


@dataclass
class TypeEntity(BaseEntity):
    """A class, struct, interface or similar type definition."""

    _storage_tag: ClassVar[str] = "Type"

    fields: list[EntityId] = field(default_factory=list)
    methods: list[EntityId] = field(default_factory=list)
    supertypes: list[EntityId] = field(default_factory=list)
    visibility: Visibility = Visibility.DEFAULT
    is_abstract: bool = False

    def _payload(self) -> dict[str, Any]:
        return {
            "base": self._base_json(),
            "fields": [str(f) for f in self.fields],
            "methods": [str(m) for m in self.methods],
            "supertypes": [str(s) for s in self.supertypes],
            "visibility": self.visibility.value,
            "is_abstract": self.is_abstract,
        }

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> TypeEntity:
        return cls(
            **cls._base_kwargs(payload["base"]),
            fields=[EntityId(f) for f in payload["fields"]],
            methods=[EntityId(m) for m in payload["methods"]],
            supertypes=[EntityId(s) for s in payload["supertypes"]],
            visibility=Visibility(payload["visibility"]),
            is_abstract=payload["is_abstract"],
        )


@dataclass
class ModuleEntity(BaseEntity):
    """A module or file."""

    _storage_tag: ClassVar[str] = "Module"

    path: str = ""
    children: list[EntityId] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)

    def _payload(self) -> dict[str, Any]:
        return {
            "base": self._base_json(),
            "path": self.path,
            "children": [str(c) for c in self.children],
            "imports": list(self.imports),
        }

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> ModuleEntity:
        return cls(
            **cls._base_kwargs(payload["base"]),
            path=payload["path"],
            children=[EntityId(c) for c in payload["children"]],
            imports=list(payload["imports"]),
        )


@dataclass
class VariableEntity(BaseEntity):
    """A variable, field or constant."""

    _storage_tag: ClassVar[str] = "Variable"

    type_annotation: str | None = None
    visibility: Visibility = Visibility.DEFAULT
    is_const: bool = False
    is_static: bool = False

    def _payload(self) -> dict[str, Any]:
        return {
            "base": self._base_json(),
            "type_annotation": self.type_annotation,
            "visibility": self.visibility.value,
            "is_const": self.is_const,
            "is_static": self.is_static,
        }

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> VariableEntity:
        return cls(
            **cls._base_kwargs(payload["base"]),
            type_annotation=payload.get("type_annotation"),
            visibility=Visibility(payload["visibility"]),
            is_const=payload["is_const"],
            is_static=payload["is_static"],
        )


@dataclass
class DomainConceptEntity(BaseEntity):
    """A business domain concept."""

    _storage_tag: ClassVar[str] = "DomainConcept"

    attributes: list[str] = field(default_factory=list)
    description: str | None = None
    confidence: float = 0.0

    def _payload(self) -> dict[str, Any]:
        return {
            "base": self._base_json(),
            "attributes": list(self.attributes),
            "description": self.description,
            "confidence": self.confidence,
        }

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> DomainConceptEntity:
        return cls(
            **cls._base_kwargs(payload["base"]),
            attributes=list(payload["attributes"]),
            description=payload.get("description"),
            confidence=float(payload["confidence"]),
        )


_STORAGE_CLASSES: dict[str, type[BaseEntity]] = {
    cls._storage_tag: cls
    for cls in (
        FunctionEntity,
        TypeEntity,
        ModuleEntity,
        VariableEntity,
        DomainConceptEntity,
        BaseEntity,
    )
}


def entity_from_dict(data: dict[str, Any]) -> BaseEntity:
    """Rebuild an entity from the tagged dict produced by ``to_dict``."""
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError("entity data must be a dict with exactly one storage tag")
    (tag, payload), = data.items()
    try:
        cls = _STORAGE_CLASSES[tag]
    except KeyError:
        raise ValueError(f"unknown entity storage tag: {tag!r}") from None
    try:
        return cls._from_payload(payload)
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"malformed {tag} entity data: {exc}") from exc