# ummon

`ummon` keeps a knowledge graph of a codebase: functions, methods, types,
fields, modules and business domain concepts, linked by typed relationships
such as *calls*, *contains*, *imports*, *inherits* or *represented by*.
It can store the graph as JSON, walk paths through it, rank entities against
a free-text query and estimate how far a change to one entity reaches.

It also carries the core pieces of a JSON-RPC tool server: request and
response types, server capabilities, tool and resource descriptions,
content values, an error hierarchy and a `Router` base class to build a
server on.

The package has no runtime dependencies beyond the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The graph

The graph lives in `ummon.graph`:

- `ummon.graph.entity` holds the entity model: `EntityId`, `EntityType`,
  `Visibility`, `Position`, `Location`, `Parameter`, `BaseEntity` and the
  specialised entities `FunctionEntity`, `TypeEntity`, `ModuleEntity`,
  `VariableEntity` and `DomainConceptEntity`. `entity_from_dict` rebuilds any
  of them from its dictionary form.
- `ummon.graph.relationship` holds `RelationshipType`, `Relationship` and
  `RelationshipStore`, an index of relationships by source and by target.
  `Relationship.generate_id` gives the default identifier
  `"<source>-><target>::<Type>"`.
- `ummon.graph.knowledge_graph` holds `KnowledgeGraph`.
- `ummon.graph.traversal` offers `find_paths`, `entities_for_domain_concept`
  and `domain_concepts_for_entity`.
- `ummon.graph.analysis` offers `search` and `calculate_impact`.

### Building a graph

Entities are added with `KnowledgeGraph.add_entity`; adding an entity whose
id is already present replaces it. Relationships are added with
`KnowledgeGraph.create_relationship`, which does not require either end to
exist yet, so references to code that has not been analysed can be kept.

```python
from ummon.graph.knowledge_graph import KnowledgeGraph
from ummon.graph.relationship import RelationshipType
from ummon.graph import traversal

graph = KnowledgeGraph()
# ... add FunctionEntity, TypeEntity, DomainConceptEntity objects ...

graph.create_relationship(caller_id, callee_id, RelationshipType.CALLS)

graph.outgoing_relationships(caller_id)
graph.related_entities(caller_id, RelationshipType.CALLS)
traversal.find_paths(graph, caller_id, callee_id, 3)
```

`related_entities` and `dependent_entities` only return entities that are
actually in the graph; relationships to missing entities are still counted
by `relationship_count` and listed by `all_relationships`.

### Saving and loading

```python
graph.save("knowledge_graph.json")
graph = KnowledgeGraph.load("knowledge_graph.json")
```

The file is pretty-printed JSON. Loading rebuilds the relationship indexes
from the stored relationship list, so lookups by source and target work
straight away.

### Searching and impact

```python
from ummon.graph import analysis

for entity in analysis.search(graph, "user authentication function"):
    print(entity.name)

impact = analysis.calculate_impact(graph, entity_id, 3)
```

`search` is case-insensitive. It scores names, file paths, entity types and
metadata against the query and its words, boosts entity kinds the query
mentions ("function", "class", "module", "domain" and the like), and returns
at most 20 entities, best first. An empty query returns nothing.

`calculate_impact` follows incoming relationships outward from an entity for
up to `max_depth` steps and returns a mapping from entity id to a weight in
`(0, 1]`; the weight falls with each step according to the relationship type
and stops spreading once it drops to 0.1 or below.

## The tool server core

`ummon.mcp` holds the protocol side:

- `ummon.mcp.types`: `JsonRpcRequest`, `JsonRpcResponse`, `JsonRpcError`,
  `ServerCapabilities`, `CapabilityLevel`, `CapabilitiesBuilder`, `Tool`,
  `Resource`, `Content`, `InitializeParams`, `InitializeResult`,
  `ToolCallParams` and `ToolCallResult`, each convertible to and from plain
  dictionaries ready for JSON.
- `ummon.mcp.errors`: `ToolError`, `ResourceError`, `TransportError` and
  `ServerError`, with a subclass for each specific failure, such as
  `ToolNotFoundError` or `ResourcePermissionError`.
- `ummon.mcp.router`: the `Router` base class.

```python
from ummon.mcp.types import CapabilitiesBuilder, Content

capabilities = CapabilitiesBuilder().with_tools(True).with_resources(True, False).build()
reply = Content.text("hello")
```

A server subclasses `Router` and supplies `name`, `instructions`,
`capabilities`, `list_tools` and the coroutine `call_tool`. Resources are
optional: by default `list_resources` returns nothing, `read_resource`
raises `ResourceNotFoundError` and `write_resource` raises
`ResourcePermissionError`.