"""Entities, relationships and the knowledge graph that holds them."""

__all__ = ["entity", "relationship", "knowledge_graph", "traversal", "analysis"]