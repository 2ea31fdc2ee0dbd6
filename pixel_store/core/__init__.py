"""Core primitives - records, queries, connections and the engine."""
