"""Core type system, registries, and serde of compiled plans."""
