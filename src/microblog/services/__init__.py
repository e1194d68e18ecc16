"""Service layer: identity, ranking, authorization and post operations."""
