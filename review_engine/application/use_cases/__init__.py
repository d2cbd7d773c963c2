"""Application use cases (orchestration of services and ports)."""
