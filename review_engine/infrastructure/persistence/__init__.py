"""Persistence: engine, ORM models, repositories."""
