"""Infrastructure: persistence, external delivery clients, services."""
