"""External service clients (email, in-app notifications)."""
