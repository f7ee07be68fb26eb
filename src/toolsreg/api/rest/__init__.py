"""Read-only REST adapter."""
