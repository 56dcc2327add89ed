"""Core planning workflow logic (validation, generation, configuration)."""
