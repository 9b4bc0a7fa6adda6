"""Core data models and error taxonomy."""
