"""Configuration models, settings and error types."""
