"""Core models, errors and configuration."""
