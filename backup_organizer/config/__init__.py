"""Configuration: logging, settings, cleanup profiles, exceptions."""
