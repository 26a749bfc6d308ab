"""Configuration, logging, metrics, middleware and the error taxonomy."""
