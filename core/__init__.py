"""Shared infrastructure: configuration, logging, errors, request context and repositories."""
