"""Clients for external services."""

from .dify import CREATE_QUERY, DifyClient, build_inputs

__all__ = ["CREATE_QUERY", "DifyClient", "build_inputs"]
