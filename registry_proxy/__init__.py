"""Stateless GraphQL proxy that serves graphs from a schema registry."""

__version__ = "0.1.0"
