"""Shared utilities: configuration, logging, exceptions and caching."""
