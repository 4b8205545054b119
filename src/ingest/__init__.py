"""Observation export ingestion.

This package tokenizes eBird CSV exports, extracts typed observation
rows, and dispatches them to caller handlers in order or concurrently.
"""
