"""Ingestion helpers: payload normalisation, attribute resolution and joins."""
