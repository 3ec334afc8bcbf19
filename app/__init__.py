"""Catalog API application package."""
