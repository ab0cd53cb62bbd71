"""Inventory Catalog API."""
