"""Catalog, craftability, filtering and paging engine."""
