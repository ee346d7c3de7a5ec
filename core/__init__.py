"""Shared Qt signal definitions."""
