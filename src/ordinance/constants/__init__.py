"""Shared constants for Ordinance."""
