"""Enumerations shared across the package."""
