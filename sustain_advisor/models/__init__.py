"""Pydantic domain models: scores, tracks, sessions, results."""
