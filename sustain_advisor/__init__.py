"""Sustainable Investment Profiler: conversational risk/ESG assessment and track matching."""

__version__ = "0.1.0"
