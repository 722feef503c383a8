"""
DSA Coach backend package.

This package exposes a FastAPI application that relays chat messages about
coding-interview problems to a configurable LLM provider, enriched with problem
context from the LeetCode catalog.
"""

__all__ = ["__version__"]

__version__ = "1.0.0"
