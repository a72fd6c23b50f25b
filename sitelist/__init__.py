"""
SiteList Backend: Application Package Initializer
===================================================

What: Marks the `sitelist` directory as a Python package.
Why:  Enables module imports like `from sitelist.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The service is a thin HTTP layer over a single key-value store:

    ┌─────────────────────────────────────┐
    │     Gateway Route (one entry point) │  ← classify method + path
    ├─────────────────────────────────────┤
    │  Collection Service │ Asset Service │  ← read-modify-write / lookups
    ├─────────────────────────────────────┤
    │        Key-Value Store (storage)    │  ← memory | sql | filesystem
    └─────────────────────────────────────┘

    The same store holds two key spaces:
    - "websites" → JSON array of caller-defined records
    - any other key → raw bytes of a static asset, keyed by its path
"""

__version__ = "1.0.0"
