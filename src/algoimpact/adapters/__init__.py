# src/algoimpact/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Indexer (ledger query service)
- Formatting (output)
"""

__all__ = []
