# src/algoimpact/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Request pacing
- Logging configuration
"""

from algoimpact.shared.validators import (
    validate_address,
    validate_indexer_url,
    validate_log_level,
)
from algoimpact.shared.pacing import Pacer

__all__ = [
    "validate_address",
    "validate_indexer_url",
    "validate_log_level",
    "Pacer",
]
