# src/algoimpact/adapters/formatting/__init__.py
"""
Formatting Adapters - Output Presentation

This package contains formatting functions for the driver's JSON line output.
"""

from algoimpact.adapters.formatting.formatter import format_impact_line, impact_record

__all__ = [
    "format_impact_line",
    "impact_record",
]
