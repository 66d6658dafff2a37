# src/algoimpact/shared/validators.py
"""
Input Validation Utilities - Address and Configuration Validation

This module provides validation functions for account addresses given on the
command line and for configuration values loaded from the environment.

Files that USE this module:
- algoimpact.config.settings (uses validation functions in Settings field validators)
- algoimpact.app (validates the address argument of the streaming driver)

Files that this module USES:
- algosdk.encoding (address checksum decoding)
"""
import logging
import re

from algosdk import encoding

ADDRESS_LENGTH = 58
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_address(address: str) -> bool:
    """
    Validate an account address.

    Addresses are the unpadded base32 encoding of a 32-byte public key followed
    by a 4-byte checksum; the checksum is verified by the Algorand SDK.

    Args:
        address: Address to validate

    Returns:
        True if valid, False otherwise
    """
    if not address or len(address) != ADDRESS_LENGTH:
        return False

    if not re.match(r'^[A-Z2-7]+$', address):
        return False

    return encoding.is_valid_address(address)


def validate_indexer_url(url: str) -> bool:
    """
    Validate indexer base URL format.

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    if not url:
        return False
    return bool(re.match(r'^https?://[^\s/]+', url))


def validate_log_level(level: str) -> bool:
    """
    Validate logging level name (case-insensitive).

    Args:
        level: Level name to validate

    Returns:
        True if valid, False otherwise
    """
    if not level:
        return False
    return level.upper() in _LOG_LEVELS and isinstance(logging.getLevelName(level.upper()), int)
