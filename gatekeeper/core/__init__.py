"""
Core utilities for Gatekeeper.

This module provides foundational functionality:
- Custom exceptions
"""

__all__ = [
    'exceptions',
]
