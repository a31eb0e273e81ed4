"""
Utilities for midiwire.
"""
