"""
Real estate pro forma calculator with remote scenario persistence.
"""

__version__ = "0.1.0"
