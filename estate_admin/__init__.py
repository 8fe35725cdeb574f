"""
Estate Admin API: REST backend for the real-estate listing admin dashboard.
"""

__version__ = "1.0.0"
