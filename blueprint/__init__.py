"""
Blueprint Service - items and categories API with an event worker
"""

__version__ = "1.0.0"
