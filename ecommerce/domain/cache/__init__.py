"""
Cache Domain Module

Value objects for cache keys and expirations.
"""
