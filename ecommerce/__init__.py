"""
E-commerce Backend

Catalog, cart, order and stock management served through a request
pipeline with tracing, validation, caching and transactional behaviors.
"""

__version__ = "0.1.0"
