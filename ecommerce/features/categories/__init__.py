"""Category management."""
