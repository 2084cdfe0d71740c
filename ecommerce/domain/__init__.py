"""Domain layer: requests, results and cache value objects."""
