"""Domain layer: entities and services for coin collections."""
