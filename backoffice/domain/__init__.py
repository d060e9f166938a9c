"""Domain layer: entities and exceptions shared by every use case."""
