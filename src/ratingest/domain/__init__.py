"""Domain layer: entities, ports and the comment import core."""
