"""Domain layer: entities, value objects and pure business rules."""
