"""Domain layer: entities, value objects, DTOs and exceptions."""
