"""Domain layer: entities, validation services and the error taxonomy."""
