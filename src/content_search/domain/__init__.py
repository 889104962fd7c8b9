"""Domain layer: content records, query values, and errors."""
