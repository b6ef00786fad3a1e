"""Domain layer for songdb."""
