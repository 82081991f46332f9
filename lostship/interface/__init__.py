"""Command and display adapters for Lost Ship."""
