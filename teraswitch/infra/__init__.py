"""Transport infrastructure."""
