"""Repository maintenance tools."""
