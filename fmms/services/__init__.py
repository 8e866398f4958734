"""Service layer helpers."""
