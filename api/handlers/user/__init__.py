"""User-facing handlers."""
