"""Admin console handlers."""
