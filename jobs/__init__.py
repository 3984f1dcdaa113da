"""Background jobs: broker, actors and the standalone scheduler."""
