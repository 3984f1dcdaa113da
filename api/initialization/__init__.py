"""API startup: logging, routes and the in-process sweep."""
