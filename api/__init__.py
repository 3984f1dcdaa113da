"""Yieldly HTTP API (aiohttp)."""
