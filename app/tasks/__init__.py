"""Periodic tasks shared by the API and the job runners."""
