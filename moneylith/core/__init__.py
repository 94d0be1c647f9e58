"""Domain models, settings, logging and exceptions."""
