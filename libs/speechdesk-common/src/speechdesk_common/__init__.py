"""Shared configuration, logging and error handling for speechdesk services."""
