"""speechdesk-api: text-to-speech service with saved speech history."""

__version__ = "0.1.0"
