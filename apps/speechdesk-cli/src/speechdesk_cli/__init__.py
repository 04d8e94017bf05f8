"""speechdesk-cli: command-line client for speechdesk-api."""
