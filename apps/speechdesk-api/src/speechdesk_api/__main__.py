"""Entry point for speechdesk-api."""

from __future__ import annotations

import uvicorn

from .config import APIConfig


def main() -> None:
    config = APIConfig()
    uvicorn.run(
        "speechdesk_api.main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
