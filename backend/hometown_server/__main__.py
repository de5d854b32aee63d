"""Run the server: `python -m hometown_server` (or the `hometown-server` script)."""

import uvicorn

from hometown_server.config import SERVER_PORT, settings


def main() -> None:
    uvicorn.run(
        "hometown_server.main:app",
        host=settings.host,
        port=SERVER_PORT,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
