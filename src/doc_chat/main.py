"""Entrypoint: run the document chat server."""

import uvicorn

from doc_chat.api.app import create_app
from doc_chat.config.settings import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
