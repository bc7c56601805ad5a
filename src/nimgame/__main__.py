"""Entry point for running the Nim game via ``python -m nimgame``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered Nim web server."""

    host = os.environ.get("NIMGAME_HOST", "0.0.0.0")
    port = int(os.environ.get("NIMGAME_PORT", "8000"))
    log_level = os.environ.get("NIMGAME_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "nimgame.ui:app",
        host=host,
        port=port,
        reload=False,
        log_level=log_level.lower(),
    )


if __name__ == "__main__":
    main()
