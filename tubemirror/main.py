"""Entry: start API server; the app lifespan starts the poller and sync engine."""
import logging
import uvicorn

from tubemirror.config import API_HOST, API_PORT

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    uvicorn.run(
        "tubemirror.api.app:app",
        host=API_HOST,
        port=API_PORT,
    )
