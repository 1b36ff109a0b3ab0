"""Entry: start the API server."""
import logging

import uvicorn

from recordkeeper.config import API_HOST, API_PORT, LOG_FORMAT, LOG_LEVEL


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    uvicorn.run(
        "recordkeeper.api.app:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
    )


if __name__ == "__main__":
    main()
