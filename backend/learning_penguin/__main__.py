"""Start the API server with uvicorn on the configured host and port."""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run("learning_penguin.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
