"""Blog service entrypoint.

Loads `.env` files, then serves the FastAPI app with uvicorn.
"""
from __future__ import annotations

import os

import uvicorn
from dotenv import load_dotenv

load_dotenv(".env.production")
load_dotenv(".env", override=True)

from services.blog.app import app  # noqa: E402  (settings are read at import)


def main() -> None:
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
