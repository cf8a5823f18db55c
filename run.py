"""Entry point for serving the Seminar Review API.

Host and port are read from the environment variables ``API_HOST`` and
``API_PORT`` (defaults ``0.0.0.0`` and ``8000``).  Store and logging
settings come from the variables documented in
``seminar_review_api.app.core.config``.

Usage:
    python run.py
"""
import os

import uvicorn


def main() -> None:
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    uvicorn.run("seminar_review_api.app.main:app", host=host, port=port, reload=False, log_level="info")


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
