"""Warden entrypoint.

Run with:
  python -m warden
"""

import os

import uvicorn


def main() -> None:
    host = os.getenv("WARDEN_HOST", "0.0.0.0")
    port = int(os.getenv("WARDEN_PORT", "8080"))
    reload = os.getenv("WARDEN_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("warden.asgi:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
