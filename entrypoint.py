"""Backend entrypoint. Starts uvicorn on the app factory with port from env."""
import os
import uvicorn

from portfolio_tracker.main import create_app


def main() -> None:
    port = int(os.environ.get("BACKEND_PORT", "8001"))
    uvicorn.run(create_app(), host="127.0.0.1", port=port)


if __name__ == "__main__":
    main()
