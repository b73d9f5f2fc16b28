"""Run the API server: `python -m leadbook`."""

import uvicorn

from leadbook.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "leadbook.api.app:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
