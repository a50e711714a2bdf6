"""Run the server: python -m headlines (honours HOST and PORT)."""

import uvicorn

from headlines.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "headlines.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
