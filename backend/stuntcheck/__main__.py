"""Run the gateway with uvicorn: ``python -m stuntcheck``."""

import uvicorn

from stuntcheck.config import settings


def main() -> None:
    uvicorn.run(
        "stuntcheck.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
