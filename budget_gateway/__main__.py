"""Run the gateway: `python -m budget_gateway`."""

import uvicorn

from budget_gateway.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "budget_gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
