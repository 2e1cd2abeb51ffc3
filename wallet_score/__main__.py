"""Run the API with uvicorn: ``python -m wallet_score``."""

import uvicorn

from wallet_score.core.config import settings


def main() -> None:
    uvicorn.run(
        "wallet_score.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
