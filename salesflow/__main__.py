"""Run the API server: ``python -m salesflow``."""

import uvicorn

from salesflow.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "salesflow.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
        reload=settings.is_development and settings.debug,
    )


if __name__ == "__main__":
    main()
