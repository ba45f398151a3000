"""Serve the payments API with uvicorn: python -m payments_api."""

import uvicorn

from payments_api.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "payments_api.main:app",
        host=settings.listen_host,
        port=settings.listen_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
