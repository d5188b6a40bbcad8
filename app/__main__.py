# app/__main__.py
"""
Run the service: ``python -m app``.

uvicorn owns the process lifecycle. On SIGINT/SIGTERM it stops accepting
connections, lets in-flight requests finish, then runs the lifespan
shutdown hook (which closes the shared HTTP sessions).
"""
import uvicorn

from app.config import settings


def main() -> None:
    uvicorn.run(
        "app.transport.http_app:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # keep the handlers installed by setup_logging()
        proxy_headers=False,
    )


if __name__ == "__main__":
    main()
