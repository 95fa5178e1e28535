"""
Development server: `python -m api`.
Production runs create_app() under a WSGI server instead.
"""
import logging
import os

from . import create_app


def main() -> None:
    app = create_app(os.getenv("APP_ENV"))
    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", "8080"))
    logging.getLogger("api").info("Serving Expense Tracker API on %s:%d", host, port)
    app.run(host=host, port=port, debug=app.config.get("DEBUG", False))


if __name__ == "__main__":
    main()
