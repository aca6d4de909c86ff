#!/usr/bin/env python3
"""
DonFundy - Donation platform backend
====================================

Run the server:        python main.py
One-off CSV import:    python main.py import donations.csv

See config.py for all environment-variable tunables.
"""

import logging
import sys
from typing import Optional

from flask import Flask, jsonify

import config
from db import init_db
from api import api_bp


def configure_logging(level: Optional[str] = None) -> None:
    """Root logger setup shared by the server and the CLI import."""
    logging.basicConfig(
        level=getattr(logging, (level or config.LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def create_app(db_url: Optional[str] = None) -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.secret_key = config.SECRET
    app.config["MAX_CONTENT_LENGTH"] = config.MAX_UPLOAD_MB * 1024 * 1024

    configure_logging()

    # ── Initialise database ─────────────────────────────────────────
    url = db_url or config.DB_URL
    init_db(url)
    app.logger.info("Database: %s", url)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


def _import_file(path: str) -> int:
    """CLI: import one CSV file and print the summary."""
    from import_engine import run_import

    configure_logging()
    init_db(config.DB_URL)

    with open(path, "rb") as fh:
        result = run_import(fh.read())

    print(f"  Done: {result.success_count} imported, "
          f"{result.failure_count} failed / {result.total_rows} rows")
    if result.errors:
        print("  First errors (max 10):")
        for err in result.errors[:10]:
            print(f"    {err}")
    return 1 if result.all_failed else 0


def main():
    if len(sys.argv) == 3 and sys.argv[1] == "import":
        sys.exit(_import_file(sys.argv[2]))

    print("=" * 56)
    print("  DonFundy - Donation Platform")
    print("=" * 56)

    app = create_app()

    print(f"\n  http://{config.HOST}:{config.PORT}")
    print("  Bulk upload: POST /api/v1/bulk-donations/upload")
    print("  Donations:   POST /api/v1/donations")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
