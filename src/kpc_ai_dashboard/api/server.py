"""
Insights API — Flask server exposing POST /api/insights.

Keeps the Gemini key server-side; the dashboard (or any other client) sends
only aggregate statistics.
"""
from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from kpc_ai_dashboard.config import APP_NAME, INSIGHTS_API_HOST, INSIGHTS_API_PORT, LOG_LEVEL
from kpc_ai_dashboard.core.insights import handle_insights_request

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    app = Flask(__name__)

    @app.route("/api/insights", methods=["POST"])
    def insights():
        payload = request.get_json(silent=True)
        result = handle_insights_request(payload)
        logger.info("POST /api/insights -> %d", result.status_code)
        return jsonify(result.to_json()), result.status_code

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "app": APP_NAME})

    return app


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    create_app().run(host=INSIGHTS_API_HOST, port=INSIGHTS_API_PORT)


if __name__ == "__main__":
    main()
