#!/usr/bin/env python3
"""Flask API that hands out signed Cloudinary upload parameters to the Flutter app."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from upload_signer.cloudinary_signing import CloudinarySigner
from upload_signer.config import UploadSettings, load_env


def create_app(settings: Optional[UploadSettings] = None) -> Flask:
    app = Flask(__name__)

    if settings is None:
        load_env()
        settings = UploadSettings.from_env()

    CORS(app,
         origins=settings.cors_origin,
         methods=["GET", "OPTIONS"],
         allow_headers=["Content-Type", "Authorization"],
         send_wildcard=True)

    # Per-client limit on signature requests
    limiter = Limiter(
        app=app,
        key_func=get_remote_address,
        storage_uri="memory://",
    )

    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("sign_upload_api")

    if settings.missing_credentials():
        missing = ", ".join(settings.missing_credentials())
        logger.warning(f"Cloudinary credentials incomplete, /api/sign-upload will fail: {missing}")

    signer = CloudinarySigner(settings)
    app.config["UPLOAD_SETTINGS"] = settings

    @app.route("/health", methods=["GET"])
    def health_check() -> Dict[str, str]:
        return {
            "status": "healthy",
            "service": "cloudinary-upload-signer",
        }

    @app.route("/api/sign-upload", methods=["GET"])
    @limiter.limit(settings.sign_rate_limit)
    def sign_upload() -> tuple:
        """Return a signature plus the exact params the client must upload with."""
        try:
            payload = signer.generate_upload_signature()
            return jsonify(payload), 200
        except Exception:  # noqa: BLE001
            logger.exception("Failed to sign upload")
            return jsonify({"error": "Failed to sign upload"}), 500

    # ------------------------------------------------------------------
    # JSON error bodies for the mobile client
    # ------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(exc) -> tuple:
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(exc) -> tuple:
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def rate_limited(exc) -> tuple:
        logger.warning(f"Rate limit exceeded: {exc.description}")
        return jsonify({"error": "Rate limit exceeded"}), 429

    return app

