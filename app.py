"""WSGI entrypoint for the Cloudinary upload signing backend."""

import logging

from sign_upload_api import create_app


app = create_app()


if __name__ == "__main__":
    port = app.config["UPLOAD_SETTINGS"].port
    logging.getLogger("sign_upload_api").info(f"Backend running on port {port}")
    app.run(host="0.0.0.0", port=port)
