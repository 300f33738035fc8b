from __future__ import annotations

"""Configuration helpers.

Handles loading of a .env file and building the explicit settings object the
API is constructed with.
"""

from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import unquote, urlparse
import os

from dotenv import load_dotenv


DEFAULT_PORT = 3000
DEFAULT_SIGN_RATE_LIMIT = "60 per minute"

CREDENTIAL_ENV_VARS = {
    "cloud_name": "CLOUDINARY_CLOUD_NAME",
    "api_key": "CLOUDINARY_API_KEY",
    "api_secret": "CLOUDINARY_API_SECRET",
}


class MissingConfigurationError(RuntimeError):
    """Raised when Cloudinary credentials are needed but not configured."""


def load_env() -> None:
    """Load environment variables from a .env file, if one exists."""
    load_dotenv()


def parse_cloudinary_url(url: str) -> dict:
    """Split ``cloudinary://<api_key>:<api_secret>@<cloud_name>`` into parts.

    Missing parts are omitted from the result.
    """
    parsed = urlparse(url)
    if parsed.scheme != "cloudinary":
        raise ValueError("CLOUDINARY_URL must start with cloudinary://")

    parts = {
        "cloud_name": parsed.hostname,
        "api_key": unquote(parsed.username) if parsed.username else None,
        "api_secret": unquote(parsed.password) if parsed.password else None,
    }
    return {key: value for key, value in parts.items() if value}


@dataclass(frozen=True)
class UploadSettings:
    """Everything the signing backend needs, read once at startup."""

    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    port: int = DEFAULT_PORT
    cors_origin: str = "*"
    sign_rate_limit: str = DEFAULT_SIGN_RATE_LIMIT

    @classmethod
    def from_env(cls) -> "UploadSettings":
        """Build settings from the process environment.

        Explicit ``CLOUDINARY_*`` variables take precedence over the values
        packed into ``CLOUDINARY_URL``. Missing credentials are not an error
        here; see :meth:`require_credentials`.
        """
        credentials = {}
        cloudinary_url = os.getenv("CLOUDINARY_URL")
        if cloudinary_url:
            credentials.update(parse_cloudinary_url(cloudinary_url))

        for field, env_var in CREDENTIAL_ENV_VARS.items():
            value = os.getenv(env_var)
            if value:
                credentials[field] = value

        port = os.getenv("PORT")
        return cls(
            port=int(port) if port else DEFAULT_PORT,
            cors_origin=os.getenv("CORS_ORIGIN", "*"),
            sign_rate_limit=os.getenv("SIGN_UPLOAD_RATE_LIMIT", DEFAULT_SIGN_RATE_LIMIT),
            **credentials,
        )

    def missing_credentials(self) -> List[str]:
        return [
            env_var
            for field, env_var in CREDENTIAL_ENV_VARS.items()
            if not getattr(self, field)
        ]

    def require_credentials(self) -> None:
        """Raise MissingConfigurationError unless all credentials are set."""
        missing = self.missing_credentials()
        if missing:
            raise MissingConfigurationError(
                f"Required environment variable not set: {', '.join(missing)}"
            )
