#!/usr/bin/env python3
"""
Cloudinary upload signing for the Flutter client.

The mobile app uploads files straight to Cloudinary. Before doing so it asks
this backend for a signature over the upload parameters it is allowed to use:

1. The backend picks the current Unix timestamp
2. Builds the fixed parameter set (keep original filename, no random suffix,
   fixed destination folder)
3. Signs it with the API secret through the Cloudinary SDK
4. Hands back the signature together with the exact values that were signed

Cloudinary recomputes the signature from the form fields the client submits,
so the echoed values must match the signed ones byte for byte.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from cloudinary.utils import api_sign_request

from upload_signer.config import UploadSettings


logger = logging.getLogger(__name__)

UPLOAD_FOLDER = "flutter_uploads"


@dataclass(frozen=True)
class UploadParams:
    """Request-scoped parameters that are signed and echoed to the client."""

    timestamp: int
    use_filename: bool = True
    unique_filename: bool = False
    folder: str = UPLOAD_FOLDER

    def to_signing_dict(self) -> Dict[str, Union[int, str]]:
        """Render the params the way the client will POST them.

        Booleans become ``"true"``/``"false"`` form values; the SDK would
        otherwise drop ``False`` and stringify ``True`` as ``"True"``.
        """
        return {
            "timestamp": self.timestamp,
            "use_filename": _form_bool(self.use_filename),
            "unique_filename": _form_bool(self.unique_filename),
            "folder": self.folder,
        }


def _form_bool(value: bool) -> str:
    return "true" if value else "false"


class CloudinarySigner:
    """Produces signed upload parameters for direct-to-Cloudinary uploads."""

    def __init__(self, settings: UploadSettings,
                 clock: Callable[[], float] = time.time) -> None:
        self.settings = settings
        self._clock = clock

    # ------------------------------------------------------------------
    # Signing helpers
    # ------------------------------------------------------------------
    def build_upload_params(self, timestamp: Optional[int] = None) -> UploadParams:
        if timestamp is None:
            # Ties round up
            timestamp = math.floor(self._clock() + 0.5)
        return UploadParams(timestamp=int(timestamp))

    def sign_params(self, params: UploadParams) -> str:
        """Sign ``params`` with the configured API secret.

        Raises:
            MissingConfigurationError: If any Cloudinary credential is unset.
        """
        self.settings.require_credentials()
        return api_sign_request(params.to_signing_dict(), self.settings.api_secret)

    def generate_upload_signature(self) -> Dict[str, Union[str, int, bool]]:
        """Build the full payload returned by ``GET /api/sign-upload``."""
        params = self.build_upload_params()
        signature = self.sign_params(params)
        logger.info(f"Signed upload params for folder={params.folder} timestamp={params.timestamp}")

        return {
            "signature": signature,
            "timestamp": params.timestamp,
            "cloud_name": self.settings.cloud_name,
            "api_key": self.settings.api_key,
            # The client must submit exactly these values
            "use_filename": params.use_filename,
            "unique_filename": params.unique_filename,
            "folder": params.folder,
        }
