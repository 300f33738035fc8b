import hashlib

import pytest

from sign_upload_api import create_app
from upload_signer.config import UploadSettings


TEST_SECRET = "test-api-secret"


def expected_signature(timestamp, secret=TEST_SECRET):
    to_sign = (
        f"folder=flutter_uploads&timestamp={timestamp}"
        f"&unique_filename=false&use_filename=true{secret}"
    )
    return hashlib.sha1(to_sign.encode("utf-8")).hexdigest()


@pytest.fixture()
def settings():
    return UploadSettings(
        cloud_name="demo-cloud",
        api_key="123456789012345",
        api_secret=TEST_SECRET,
    )


@pytest.fixture()
def app(settings):
    application = create_app(settings)
    application.config["TESTING"] = True
    return application


@pytest.fixture()
def client(app):
    return app.test_client()
