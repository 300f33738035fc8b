"""Tests for CloudinarySigner."""

import pytest

from upload_signer.cloudinary_signing import CloudinarySigner, UploadParams
from upload_signer.config import MissingConfigurationError, UploadSettings

from conftest import expected_signature


def fixed_clock(value):
    return lambda: value


class TestUploadParams:
    def test_fixed_values(self, settings):
        params = CloudinarySigner(settings).build_upload_params(1700000000)
        assert params == UploadParams(
            timestamp=1700000000,
            use_filename=True,
            unique_filename=False,
            folder="flutter_uploads",
        )

    def test_timestamp_comes_from_clock(self, settings):
        signer = CloudinarySigner(settings, clock=fixed_clock(1700000000.4))
        assert signer.build_upload_params().timestamp == 1700000000

    def test_half_second_rounds_up(self, settings):
        signer = CloudinarySigner(settings, clock=fixed_clock(1700000000.5))
        assert signer.build_upload_params().timestamp == 1700000001

    def test_signing_dict_uses_form_booleans(self):
        assert UploadParams(timestamp=1).to_signing_dict() == {
            "timestamp": 1,
            "use_filename": "true",
            "unique_filename": "false",
            "folder": "flutter_uploads",
        }


class TestSignParams:
    def test_matches_cloudinary_algorithm(self, settings):
        signer = CloudinarySigner(settings)
        params = signer.build_upload_params(1700000000)
        assert signer.sign_params(params) == expected_signature(1700000000)

    def test_deterministic_for_fixed_timestamp(self, settings):
        signer = CloudinarySigner(settings)
        params = signer.build_upload_params(1700000000)
        assert signer.sign_params(params) == signer.sign_params(params)

    def test_different_timestamps_give_different_signatures(self, settings):
        signer = CloudinarySigner(settings)
        first = signer.sign_params(signer.build_upload_params(1700000000))
        second = signer.sign_params(signer.build_upload_params(1700000001))
        assert first != second

    def test_secret_changes_signature(self, settings):
        other = UploadSettings(cloud_name="demo-cloud", api_key="k", api_secret="other")
        params = UploadParams(timestamp=1700000000)
        assert CloudinarySigner(settings).sign_params(params) != CloudinarySigner(other).sign_params(params)

    def test_missing_secret_raises(self):
        signer = CloudinarySigner(UploadSettings(cloud_name="c", api_key="k"))
        with pytest.raises(MissingConfigurationError):
            signer.sign_params(UploadParams(timestamp=1700000000))


class TestGenerateUploadSignature:
    def test_payload(self, settings):
        signer = CloudinarySigner(settings, clock=fixed_clock(1700000000))
        assert signer.generate_upload_signature() == {
            "signature": expected_signature(1700000000),
            "timestamp": 1700000000,
            "cloud_name": "demo-cloud",
            "api_key": "123456789012345",
            "use_filename": True,
            "unique_filename": False,
            "folder": "flutter_uploads",
        }
