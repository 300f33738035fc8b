#!/usr/bin/env python3
"""
Signed Upload Smoke Test

Runs the same steps the Flutter client performs against a live backend:
1. Check the backend health endpoint
2. Request a signature from /api/sign-upload
3. Optionally upload a local file straight to Cloudinary with the signed params

Cloudinary rejects the upload if the submitted fields differ from what was
signed, so a successful step 3 proves the whole contract end to end.
"""

import os
import sys
from typing import Optional

import requests


CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload"


class SignedUploadTester:
    """Exercises the signing backend the way the mobile app does."""

    def __init__(self, backend_url: str = "http://localhost:3000"):
        self.backend_url = backend_url.rstrip("/")
        print(f"🔧 Initialized tester with backend: {self.backend_url}")

    def check_backend_health(self) -> bool:
        try:
            response = requests.get(f"{self.backend_url}/health", timeout=5)
        except requests.RequestException as e:
            print(f"❌ Backend API not reachable: {e}")
            return False

        if response.status_code == 200:
            print("✅ Backend API is healthy")
            return True
        print(f"❌ Backend API unhealthy: {response.status_code}")
        return False

    def request_signature(self) -> Optional[dict]:
        """Fetch signed upload params, or None on failure."""
        try:
            response = requests.get(f"{self.backend_url}/api/sign-upload", timeout=10)
        except requests.RequestException as e:
            print(f"❌ Error requesting signature: {e}")
            return None

        if response.status_code != 200:
            print(f"❌ Failed to get signature: {response.status_code} - {response.text}")
            return None

        data = response.json()
        print(f"✅ Signature received for timestamp {data['timestamp']} (folder: {data['folder']})")
        return data

    def upload_file(self, signed: dict, file_path: str) -> Optional[dict]:
        """Upload ``file_path`` to Cloudinary using the signed params."""
        if not os.path.exists(file_path):
            print(f"❌ File not found: {file_path}")
            return None

        form = {
            "api_key": signed["api_key"],
            "timestamp": str(signed["timestamp"]),
            "signature": signed["signature"],
            "folder": signed["folder"],
            # Must match the signed string exactly
            "use_filename": "true" if signed["use_filename"] else "false",
            "unique_filename": "true" if signed["unique_filename"] else "false",
        }
        url = CLOUDINARY_UPLOAD_URL.format(cloud_name=signed["cloud_name"])

        print(f"📤 Uploading {file_path} to {url}")
        try:
            with open(file_path, "rb") as f:
                response = requests.post(
                    url,
                    data=form,
                    files={"file": (os.path.basename(file_path), f)},
                    timeout=120,
                )
        except requests.RequestException as e:
            print(f"❌ Upload failed: {e}")
            return None

        if response.status_code != 200:
            print(f"❌ Cloudinary rejected the upload: {response.status_code} - {response.text}")
            return None

        result = response.json()
        print(f"✅ Uploaded as {result.get('public_id')}: {result.get('secure_url')}")
        return result

    def run(self, file_path: Optional[str] = None) -> bool:
        print("☁️  STARTING SIGNED UPLOAD SMOKE TEST")
        print("=" * 60)

        print("\n1️⃣  Testing Backend API Health")
        if not self.check_backend_health():
            return False

        print("\n2️⃣  Requesting Upload Signature")
        signed = self.request_signature()
        if not signed:
            return False

        if file_path:
            print("\n3️⃣  Uploading File to Cloudinary")
            if not self.upload_file(signed, file_path):
                return False

        print("\n" + "=" * 60)
        print("🎉 SIGNED UPLOAD SMOKE TEST PASSED!")
        return True


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Smoke test the Cloudinary upload signing backend")
    parser.add_argument("--backend-url", help="Backend API URL",
                        default=os.getenv("BACKEND_URL", "http://localhost:3000"))
    parser.add_argument("--file", help="Optional file to upload with the signed params")

    args = parser.parse_args()

    tester = SignedUploadTester(args.backend_url)
    if not tester.run(args.file):
        print("\n💡 Troubleshooting Tips:")
        print("1. Check that the backend is running: python app.py")
        print("2. Verify your .env has CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET")
        print("3. Make sure the backend clock is in sync; Cloudinary rejects stale timestamps")
        sys.exit(1)


if __name__ == "__main__":
    main()
