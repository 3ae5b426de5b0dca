"""
Profile share walkthrough against a running server.

Exercises get -> update -> upload logo -> remove logo -> save QR and prints
each response.

Run: python scripts/smoke_flow.py [BASE_URL] [LOGO_PATH]
"""

import json
import mimetypes
import sys
from pathlib import Path

import requests

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.security import create_access_token

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000/api"


def print_section(title):
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


def print_response(response):
    print(f"HTTP {response.status_code}")
    print(json.dumps(response.json(), indent=2, ensure_ascii=False))


def main():
    user_id = input("User id for the token (Enter for 'smoke-user'): ").strip() or "smoke-user"
    headers = {"Authorization": f"Bearer {create_access_token(user_id)}"}
    url = f"{BASE_URL}/profile-share"

    print_section("STEP 1: Get or create record")
    print_response(requests.get(url, headers=headers))

    print_section("STEP 2: Update QR settings")
    print_response(requests.put(
        url,
        json={"qrSettings": {"pattern": "dots", "dotColor": "#ff0000"}},
        headers=headers,
    ))

    print_section("STEP 3: Upload logo")
    logo_path = Path(sys.argv[2]) if len(sys.argv) > 2 else None
    if logo_path and logo_path.exists():
        with open(logo_path, "rb") as f:
            response = requests.post(
                f"{url}/upload-logo",
                files={"logo": (logo_path.name, f, mimetypes.guess_type(logo_path.name)[0] or "application/octet-stream")},
                headers=headers,
            )
        print_response(response)
    else:
        print("No logo path given, skipping upload")

    print_section("STEP 4: Remove logo")
    print_response(requests.delete(f"{url}/remove-logo", headers=headers))

    print_section("STEP 5: Save QR snapshot")
    print_response(requests.post(
        f"{url}/save-qr",
        json={"qrCodeImage": "data:image/png;base64,iVBORw0KGgo="},
        headers=headers,
    ))


if __name__ == "__main__":
    main()
