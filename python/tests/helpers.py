"""Test helpers shared across Cube client tests.

Provides:
- Constants for the mocked Cube endpoint
- Envelope builders matching the service's response shape
"""

BASE_URL = "https://cube.test"
API_KEY = "test-key"
BUCKET = "assets"

SAMPLE_CONTENT = b"\x89PNG\r\n\x1a\nfake image bytes"


def success_envelope(
    object_key: str = "images/photo.png",
    url: str = "",
    file_id: str = "",
) -> dict:
    """Build a code=200 envelope with an upload payload."""
    return {
        "code": 200,
        "msg": "success",
        "data": {"object_key": object_key, "url": url, "file_id": file_id},
    }


def error_envelope(code: int, msg: str) -> dict:
    """Build a business-failure envelope."""
    return {"code": code, "msg": msg, "data": None}
