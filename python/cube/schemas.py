"""Wire shapes of the Cube API.

Every Cube endpoint answers with the same envelope:

    {"code": 200, "msg": "ok", "data": {"object_key": "...", "url": "...", "file_id": "..."}}

code == 200 is success; any other code is a business failure carrying msg.
The envelope is decoded once per response and then inspected through
`is_success`, never by poking at raw dicts.
"""

from dataclasses import dataclass

from pydantic import BaseModel, StrictInt, ValidationError

from cube.errors import SUCCESS_CODE, ResponseParseError


class EnvelopeData(BaseModel):
    """Payload of a successful upload."""

    object_key: str = ""
    url: str = ""
    file_id: str = ""


class ResponseEnvelope(BaseModel):
    """Uniform Cube response wrapper."""

    code: StrictInt
    msg: str = ""
    data: EnvelopeData | None = None

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE

    @property
    def payload(self) -> EnvelopeData:
        """Data block, empty when the service omitted it."""
        return self.data or EnvelopeData()


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a successful upload.

    object_key is always non-empty; url and file_id are optional extras
    the service may return.
    """

    object_key: str
    url: str | None = None
    file_id: str | None = None


def decode_envelope(body: str | bytes) -> ResponseEnvelope:
    """Decode a response body into a ResponseEnvelope.

    Raises:
        ResponseParseError: If the body is not JSON or lacks the envelope shape.
    """
    try:
        return ResponseEnvelope.model_validate_json(body)
    except ValidationError as exc:
        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        raise ResponseParseError(
            f"{exc.error_count()} validation error(s)", text
        ) from exc
