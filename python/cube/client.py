"""Cube storage client.

Stateless facade over the Cube HTTP API:
- Upload a local file (multipart POST /api/upload)
- Delete a stored object (DELETE /api/delete)
- Build a public access URL for a stored object (no I/O)

Every request carries the static `Key: {api_key}` header. Base URL, timeout
and header are applied to the httpx transport once, at construction.

Failure classification, in priority order:
1. Transport failure (no response)          -> TransportError
2. Status outside 2xx                       -> HttpStatusError
3. 2xx but body is not an envelope          -> ResponseParseError
4. Envelope code != 200                     -> ServiceError(code, msg)
5. Upload envelope without object_key       -> ServiceError(200500, ...)
"""

import os
from abc import ABC, abstractmethod
from types import TracebackType
from typing import BinaryIO
from urllib.parse import quote_plus
from uuid import uuid4

import httpx

from cube.config import CubeConfig, CubeSettings, get_settings, validate_config
from cube.errors import (
    ConfigurationError,
    CubeError,
    HttpStatusError,
    LocalFileError,
    ServiceError,
    TransportError,
)
from cube.logging import get_logger
from cube.schemas import ResponseEnvelope, UploadResult, decode_envelope

logger = get_logger(__name__)

UPLOAD_PATH = "/api/upload"
DELETE_PATH = "/api/delete"
FILE_PATH = "/api/file"

AUTH_HEADER = "Key"

FAKE_BASE_URL = "https://fake-cube.test"


def format_bool(value: bool) -> str:
    """Render a flag the way the Cube form API expects ("true"/"false")."""
    return "true" if value else "false"


def build_upload_form(
    bucket: str,
    location: str = "",
    *,
    convert_webp: bool = False,
    use_uuid: bool = False,
) -> dict[str, str]:
    """Build the non-file form fields of an upload request.

    `location` is only sent when non-empty.
    """
    form = {
        "bucket": bucket,
        "convert_webp": format_bool(convert_webp),
        "use_uuid": format_bool(use_uuid),
    }
    if location:
        form["location"] = location
    return form


def build_file_url(base_url: str, bucket: str, object_key: str, thumbnail: bool = False) -> str:
    """Build the public access URL of a stored object.

    The object key is query-escaped; the bucket name is inserted as is.
    """
    url = (
        f"{base_url.rstrip('/')}{FILE_PATH}"
        f"?bucket={bucket}&object_key={quote_plus(object_key)}"
    )
    if thumbnail:
        url += "&thumbnail=true"
    return url


def _require_bucket(bucket_name: str) -> str:
    if not bucket_name:
        raise ConfigurationError(
            "Default bucket name is not configured, check default_bucket_name"
        )
    return bucket_name


def _open_local_file(local_path: str | os.PathLike) -> BinaryIO:
    try:
        return open(local_path, "rb")
    except OSError as exc:
        raise LocalFileError(
            os.fspath(local_path), f"Cannot open local file {local_path}: {exc}"
        ) from exc


class CubeClientBase(ABC):
    """Abstract base class for Cube client implementations."""

    @abstractmethod
    def upload(
        self,
        local_path: str | os.PathLike,
        location: str = "",
        *,
        convert_webp: bool = False,
        use_uuid: bool = False,
    ) -> UploadResult:
        """Upload a local file to the default bucket.

        Args:
            local_path: Path of the file to upload.
            location: Optional directory inside the bucket.
            convert_webp: Ask the service to convert images to WebP.
            use_uuid: Ask the service to name the object with a UUID.

        Returns:
            UploadResult with a non-empty object_key.

        Raises:
            ConfigurationError: If no default bucket name is configured.
            LocalFileError: If the local file cannot be opened.
            TransportError, HttpStatusError, ResponseParseError, ServiceError:
                If the remote call fails.
        """
        ...

    def upload_file(
        self,
        local_path: str | os.PathLike,
        location: str = "",
        *,
        convert_webp: bool = False,
        use_uuid: bool = False,
    ) -> str:
        """Upload a local file and return its object key."""
        result = self.upload(
            local_path,
            location,
            convert_webp=convert_webp,
            use_uuid=use_uuid,
        )
        return result.object_key

    @abstractmethod
    def delete_file(self, object_key: str) -> None:
        """Delete an object from the default bucket.

        Whether deleting an absent key fails is up to the service.

        Raises:
            ConfigurationError: If no default bucket name is configured.
            TransportError, HttpStatusError, ResponseParseError, ServiceError:
                If the remote call fails.
        """
        ...

    @abstractmethod
    def get_file_url(self, object_key: str, thumbnail: bool = False) -> str:
        """Build the public URL of an object. Never performs I/O."""
        ...

    def close(self) -> None:
        """Release resources held by the client. No-op by default."""

    def __enter__(self) -> "CubeClientBase":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class CubeClient(CubeClientBase):
    """Production Cube client backed by httpx.

    Safe to share between threads as long as the underlying httpx.Client is;
    the client itself holds no mutable state after construction.
    """

    def __init__(self, config: CubeConfig | None, http_client: httpx.Client | None = None):
        """Initialize the client.

        Args:
            config: Cube configuration. timeout_s is defaulted in place when
                not positive.
            http_client: Optional transport to configure and reuse. When
                omitted the client creates and owns one.

        Raises:
            ConfigurationError: If config is None or base_url is empty.
        """
        self._config = validate_config(config)
        self._base_url = self._config.base_url.rstrip("/")

        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.Client()
        self._http.base_url = self._base_url
        self._http.timeout = httpx.Timeout(self._config.timeout_s)
        self._http.headers[AUTH_HEADER] = self._config.api_key

        logger.debug(
            "cube.client.created",
            base_url=self._base_url,
            timeout_s=self._config.timeout_s,
            owns_transport=self._owns_http,
        )

    @property
    def config(self) -> CubeConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout_s(self) -> float:
        return self._config.timeout_s

    def upload(
        self,
        local_path: str | os.PathLike,
        location: str = "",
        *,
        convert_webp: bool = False,
        use_uuid: bool = False,
    ) -> UploadResult:
        """Upload a file via POST /api/upload."""
        bucket = _require_bucket(self._config.default_bucket_name)
        file_name = os.path.basename(local_path)
        form = build_upload_form(
            bucket, location, convert_webp=convert_webp, use_uuid=use_uuid
        )
        log = logger.bind(bucket=bucket, file_name=file_name, location=location or None)

        with _open_local_file(local_path) as fh:
            log.info("cube.upload.started")
            try:
                envelope = self._call(
                    "POST",
                    UPLOAD_PATH,
                    files={"file": (file_name, fh)},
                    data=form,
                )
                data = envelope.payload
                if not data.object_key:
                    raise ServiceError.missing_object_key()
            except CubeError as exc:
                log.warning(
                    "cube.upload.failed",
                    error_code=exc.error_code.value,
                    error_type=type(exc).__name__,
                )
                raise

        log.info("cube.upload.succeeded", object_key=data.object_key)
        return UploadResult(
            object_key=data.object_key,
            url=data.url or None,
            file_id=data.file_id or None,
        )

    def delete_file(self, object_key: str) -> None:
        """Delete an object via DELETE /api/delete."""
        bucket = _require_bucket(self._config.default_bucket_name)
        log = logger.bind(bucket=bucket, object_key=object_key)

        try:
            self._call(
                "DELETE",
                DELETE_PATH,
                params={"bucket": bucket, "object_key": object_key},
            )
        except CubeError as exc:
            log.warning(
                "cube.delete.failed",
                error_code=exc.error_code.value,
                error_type=type(exc).__name__,
            )
            raise

        log.info("cube.delete.succeeded")

    def get_file_url(self, object_key: str, thumbnail: bool = False) -> str:
        """Build {base_url}/api/file?bucket=...&object_key=...[&thumbnail=true]."""
        return build_file_url(
            self._config.base_url,
            self._config.default_bucket_name,
            object_key,
            thumbnail,
        )

    def _call(self, method: str, path: str, **kwargs) -> ResponseEnvelope:
        """Issue one request and return a successful envelope.

        Raises the first matching error of the classification in the module
        docstring, steps 1 to 4.
        """
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise TransportError(f"Cube request {method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise HttpStatusError(response.status_code, response.reason_phrase, response.text)

        envelope = decode_envelope(response.content)
        if not envelope.is_success:
            raise ServiceError(envelope.code, envelope.msg)
        return envelope

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_http:
            self._http.close()


class FakeCubeClient(CubeClientBase):
    """Fake Cube client for tests and local development.

    Stores uploaded bytes in memory keyed by object key. Object keys are
    shaped like the service's: `{location}/{name}` where name is the file's
    base name, or a random hex name with the same extension when use_uuid
    is set. convert_webp is accepted and ignored.
    """

    def __init__(self, default_bucket_name: str = "fake-bucket"):
        self._bucket = default_bucket_name
        self._objects: dict[str, bytes] = {}

    def upload(
        self,
        local_path: str | os.PathLike,
        location: str = "",
        *,
        convert_webp: bool = False,
        use_uuid: bool = False,
    ) -> UploadResult:
        """Store the file content in memory."""
        _require_bucket(self._bucket)
        with _open_local_file(local_path) as fh:
            content = fh.read()

        name = os.path.basename(local_path)
        if use_uuid:
            name = f"{uuid4().hex}{os.path.splitext(name)[1]}"
        object_key = f"{location.strip('/')}/{name}" if location.strip("/") else name

        self._objects[object_key] = content
        return UploadResult(
            object_key=object_key,
            url=self.get_file_url(object_key),
            file_id=f"fake-{uuid4()}",
        )

    def delete_file(self, object_key: str) -> None:
        """Delete fake object. Missing keys are ignored."""
        _require_bucket(self._bucket)
        self._objects.pop(object_key, None)

    def get_file_url(self, object_key: str, thumbnail: bool = False) -> str:
        return build_file_url(FAKE_BASE_URL, self._bucket, object_key, thumbnail)

    # Test helper methods

    def put_object(self, object_key: str, content: bytes) -> None:
        """Store an object directly (test helper)."""
        self._objects[object_key] = content

    def get_object(self, object_key: str) -> bytes | None:
        """Get object content directly (test helper)."""
        return self._objects.get(object_key)

    def clear(self) -> None:
        """Clear all stored objects (test helper)."""
        self._objects.clear()


def get_cube_client(settings: CubeSettings | None = None) -> CubeClientBase:
    """Get the configured Cube client.

    Returns:
        CubeClient if CUBE_ENABLE is set, FakeCubeClient otherwise.

    Raises:
        ConfigurationError: If Cube is enabled but misconfigured.
    """
    if settings is None:
        settings = get_settings()

    if settings.enabled:
        return CubeClient(settings.to_config())

    # Fake client for local dev / tests without a Cube service
    return FakeCubeClient(default_bucket_name=settings.default_bucket_name or "fake-bucket")
