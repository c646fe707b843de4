"""Client library for the Cube object storage service.

Provides:
- CubeClient for uploading, deleting and addressing stored files
- FakeCubeClient for tests and local development
- CubeConfig / CubeSettings for connection parameters
- A CubeError hierarchy covering every failure category
"""

from cube.client import (
    CubeClient,
    CubeClientBase,
    FakeCubeClient,
    build_file_url,
    get_cube_client,
)
from cube.config import CubeConfig, CubeSettings, get_settings
from cube.errors import (
    ConfigurationError,
    CubeError,
    CubeErrorCode,
    HttpStatusError,
    LocalFileError,
    ResponseParseError,
    ServiceError,
    TransportError,
)
from cube.schemas import UploadResult

__all__ = [
    "CubeClient",
    "CubeClientBase",
    "FakeCubeClient",
    "build_file_url",
    "get_cube_client",
    "CubeConfig",
    "CubeSettings",
    "get_settings",
    "CubeError",
    "CubeErrorCode",
    "ConfigurationError",
    "LocalFileError",
    "TransportError",
    "HttpStatusError",
    "ResponseParseError",
    "ServiceError",
    "UploadResult",
]
