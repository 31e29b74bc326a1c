"""Error types and normalization of AWS failures into log messages."""
from typing import Optional

from botocore.exceptions import ClientError


class VpcWipeError(Exception):
    """Base class for errors that stop a whole run."""


class BootstrapError(VpcWipeError):
    """Session creation or identity verification failed."""


class RegionEnumerationError(VpcWipeError):
    """The region listing call failed (as opposed to returning no regions)."""


def error_code(exc: BaseException) -> Optional[str]:
    """Return the AWS error code carried by a ClientError, else None."""
    if isinstance(exc, ClientError):
        return exc.response.get('Error', {}).get('Code') or None
    return None


def describe_error(exc: BaseException) -> str:
    """Normalize any exception into a single loggable line."""
    if isinstance(exc, ClientError):
        err = exc.response.get('Error', {})
        code = err.get('Code', 'Unknown')
        message = err.get('Message') or str(exc)
        return f"{code}: {message}"
    message = str(exc)
    return message if message else type(exc).__name__
