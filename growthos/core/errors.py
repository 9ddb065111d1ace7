"""Growth OS — Error Taxonomy.

Connectors raise these; route handlers catch vendor errors at the request
boundary and turn them into demo-data responses carrying the error code and
remediation hint. ``ValidationError`` is the only one that reaches the client
as a 4xx.
"""

from typing import Optional


class GrowthOSError(Exception):
    """Base error with a machine-readable code and a human remediation hint."""

    code = "ERROR"
    default_solution = ""

    def __init__(
        self,
        message: str,
        solution: Optional[str] = None,
        details: Optional[str] = None,
        status_code: int = 0,
    ):
        self.message = message
        self.solution = solution if solution is not None else self.default_solution
        self.details = details
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        payload = {"error": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        if self.solution:
            payload["solution"] = self.solution
        return payload


class ConfigurationMissing(GrowthOSError):
    """Credentials are absent. Callers fall back to demo data."""

    code = "NOT_CONFIGURED"
    default_solution = "Add the integration credentials to the environment"


class VendorError(GrowthOSError):
    """Any failure reported by an ad platform or Google API."""

    code = "API_ERROR"


class AuthenticationError(VendorError):
    """Expired or invalid access/refresh token."""

    code = "TOKEN_ERROR"
    default_solution = "Generate a new access token and update the environment"


class PlatformPermissionError(VendorError):
    """Token is valid but lacks the scopes the call needs."""

    code = "PERMISSION_ERROR"
    default_solution = "Regenerate the access token with the required permissions"


class ApiError(VendorError):
    """Generic vendor failure."""

    code = "API_ERROR"


class ValidationError(GrowthOSError):
    """Malformed input, rejected before any write or vendor call."""

    code = "VALIDATION_ERROR"


PERMISSION_MARKERS = (
    "ads_management",
    "ads_read",
    "permission_denied",
    "permission denied",
    "does not have permission",
    "user_permission_denied",
    "insufficient permission",
)
AUTH_MARKERS = (
    "oauthexception",
    "validating application",
    "validating access token",
    "invalid_grant",
    "invalid_token",
    "unauthenticated",
    "expired",
)


def classify_vendor_error(
    message: str,
    status_code: int = 0,
    platform: str = "",
    solutions: Optional[dict] = None,
) -> VendorError:
    """Map a vendor error message / HTTP status onto the taxonomy.

    Permission markers win over auth markers: Meta reports missing
    ``ads_read`` scopes as an ``OAuthException`` too.
    """
    solutions = solutions or {}
    lowered = (message or "").lower()
    prefix = f"{platform} " if platform else ""

    if status_code == 403 or any(m in lowered for m in PERMISSION_MARKERS):
        return PlatformPermissionError(
            f"{prefix}access token missing required permissions".strip(),
            solution=solutions.get(PlatformPermissionError.code),
            details=message,
            status_code=status_code,
        )
    if status_code == 401 or any(m in lowered for m in AUTH_MARKERS):
        return AuthenticationError(
            f"{prefix}access token invalid or expired".strip(),
            solution=solutions.get(AuthenticationError.code),
            details=message,
            status_code=status_code,
        )
    return ApiError(
        f"{prefix}API error occurred".strip(),
        solution=solutions.get(ApiError.code),
        details=message,
        status_code=status_code,
    )
