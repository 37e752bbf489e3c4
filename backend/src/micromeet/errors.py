"""Domain error taxonomy.

Services raise these exceptions; a single exception handler registered in
main.py renders them as ``{"error": code, "message": message}`` with the
status code carried by the class. Messages are user-facing and mostly
Indonesian, matching what the frontend shows in its toast notifications.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all expected, user-facing failures."""

    code = "domain_error"
    status_code = 400
    default_message = "Permintaan tidak dapat diproses"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class Unauthenticated(DomainError):
    """No valid session."""

    code = "unauthenticated"
    status_code = 401
    default_message = "Unauthorized: Please log in"


class NoOrganization(DomainError):
    """Authenticated, but the user has no organization membership yet."""

    code = "no_organization"
    status_code = 403
    default_message = "No organization found. Please complete registration."


class NotFound(DomainError):
    code = "not_found"
    status_code = 404
    default_message = "Data tidak ditemukan"


class CrossTenant(DomainError):
    """Target row belongs to another organization.

    Rendered as 404 so callers cannot probe for the existence of other
    tenants' records.
    """

    code = "not_found"
    status_code = 404
    default_message = "Data tidak ditemukan"


class Forbidden(DomainError):
    code = "forbidden"
    status_code = 403
    default_message = "Anda tidak memiliki izin untuk melakukan tindakan ini"


class AlreadyExists(DomainError):
    code = "already_exists"
    status_code = 409
    default_message = "Data sudah ada"


class NotDeleted(DomainError):
    code = "not_deleted"
    status_code = 409
    default_message = "Dokumen tidak dalam keadaan terhapus"


class AlreadyDeleted(DomainError):
    code = "already_deleted"
    status_code = 409
    default_message = "Dokumen sudah dihapus"


class InvalidState(DomainError):
    code = "invalid_state"
    status_code = 409
    default_message = "Status tidak valid untuk tindakan ini"


class ExternalServiceFailure(DomainError):
    """SMTP or object storage call failed. Never retried by the backend."""

    code = "external_service_failure"
    status_code = 502
    default_message = "Layanan eksternal gagal"


class InvalidInput(DomainError):
    """Request is well-formed but semantically unusable."""

    code = "invalid_input"
    status_code = 422
    default_message = "Data tidak valid"


class TooManyAttempts(DomainError):
    """Login or reset attempts exceeded the window, or the client is locked out."""

    code = "too_many_attempts"
    status_code = 429
    default_message = "Terlalu banyak percobaan. Silakan coba lagi nanti."

    def __init__(self, retry_after: int, message: Optional[str] = None):
        super().__init__(message, details={"retry_after": retry_after})
        self.retry_after = retry_after
