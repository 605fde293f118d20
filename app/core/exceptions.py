"""Domain exception taxonomy.

Shape validators never raise; they return ``ValidationResult`` objects.
These exceptions cover the conditions that do propagate: form-level
rejection of a write, session state, missing entities and backend outages.
Each carries a machine-readable ``code`` used by the API error envelope.
"""

from typing import Dict, Optional


class AppError(Exception):
    """Base class for all domain errors"""

    code = "APP_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """A single field failed validation"""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class RecordValidationError(AppError):
    """A record failed form validation; ``errors`` maps field -> reason"""

    code = "VALIDATION_ERROR"

    def __init__(self, errors: Dict[str, str], message: str = "הנתונים שהוזנו אינם תקינים"):
        super().__init__(message)
        self.errors = dict(errors)


class UniquenessConflict(AppError):
    """Another record already holds a value that must be unique"""

    code = "UNIQUENESS_CONFLICT"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class NotAuthenticated(AppError):
    """No valid session; the caller should start the login flow"""

    code = "NOT_AUTHENTICATED"

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class InvalidCredentials(AppError):
    """Login rejected by both the primary backend and the demo directory"""

    code = "INVALID_CREDENTIALS"


class NotFound(AppError):
    """Entity lookup by id found nothing"""

    code = "RESOURCE_NOT_FOUND"

    def __init__(self, collection: str, record_id: Optional[str] = None):
        message = f"{collection} record {record_id} not found" if record_id else f"{collection} not found"
        super().__init__(message)
        self.collection = collection
        self.record_id = record_id


class BackendUnavailable(AppError):
    """A persistence or authentication backend could not be reached"""

    code = "BACKEND_UNAVAILABLE"
