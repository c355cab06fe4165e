from regbot.models.base import ApiModel, GenericError, Envelope
from regbot.models.models import (
    EventDetails,
    RegistrationRecord,
    RegisterResult,
    CancelResult,
    RegistrationStatus,
    ErrorCode,
)

__all__ = [
    "ApiModel",
    "GenericError",
    "Envelope",
    "EventDetails",
    "RegistrationRecord",
    "RegisterResult",
    "CancelResult",
    "RegistrationStatus",
    "ErrorCode",
]
