from floss_funding.core.exceptions.errors import (
    DecryptionFailure,
    FlossFundingError,
    PersistenceFailure,
    ValidationError,
)

__all__ = ["FlossFundingError", "ValidationError", "DecryptionFailure", "PersistenceFailure"]
