# utils/errors.py
from typing import List, Optional

# MongoDB error code for unique index violations
DUPLICATE_KEY_CODE = 11000


class StoreError(Exception):
    """Failure reported by the data store."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class DuplicateKeyStoreError(StoreError):
    def __init__(self, message: str = "Duplicate key"):
        super().__init__(message, code=DUPLICATE_KEY_CODE)


class ValidationFailed(Exception):
    """Required fields are missing; no store call was made."""

    def __init__(self, missing: List[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing
