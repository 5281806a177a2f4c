"""
Domain Exceptions

Raised before any SQL is issued; the API layer turns them into 400s.
"""


class StudioValidationError(ValueError):
    """Caller input that cannot be applied to a record."""


class NoFieldsToUpdate(StudioValidationError):
    """A partial update carried no mutable field of the target entity."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__("No fields to update")


class FieldValidationError(StudioValidationError):
    """A supplied value could not be coerced to its column's type."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid value for {field}: {message}")
