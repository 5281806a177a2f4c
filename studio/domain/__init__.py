"""
Domain Module

Field mapping, partial-update statements, derived statuses and list views.
"""
from .exceptions import FieldValidationError, NoFieldsToUpdate, StudioValidationError
from .fields import map_fields
from .updates import UpdateStatement, build_update
from .listing import ListPage, ListView

__all__ = [
    "FieldValidationError",
    "NoFieldsToUpdate",
    "StudioValidationError",
    "map_fields",
    "UpdateStatement",
    "build_update",
    "ListPage",
    "ListView",
]
