"""
Field Mapper

Per-entity allow-lists of mutable fields. Callers send any bag of field
names; only names on the entity's list reach SQL, and column names always
come from the list, never from the request.

Name normalization is a single rule applied to every entity: lowercase and
drop underscores. ``firstName``, ``first_name`` and ``FIRSTNAME`` therefore
all address the ``first_name`` column.
"""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from functools import cached_property
from typing import Annotated, Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

import structlog
from pydantic import Field, TypeAdapter, ValidationError
from sqlalchemy import Table

from studio.database.models import (
    Client,
    Invoice,
    MarketingLead,
    PhotoSession,
    Product,
    Staff,
)
from studio.domain.exceptions import FieldValidationError, NoFieldsToUpdate

logger = structlog.get_logger(__name__)


def normalize_name(name: str) -> str:
    """Collapse case and underscores so API and column spellings compare equal."""
    return name.replace("_", "").lower()


@dataclass(frozen=True)
class FieldSpec:
    """One mutable field: its storage column and the type its value must coerce to."""
    column: str
    type_: Any
    aliases: Tuple[str, ...] = ()

    @cached_property
    def adapter(self) -> TypeAdapter:
        return TypeAdapter(self.type_)

    def coerce(self, value: Any) -> Any:
        try:
            return self.adapter.validate_python(value)
        except ValidationError as e:
            message = e.errors()[0]["msg"] if e.errors() else str(e)
            raise FieldValidationError(self.column, message) from e


class MappedField(NamedTuple):
    """A validated (column, value) pair ready for an UPDATE."""
    column: str
    value: Any


@dataclass(frozen=True)
class EntityFields:
    """Allow-list for one entity, with its table and identity column."""
    entity: str
    table: Table
    key_column: str
    fields: Tuple[FieldSpec, ...]
    _index: Dict[str, FieldSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        index = {}
        for spec in self.fields:
            for name in (spec.column,) + spec.aliases:
                index[normalize_name(name)] = spec
        object.__setattr__(self, "_index", index)

    def lookup(self, name: str) -> Optional[FieldSpec]:
        return self._index.get(normalize_name(name))

    def is_identity(self, name: str) -> bool:
        return normalize_name(name) == normalize_name(self.key_column)


OptionalStr = Optional[str]
OptionalDecimal = Optional[Decimal]
OptionalDate = Optional[date]
OptionalTime = Optional[time]
StockLevel = Annotated[int, Field(ge=0)]


CLIENT_FIELDS = EntityFields(
    entity="client",
    table=Client.__table__,
    key_column="client_email",
    fields=(
        FieldSpec("first_name", str),
        FieldSpec("last_name", str),
        FieldSpec("phone", OptionalStr),
        FieldSpec("street", OptionalStr),
        FieldSpec("city", OptionalStr),
        FieldSpec("state", OptionalStr),
        FieldSpec("zip", OptionalStr),
        FieldSpec("lead_source", OptionalStr),
        FieldSpec("managed_by_staff_email", OptionalStr),
        FieldSpec("marketing_lead_email", OptionalStr),
        FieldSpec("last_session_date", OptionalDate),
    ),
)

STAFF_FIELDS = EntityFields(
    entity="staff",
    table=Staff.__table__,
    key_column="staff_email",
    fields=(
        FieldSpec("first_name", str),
        FieldSpec("last_name", str),
        FieldSpec("role", OptionalStr),
        FieldSpec("phone", OptionalStr),
        FieldSpec("hire_date", OptionalDate),
        FieldSpec("pay_rate", OptionalDecimal),
        FieldSpec("street", OptionalStr),
        FieldSpec("city", OptionalStr),
        FieldSpec("state", OptionalStr),
        FieldSpec("zip", OptionalStr),
    ),
)

SESSION_FIELDS = EntityFields(
    entity="session",
    table=PhotoSession.__table__,
    key_column="session_id",
    fields=(
        FieldSpec("session_type", OptionalStr),
        FieldSpec("session_date", date),
        FieldSpec("session_start_time", OptionalTime),
        FieldSpec("session_end_time", OptionalTime),
        FieldSpec("location", OptionalStr),
        FieldSpec("package_name", OptionalStr),
        FieldSpec("session_fee", OptionalDecimal),
        FieldSpec("deposit_paid", OptionalDecimal),
        FieldSpec("notes", OptionalStr),
        FieldSpec("client_email", str),
    ),
)

INVOICE_FIELDS = EntityFields(
    entity="invoice",
    table=Invoice.__table__,
    key_column="invoice_number",
    fields=(
        FieldSpec("invoice_date", date),
        FieldSpec("description", OptionalStr),
        FieldSpec("subtotal", Decimal),
        FieldSpec("tax", Decimal),
        FieldSpec("total_due", Decimal),
        FieldSpec("balance_due", Decimal),
        FieldSpec("payment_received", Decimal),
        FieldSpec("balance_due_date", OptionalDate),
        FieldSpec("client_email", str),
    ),
)

PRODUCT_FIELDS = EntityFields(
    entity="product",
    table=Product.__table__,
    key_column="product_id",
    fields=(
        FieldSpec("product_name", str),
        FieldSpec("cost_price", OptionalDecimal),
        FieldSpec("sale_price", Decimal),
        # The dashboard still posts the legacy name
        FieldSpec("stock_level", StockLevel, aliases=("initial_stock_level",)),
        FieldSpec("supplier", OptionalStr),
    ),
)

MARKETING_LEAD_FIELDS = EntityFields(
    entity="marketing_lead",
    table=MarketingLead.__table__,
    key_column="email",
    fields=(
        FieldSpec("interests", OptionalStr),
        FieldSpec("date_signed_up", OptionalDate),
    ),
)


def map_fields(entity: EntityFields, updates: Mapping[str, Any]) -> List[MappedField]:
    """
    Restrict a bag of proposed changes to the entity's mutable columns.

    Args:
        entity: Allow-list of the target entity
        updates: Caller-supplied field names and values, in submission order

    Returns:
        Validated (column, value) pairs in the order first submitted. A column
        named twice under different spellings keeps the last value.

    Raises:
        FieldValidationError: If a value does not coerce to its column type
        NoFieldsToUpdate: If no mutable field remains after filtering
    """
    mapped: Dict[str, Any] = {}
    ignored = []

    for name, value in updates.items():
        if entity.is_identity(name):
            ignored.append(name)
            continue
        spec = entity.lookup(name)
        if spec is None:
            ignored.append(name)
            continue
        mapped[spec.column] = spec.coerce(value)

    if ignored:
        logger.debug("Ignoring non-updatable fields", entity=entity.entity, fields=ignored)

    if not mapped:
        raise NoFieldsToUpdate(entity.entity)

    return [MappedField(column, value) for column, value in mapped.items()]
