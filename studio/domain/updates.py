"""
Update Statement Builder

Turns the output of the field mapper into one parameterized UPDATE aimed at
a single row. Placeholders are positional: the mapped fields take ``p1`` to
``pN`` in submission order and the identity value is always ``pN+1``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from sqlalchemy import bindparam, text
from sqlalchemy.sql.elements import TextClause

from studio.domain.exceptions import NoFieldsToUpdate
from studio.domain.fields import EntityFields, MappedField


@dataclass(frozen=True)
class UpdateStatement:
    """A single-row UPDATE with deterministic positional parameters."""
    entity: EntityFields
    assignments: Tuple[MappedField, ...]
    key: Any

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(assignment.column for assignment in self.assignments)

    @property
    def parameters(self) -> Tuple[Any, ...]:
        """Bound values in placeholder order; the identity value is last."""
        return tuple(assignment.value for assignment in self.assignments) + (self.key,)

    @property
    def placeholders(self) -> Tuple[str, ...]:
        return tuple(f"p{position}" for position in range(1, len(self.parameters) + 1))

    @property
    def sql(self) -> str:
        names = self.placeholders
        set_clause = ", ".join(
            f"{column} = :{name}" for column, name in zip(self.columns, names)
        )
        return (
            f"UPDATE {self.entity.table.name} SET {set_clause} "
            f"WHERE {self.entity.key_column} = :{names[-1]}"
        )

    def bind_values(self) -> Dict[str, Any]:
        return dict(zip(self.placeholders, self.parameters))

    def to_text(self) -> TextClause:
        """
        Executable clause with every placeholder typed after its column, so
        dates and decimals are converted the way the dialect expects.
        """
        table = self.entity.table
        columns = self.columns + (self.entity.key_column,)
        binds = [
            bindparam(name, value, type_=table.c[column].type)
            for name, value, column in zip(self.placeholders, self.parameters, columns)
        ]
        return text(self.sql).bindparams(*binds)


def build_update(entity: EntityFields, fields: Sequence[MappedField], key: Any) -> UpdateStatement:
    """
    Build the UPDATE for one record.

    No existence check happens here; callers report a zero rowcount as
    not found.

    Raises:
        NoFieldsToUpdate: If ``fields`` is empty
    """
    if not fields:
        raise NoFieldsToUpdate(entity.entity)
    return UpdateStatement(entity=entity, assignments=tuple(fields), key=key)
