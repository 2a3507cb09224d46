"""Table-scoped data gateway.

Every read and write against the relational store goes through a
:class:`Gateway`. Rows travel as plain dicts; callers turn them into typed
projections right after the call. Outside :meth:`Gateway.atomic` each call is
committed on its own.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Union

from flask import current_app, g
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import TABLES

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class GatewayError(Exception):
    """Structured failure of a gateway call."""

    def __init__(self, message: str, code: str = "gateway_error", table: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.table = table

    def to_dict(self):
        return {"message": self.message, "code": self.code, "table": self.table}


class GatewayConflict(GatewayError):
    """A unique constraint rejected the write."""


class Gateway:
    """Contract consumed by the services."""

    def select(self, table: str, filters=None, order=None, joins=None, limit=None) -> List[Row]:
        raise NotImplementedError

    def insert(self, table: str, rows: Union[Row, List[Row]]) -> Union[Row, List[Row]]:
        raise NotImplementedError

    def update(self, table: str, patch: Row, filters) -> List[Row]:
        raise NotImplementedError

    def delete(self, table: str, filters) -> List[Row]:
        raise NotImplementedError

    @contextmanager
    def atomic(self):
        yield self

    def select_one(self, table: str, filters=None, joins=None) -> Optional[Row]:
        """First matching row, or None. Not finding a row is not an error."""
        rows = self.select(table, filters=filters, joins=joins, limit=1)
        return rows[0] if rows else None


_OPERATORS = {
    "eq": lambda col, v: col == v,
    "neq": lambda col, v: col != v,
    "in": lambda col, v: col.in_(list(v)),
    "ilike": lambda col, v: col.ilike(v),
    "gt": lambda col, v: col > v,
    "gte": lambda col, v: col >= v,
    "lt": lambda col, v: col < v,
    "lte": lambda col, v: col <= v,
}


def _columns(model) -> List[str]:
    return [attr.key for attr in inspect(model).mapper.column_attrs]


def to_row(obj, joins: Iterable[str] = ()) -> Row:
    row = {key: getattr(obj, key) for key in _columns(type(obj))}
    nested: Dict[str, List[str]] = {}
    for path in joins:
        head, _, rest = path.partition(".")
        nested.setdefault(head, [])
        if rest:
            nested[head].append(rest)
    for name, sub in nested.items():
        value = getattr(obj, name)
        if value is None:
            row[name] = None
        elif isinstance(value, list):
            row[name] = [to_row(v, sub) for v in value]
        else:
            row[name] = to_row(value, sub)
    return row


class SQLAlchemyGateway(Gateway):
    """Gateway backed by a Flask-SQLAlchemy session."""

    def __init__(self, session):
        self.session = session
        self._depth = 0

    # -- helpers ---------------------------------------------------------
    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise GatewayError(f"Unknown table {table}", code="unknown_table", table=table)

    def _query(self, table: str, filters):
        model = self._model(table)
        query = model.query
        for column, value in (filters or {}).items():
            col = getattr(model, column, None)
            if col is None:
                raise GatewayError(f"Unknown column {column}", code="unknown_column", table=table)
            if isinstance(value, tuple):
                op, operand = value
                query = query.filter(_OPERATORS[op](col, operand))
            else:
                query = query.filter(col == value)
        return model, query

    def _finish(self, table: str, action: str):
        try:
            if self._depth:
                self.session.flush()
            else:
                self.session.commit()
        except IntegrityError as e:
            self._fail(table, action, e, GatewayConflict, "conflict")
        except SQLAlchemyError as e:
            self._fail(table, action, e, GatewayError, "database_error")

    def _fail(self, table, action, exc, error_cls, code):
        logger.error("Gateway %s on %s failed: %s", action, table, exc, exc_info=True)
        if not self._depth:
            self.session.rollback()
        raise error_cls(f"{action} on {table} failed", code=code, table=table) from exc

    # -- contract --------------------------------------------------------
    def select(self, table, filters=None, order=None, joins=None, limit=None):
        model, query = self._query(table, filters)
        for key in order or []:
            desc = key.startswith("-")
            col = getattr(model, key.lstrip("-"))
            query = query.order_by(col.desc() if desc else col.asc())
        if limit:
            query = query.limit(limit)
        try:
            return [to_row(obj, joins or ()) for obj in query.all()]
        except SQLAlchemyError as e:
            self._fail(table, "select", e, GatewayError, "database_error")

    def insert(self, table, rows):
        model = self._model(table)
        batch = rows if isinstance(rows, list) else [rows]
        objs = [model(**row) for row in batch]
        self.session.add_all(objs)
        try:
            self.session.flush()
        except IntegrityError as e:
            self._fail(table, "insert", e, GatewayConflict, "conflict")
        except SQLAlchemyError as e:
            self._fail(table, "insert", e, GatewayError, "database_error")
        inserted = [to_row(obj) for obj in objs]
        self._finish(table, "insert")
        return inserted if isinstance(rows, list) else inserted[0]

    def update(self, table, patch, filters):
        _, query = self._query(table, filters)
        objs = query.all()
        for obj in objs:
            for key, value in patch.items():
                setattr(obj, key, value)
        try:
            self.session.flush()
        except IntegrityError as e:
            self._fail(table, "update", e, GatewayConflict, "conflict")
        except SQLAlchemyError as e:
            self._fail(table, "update", e, GatewayError, "database_error")
        affected = [to_row(obj) for obj in objs]
        self._finish(table, "update")
        return affected

    def delete(self, table, filters):
        _, query = self._query(table, filters)
        objs = query.all()
        affected = [to_row(obj) for obj in objs]
        for obj in objs:
            self.session.delete(obj)
        self._finish(table, "delete")
        return affected

    @contextmanager
    def atomic(self):
        """Group gateway calls into a single transaction."""
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if not self._depth:
                self.session.rollback()
            raise
        self._depth -= 1
        if not self._depth:
            self._finish("transaction", "commit")


def get_gateway() -> Gateway:
    """Gateway for the current request, built by the registered factory."""
    if "gateway" not in g:
        g.gateway = current_app.extensions["gateway_factory"]()
    return g.gateway
