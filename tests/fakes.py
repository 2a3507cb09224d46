"""Gateway doubles used by the service tests."""
from app.gateway import Gateway, GatewayError, SQLAlchemyGateway


class UntouchableGateway(Gateway):
    """Fails the test on any data access."""

    def __init__(self):
        self.calls = []

    def _touch(self, name, table):
        self.calls.append((name, table))
        raise AssertionError(f"unexpected gateway {name} on {table}")

    def select(self, table, filters=None, order=None, joins=None, limit=None):
        self._touch("select", table)

    def insert(self, table, rows):
        self._touch("insert", table)

    def update(self, table, patch, filters):
        self._touch("update", table)

    def delete(self, table, filters):
        self._touch("delete", table)


class FlakyGateway(SQLAlchemyGateway):
    """Real gateway that fails chosen (action, table) pairs."""

    def __init__(self, session, fail_on=(), stale_reads=0):
        super().__init__(session)
        self.fail_on = set(fail_on)
        self.stale_reads = stale_reads
        self.writes = []

    def _maybe_fail(self, action, table):
        if (action, table) in self.fail_on:
            raise GatewayError(f"{action} on {table} failed", table=table)

    def select(self, table, filters=None, order=None, joins=None, limit=None):
        self._maybe_fail("select", table)
        if table == "cart_items" and self.stale_reads:
            # Pretend another session has not committed its row yet
            self.stale_reads -= 1
            return []
        return super().select(table, filters=filters, order=order, joins=joins, limit=limit)

    def insert(self, table, rows):
        self._maybe_fail("insert", table)
        self.writes.append(("insert", table))
        return super().insert(table, rows)

    def update(self, table, patch, filters):
        self._maybe_fail("update", table)
        self.writes.append(("update", table))
        return super().update(table, patch, filters)

    def delete(self, table, filters):
        self._maybe_fail("delete", table)
        self.writes.append(("delete", table))
        return super().delete(table, filters)
