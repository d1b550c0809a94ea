"""In-memory stand-in for the parts of ``supabase.Client`` the app touches."""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from postgrest.exceptions import APIError


class FakeResponse:
    def __init__(self, data):
        self.data = data
        self.count = None


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.orders = []
        self.limit_n = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(str(row.get(c)) == str(v) for c, v in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op, self.payload))
        if self.db.fail:
            raise APIError({"message": self.db.fail, "code": "XX000", "hint": None, "details": None})

        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for p in payloads:
                row = {"id": str(uuid4()), "created_at": self.db.tick(), **p}
                rows.append(row)
                created.append(dict(row))
            result = created
        elif self.op == "update":
            result = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    result.append(dict(row))
        elif self.op == "delete":
            result = [dict(r) for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
        else:
            result = [dict(r) for r in rows if self._matches(r)]
            # last order() is the least significant key; sort is stable
            for column, desc in reversed(self.orders):
                result.sort(key=lambda r: r.get(column), reverse=desc)
            if self.limit_n is not None:
                result = result[: self.limit_n]

        if self.db.after_execute:
            self.db.after_execute()
        return FakeResponse(result)


class FakeSubscription:
    def __init__(self, auth, callback):
        self.auth = auth
        self.callback = callback

    def unsubscribe(self):
        self.auth.listeners.remove(self.callback)


class FakeAdminAuth:
    def __init__(self, auth):
        self.auth = auth

    def sign_out(self, jwt, scope="global"):
        self.auth.signed_out.append(jwt)
        self.auth.emit("SIGNED_OUT", None)


class FakeAuth:
    def __init__(self):
        self.listeners = []
        self.signed_out = []
        self.admin = FakeAdminAuth(self)

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return FakeSubscription(self, callback)

    def emit(self, event, session):
        for callback in list(self.listeners):
            callback(event, session)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail = None
        self.after_execute = None
        self.auth = FakeAuth()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def table(self, name):
        return FakeQuery(self, name)
