# ==============================================
# Record (host active record)
# ==============================================
#
# PURPOSE:
#   A minimal active-record base class: one instance per row,
#   a single scalar primary key, find/save through an injected
#   data-access client, and lifecycle hooks subclasses override.
#
# DECLARING A RECORD:
# -------------------
#   class Post(Record):
#       __table__ = "{{%post}}"          # templating resolved with client.table_prefix
#       __columns__ = ("id", "title")
#       __primary_key__ = "id"
#       __schema__ = [Column("id", ColumnType.BIGPK, nullable=False),
#                     Column("title", ColumnType.STRING)]
#
#   post = Post(db, title="Hello")
#   post.save()                 → INSERT, post.id filled in
#   post.title = "Hi"
#   post.save()                 → UPDATE of the changed columns
#   Post.find(db, post.id)      → Post or None
#
# LIFECYCLE HOOKS:
# ----------------
#   - after_find()                          → row has been loaded
#   - after_save(insert, changed_attributes) → row has been committed
#
# ==============================================

from typing import Any, Dict, List, Optional

from metarecord.errors import RecordNotSavedError
from metarecord.persistence.naming import resolve_table_name
from metarecord.storage.schema import Column


class Record:
    __table__: str = ""
    __columns__: tuple = ()
    __primary_key__: str = "id"
    __schema__: List[Column] = []

    def __init__(self, client, **attributes):
        self.client = client
        self._attributes: Dict[str, Any] = {}
        # None until the row exists in storage
        self._old_attributes: Optional[Dict[str, Any]] = None
        for name, value in attributes.items():
            self.set_attribute(name, value)

    # ---- column access ----

    def __getattr__(self, name: str) -> Any:
        if name in type(self).__columns__:
            return self._attributes.get(name)
        raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in type(self).__columns__:
            self._attributes[name] = value
        else:
            object.__setattr__(self, name, value)

    @classmethod
    def has_attribute(cls, name: str) -> bool:
        return name in cls.__columns__

    def get_attribute(self, name: str) -> Any:
        if not self.has_attribute(name):
            raise AttributeError(f"{type(self).__name__} has no column {name!r}")
        return self._attributes.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        if not self.has_attribute(name):
            raise AttributeError(f"{type(self).__name__} has no column {name!r}")
        self._attributes[name] = value

    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def dirty_attributes(self) -> Dict[str, Any]:
        """Columns whose value differs from what was last loaded or saved."""
        if self._old_attributes is None:
            return dict(self._attributes)
        return {
            name: value
            for name, value in self._attributes.items()
            if name not in self._old_attributes or self._old_attributes[name] != value
        }

    # ---- identity ----

    @classmethod
    def table_name(cls) -> str:
        return cls.__table__

    def resolved_table_name(self) -> str:
        return resolve_table_name(self.table_name(), getattr(self.client, "table_prefix", ""))

    @classmethod
    def primary_key_name(cls) -> str:
        return cls.__primary_key__

    def primary_key_value(self) -> Any:
        return self._attributes.get(self.primary_key_name())

    def is_new_record(self) -> bool:
        return self._old_attributes is None

    # ---- persistence ----

    @classmethod
    def create_table(cls, client) -> None:
        """Create the host table from __schema__ if it does not exist."""
        table = resolve_table_name(cls.table_name(), getattr(client, "table_prefix", ""))
        client.create_table(table, cls.__schema__, if_not_exists=True)

    @classmethod
    def _instantiate(cls, client, row: Dict[str, Any], **options) -> "Record":
        record = cls(client, **options)
        for name, value in row.items():
            if cls.has_attribute(name):
                record._attributes[name] = value
        record._old_attributes = dict(record._attributes)
        record.after_find()
        return record

    @classmethod
    def find(cls, client, pk: Any, **options) -> Optional["Record"]:
        """
        Load one record by primary key.

        Args:
            client: Connected data-access client
            pk: Primary key value
            **options: Passed to the constructor

        Returns:
            The record, or None if no row matches
        """
        table = resolve_table_name(cls.table_name(), getattr(client, "table_prefix", ""))
        row = client.select_one(table, {cls.primary_key_name(): pk})
        if row is None:
            return None
        return cls._instantiate(client, row, **options)

    @classmethod
    def find_all(cls, client, options: Optional[Dict[str, Any]] = None, **where) -> List["Record"]:
        table = resolve_table_name(cls.table_name(), getattr(client, "table_prefix", ""))
        rows = client.select(table, where)
        return [cls._instantiate(client, row, **(options or {})) for row in rows]

    def save(self) -> bool:
        """
        Insert a new record or update the changed columns of an existing one,
        then fire after_save().

        Returns:
            True once the row is stored
        """
        table = self.resolved_table_name()
        pk_name = self.primary_key_name()
        changed = self.dirty_attributes()

        if self.is_new_record():
            insert = True
            values = {k: v for k, v in self._attributes.items() if not (k == pk_name and v is None)}
            new_id = self.client.insert(table, values)
            if self._attributes.get(pk_name) is None:
                self._attributes[pk_name] = new_id
        else:
            insert = False
            pk = self.primary_key_value()
            if pk is None:
                raise RecordNotSavedError(f"{type(self).__name__} has lost its primary key")
            if changed:
                self.client.update(table, changed, {pk_name: pk})

        self._old_attributes = dict(self._attributes)
        self.after_save(insert, changed)
        return True

    def delete(self) -> bool:
        if self.is_new_record():
            raise RecordNotSavedError(f"Cannot delete an unsaved {type(self).__name__}")
        deleted = self.client.delete(
            self.resolved_table_name(),
            {self.primary_key_name(): self.primary_key_value()}
        )
        return deleted > 0

    # ---- hooks ----

    def after_find(self) -> None:
        pass

    def after_save(self, insert: bool, changed_attributes: Dict[str, Any]) -> None:
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._attributes!r}>"
