# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - db            → connected in-memory SQLiteClient
# - prefixed_db   → same, with table_prefix "app_"
# - post_table    → creates the host "post" table in db
# - store         → MetaStore over db with default MetaConfig
# - clean_config  → forgets the config singleton around a test
#
# RECORD CLASSES:
# ---------------
# - Post          → MetaRecord on "post" (id, title)
# - AutoSavePost  → Post with auto_save_meta_fields = True
# - LazyPost      → Post with auto_load_meta_data = False
#
# ==============================================

import pytest

from metarecord.config import MetaConfig, reset_config
from metarecord.models import MetaRecord
from metarecord.persistence import MetaStore
from metarecord.storage import Column, ColumnType, SQLiteClient


class Post(MetaRecord):
    __table__ = "post"
    __columns__ = ("id", "title")
    __schema__ = [
        Column("id", ColumnType.BIGPK, nullable=False),
        Column("title", ColumnType.STRING),
    ]


class AutoSavePost(Post):
    auto_save_meta_fields = True


class LazyPost(Post):
    auto_load_meta_data = False


class PrefixedPost(MetaRecord):
    __table__ = "{{%post}}"
    __columns__ = ("id", "title")
    __schema__ = Post.__schema__


@pytest.fixture
def db():
    with SQLiteClient(":memory:") as client:
        yield client


@pytest.fixture
def prefixed_db():
    with SQLiteClient(":memory:", table_prefix="app_") as client:
        yield client


@pytest.fixture
def post_table(db):
    Post.create_table(db)
    return db


@pytest.fixture
def store(db):
    return MetaStore(db, MetaConfig())


@pytest.fixture
def saved_post(post_table):
    post = Post(post_table, title="Hello")
    post.save()
    return post


@pytest.fixture
def clean_config():
    reset_config()
    yield
    reset_config()


def count_meta_rows(client, table, record_id, key=None):
    """Number of rows in a meta table for one record (and key)."""
    where = {"record_id": record_id}
    if key is not None:
        where["meta_key"] = key
    return len(client.select(table, where))
