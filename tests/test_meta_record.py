# ==============================================
# Tests for Record / MetaRecord
# ==============================================
#
# Host record find/save, attribute dispatch between columns
# and meta attributes, and the find/save lifecycle hooks.
# ==============================================

import pytest

from conftest import AutoSavePost, LazyPost, Post, PrefixedPost, count_meta_rows
from metarecord.config import MetaConfig
from metarecord.errors import RecordNotSavedError


# ==============================================
# Host record
# ==============================================

class TestRecord:
    """Record behaviour without meta attributes."""

    def test_insert_assigns_primary_key(self, post_table):
        post = Post(post_table, title="Hello")
        assert post.is_new_record()
        assert post.primary_key_value() is None
        post.save()
        assert not post.is_new_record()
        assert post.id == 1

    def test_find(self, saved_post, db):
        found = Post.find(db, saved_post.id)
        assert found.title == "Hello"
        assert not found.is_new_record()

    def test_find_missing(self, post_table):
        assert Post.find(post_table, 999) is None

    def test_update_changed_columns(self, saved_post, db):
        saved_post.title = "Changed"
        assert saved_post.dirty_attributes() == {"title": "Changed"}
        saved_post.save()
        assert saved_post.dirty_attributes() == {}
        assert Post.find(db, saved_post.id).title == "Changed"

    def test_find_all(self, post_table):
        Post(post_table, title="a").save()
        Post(post_table, title="b").save()
        Post(post_table, title="a").save()
        assert len(Post.find_all(post_table, title="a")) == 2

    def test_delete(self, saved_post, db):
        assert saved_post.delete() is True
        assert Post.find(db, saved_post.id) is None

    def test_delete_unsaved(self, post_table):
        with pytest.raises(RecordNotSavedError):
            Post(post_table, title="x").delete()

    def test_unknown_private_attribute(self, saved_post):
        with pytest.raises(AttributeError):
            saved_post._not_a_column


# ==============================================
# Meta dispatch
# ==============================================

class TestMetaDispatch:
    """get_attribute / set_attribute / meta view"""

    def test_meta_table_name(self, saved_post):
        assert saved_post.meta_table_name() == "post_meta"

    def test_prefixed_table_name(self, prefixed_db):
        PrefixedPost.create_table(prefixed_db)
        post = PrefixedPost(prefixed_db, title="x")
        post.save()
        assert post.resolved_table_name() == "app_post"
        assert post.meta_table_name() == "app_post_meta"
        post.set_meta("color", "red")
        post.save()
        assert prefixed_db.table_exists("app_post_meta")

    def test_column_names_stay_columns(self, saved_post, db):
        saved_post.set_attribute("title", "New")
        assert saved_post.get_attribute("title") == "New"
        assert len(saved_post.pending_meta) == 0
        assert db.table_exists("post_meta") is False

    def test_unknown_name_goes_to_meta(self, saved_post):
        saved_post.set_attribute("color", "red")
        assert "color" in saved_post.pending_meta
        assert saved_post.get_attribute("color") == "red"

    def test_unset_meta_reads_none(self, saved_post):
        assert saved_post.get_meta("nothing") is None
        assert saved_post.meta.nothing is None
        assert saved_post.meta.get("nothing", "default") == "default"

    def test_new_record_meta_written_after_insert(self, post_table):
        post = Post(post_table, title="Draft")
        post.meta.someMetaField = "x"
        assert post_table.table_exists("post_meta") is False
        post.save()
        assert post.last_meta_flush == {"someMetaField": True}
        assert post.meta_store.get_meta_attribute(post, "someMetaField") == "x"
        assert len(post.pending_meta) == 0

    def test_plain_assignment_is_queued_and_saved(self, post_table):
        post = Post(post_table, title="Draft")
        post.someMetaField = "x"
        assert "someMetaField" in post.pending_meta
        assert post.someMetaField == "x"
        post.save()
        assert post.last_meta_flush == {"someMetaField": True}
        assert post.meta_store.get_meta_attribute(post, "someMetaField") == "x"

    def test_plain_read_of_unset_meta(self, saved_post, db):
        assert saved_post.not_a_column is None
        assert db.table_exists("post_meta") is False

    def test_plain_assignment_keeps_columns_and_state(self, saved_post):
        saved_post.title = "Changed"
        saved_post.last_meta_flush = {}
        assert saved_post.dirty_attributes() == {"title": "Changed"}
        assert len(saved_post.pending_meta) == 0

    def test_constructor_kwargs_queue_meta(self, post_table):
        post = Post(post_table, title="Draft", color="red")
        assert post.pending_meta.get("color") == "red"
        post.save()
        assert Post.find(post_table, post.id).get_meta("color") == "red"

    def test_saved_record_queues_until_save(self, saved_post, db):
        saved_post.meta["color"] = "red"
        assert db.table_exists("post_meta") is False
        assert saved_post.meta["color"] == "red"
        saved_post.save()
        assert saved_post.meta_store.get_meta_attribute(saved_post, "color") == "red"

    def test_save_without_column_changes_still_flushes(self, saved_post):
        saved_post.meta["color"] = "red"
        assert saved_post.dirty_attributes() == {}
        saved_post.save()
        assert saved_post.last_meta_flush == {"color": True}

    def test_auto_save_writes_immediately(self, post_table):
        post = AutoSavePost(post_table, title="x")
        post.save()
        assert post.set_meta("color", "red") is True
        assert len(post.pending_meta) == 0
        assert post.meta_store.get_meta_attribute(post, "color") == "red"

    def test_auto_save_still_queues_for_new_record(self, post_table):
        post = AutoSavePost(post_table, title="x")
        assert post.set_meta("color", "red") is None
        assert "color" in post.pending_meta

    def test_config_enables_auto_save(self, saved_post, db):
        post = Post.find(db, saved_post.id, meta_config=MetaConfig(auto_save_meta_fields=True))
        assert post.set_meta("color", "red") is True

    def test_delete_meta(self, saved_post, db):
        saved_post.meta["color"] = "red"
        saved_post.save()
        del saved_post.meta["color"]
        assert saved_post.get_meta("color") is None
        assert count_meta_rows(db, "post_meta", saved_post.id) == 0

    def test_delete_meta_drops_pending(self, saved_post):
        saved_post.meta["color"] = "red"
        saved_post.delete_meta("color")
        assert "color" not in saved_post.pending_meta

    def test_discard_pending_meta(self, saved_post, db):
        saved_post.meta["color"] = "red"
        saved_post.discard_pending_meta()
        saved_post.save()
        assert saved_post.last_meta_flush == {}
        assert db.table_exists("post_meta") is False

    def test_cache_fallback_when_storage_row_missing(self, saved_post, db):
        saved_post.meta["color"] = "red"
        saved_post.save()
        db.delete("post_meta", {"record_id": saved_post.id})
        assert saved_post.meta_store.get_meta_attribute(saved_post, "color") is None
        assert saved_post.get_meta("color") == "red"


# ==============================================
# Lifecycle hooks
# ==============================================

class TestLifecycle:
    """after_find bulk load and after_save flush"""

    def test_find_bulk_loads_meta(self, saved_post, db):
        saved_post.meta["color"] = "red"
        saved_post.meta["size"] = 3
        saved_post.save()

        found = Post.find(db, saved_post.id)
        assert found.meta_cache.loaded is True
        assert found.meta_cache.values == {"color": "red", "size": "3"}
        assert sorted(found.meta.keys()) == ["color", "size"]

    def test_find_without_auto_load(self, saved_post, db):
        saved_post.meta["color"] = "red"
        saved_post.save()

        found = LazyPost.find(db, saved_post.id)
        assert found.meta_cache.loaded is False
        assert found.get_meta("color") == "red"

    def test_find_before_any_meta_written(self, saved_post, db):
        found = Post.find(db, saved_post.id)
        assert found.meta_cache.loaded is True
        assert found.meta_cache.values == {}
        assert db.table_exists("post_meta") is False

    def test_failed_flush_does_not_fail_save(self, saved_post, monkeypatch):
        def broken_set(record, key, value):
            raise RuntimeError("boom")

        monkeypatch.setattr(saved_post.meta_store, "set_meta_attribute", broken_set)
        saved_post.meta["color"] = "red"
        assert saved_post.save() is True
        assert saved_post.last_meta_flush == {"color": False}
        assert len(saved_post.pending_meta) == 0
