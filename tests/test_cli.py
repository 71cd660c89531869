# ==============================================
# Tests for the CLI
# ==============================================

import pytest

from metarecord import cli
from metarecord.config import AppConfig, MetaConfig, SQLiteConfig


@pytest.fixture
def config():
    return AppConfig(backend="sqlite", sqlite=SQLiteConfig(path=":memory:"))


def run(db, config, *argv):
    args = cli.build_parser().parse_args(list(argv))
    return cli.run(args, config, db)


class TestCli:

    def test_meta_table(self, monkeypatch, capsys):
        monkeypatch.setattr(cli, "get_config", lambda: AppConfig(meta=MetaConfig(table_prefix="app_")))
        assert cli.main(["meta-table", "{{%post}}"]) == 0
        assert capsys.readouterr().out.strip() == "app_post_meta"

    def test_ensure(self, db, config, capsys):
        assert run(db, config, "ensure", "post") == 1
        assert "post_meta: missing" in capsys.readouterr().out
        assert run(db, config, "ensure", "post", "--create") == 0
        assert db.table_exists("post_meta")

    def test_set_get_dump(self, db, config, capsys):
        assert run(db, config, "get", "post", "1", "color") == 1
        assert run(db, config, "set", "post", "1", "color", "red") == 0
        assert run(db, config, "set", "post", "1", "size", "L") == 0
        capsys.readouterr()

        assert run(db, config, "get", "post", "1", "color") == 0
        assert capsys.readouterr().out.strip() == "red"

        assert run(db, config, "dump", "post", "1") == 0
        out = capsys.readouterr().out
        assert "color\tred" in out
        assert "2 meta rows for post #1" in out

    def test_main_connects_configured_client(self, monkeypatch, capsys):
        config = AppConfig(backend="sqlite", sqlite=SQLiteConfig(path=":memory:"))
        monkeypatch.setattr(cli, "get_config", lambda: config)
        assert cli.main(["set", "post", "3", "color", "red"]) == 0
        assert "color = 'red'" in capsys.readouterr().out
