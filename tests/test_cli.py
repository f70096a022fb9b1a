"""Tests for CLI helpers."""

import pytest
from flask import Flask

import app.cli as cli
from tests.testing_utils import add_part, connect


@pytest.fixture
def cli_app() -> Flask:
    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///cli-test.db"
    return app


def test_parser_accepts_upgrade_flags():
    args = cli.create_parser().parse_args(["upgrade-db", "--recreate", "--yes-i-am-sure"])

    assert args.command == "upgrade-db"
    assert args.recreate is True
    assert args.yes_i_am_sure is True


def test_upgrade_reports_target_database(cli_app, monkeypatch, capsys):
    """The CLI should make the target database explicit before doing any work."""
    monkeypatch.setattr(cli, "check_db_connection", lambda: True)
    monkeypatch.setattr(cli, "get_current_revision", lambda: "001")
    monkeypatch.setattr(cli, "get_pending_migrations", lambda: [])

    cli.handle_upgrade_db(app=cli_app)

    output = capsys.readouterr().out
    assert "sqlite:///cli-test.db" in output
    assert "🗄  Using database" in output
    assert "up to date" in output


def test_upgrade_applies_pending_migrations(cli_app, monkeypatch, capsys):
    applied_calls = []

    def fake_upgrade(recreate=False):
        applied_calls.append(recreate)
        return [("001", "Create parts, connections, disposals and rig name tables")]

    monkeypatch.setattr(cli, "check_db_connection", lambda: True)
    monkeypatch.setattr(cli, "get_current_revision", lambda: None)
    monkeypatch.setattr(cli, "get_pending_migrations", lambda: ["001"])
    monkeypatch.setattr(cli, "upgrade_database", fake_upgrade)

    cli.handle_upgrade_db(app=cli_app)

    output = capsys.readouterr().out
    assert applied_calls == [False]
    assert "Successfully applied 1 migration(s)" in output
    assert "001: Create parts" in output


def test_recreate_requires_confirmation(cli_app, monkeypatch, capsys):
    monkeypatch.setattr(cli, "check_db_connection", lambda: True)
    monkeypatch.setattr(cli, "upgrade_database", lambda recreate=False: pytest.fail("must not upgrade"))

    with pytest.raises(SystemExit) as exc_info:
        cli.handle_upgrade_db(app=cli_app, recreate=True, confirmed=False)

    assert exc_info.value.code == 1
    assert "--yes-i-am-sure" in capsys.readouterr().err


def test_unreachable_database_exits(cli_app, monkeypatch, capsys):
    monkeypatch.setattr(cli, "check_db_connection", lambda: False)

    with pytest.raises(SystemExit) as exc_info:
        cli.handle_upgrade_db(app=cli_app)

    assert exc_info.value.code == 1
    assert "Cannot connect to database" in capsys.readouterr().err


def test_migration_failure_exits(cli_app, monkeypatch, capsys):
    def broken_upgrade(recreate=False):
        raise RuntimeError("disk full")

    monkeypatch.setattr(cli, "check_db_connection", lambda: True)
    monkeypatch.setattr(cli, "get_current_revision", lambda: None)
    monkeypatch.setattr(cli, "get_pending_migrations", lambda: ["001"])
    monkeypatch.setattr(cli, "upgrade_database", broken_upgrade)

    with pytest.raises(SystemExit):
        cli.handle_upgrade_db(app=cli_app)

    assert "Migration failed: disk full" in capsys.readouterr().err


def test_parser_accepts_show_rig():
    args = cli.create_parser().parse_args(["show-rig", "12"])

    assert args.command == "show-rig"
    assert args.motherboard_id == 12


def test_show_rig_prints_parts_and_lifecycles(app, container, session, capsys):
    motherboard = add_part(container, "motherboard", brand="ASUS", model="B550")
    cpu = add_part(container, "cpu", brand="AMD", model="Ryzen 5")
    connect(container, cpu, motherboard, "2021-03")
    container.rig_service().set_rig_name(motherboard.id, "2021-03-01", "Gaming Rig")
    session.commit()

    cli.handle_show_rig(app=app, motherboard_id=motherboard.id)

    output = capsys.readouterr().out
    assert "🖥  ASUS B550: Gaming Rig" in output
    assert "   • cpu: AMD Ryzen 5 since 2021-03" in output
    assert '   1. 2021-03 to present "Gaming Rig"' in output


def test_show_rig_unknown_motherboard_exits(app, container, session, capsys):
    cpu = add_part(container, "cpu")
    session.commit()

    with pytest.raises(SystemExit) as exc_info:
        cli.handle_show_rig(app=app, motherboard_id=cpu.id)

    assert exc_info.value.code == 1
    assert f"Motherboard {cpu.id} was not found" in capsys.readouterr().err
