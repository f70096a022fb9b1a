"""CLI commands for database maintenance and rig inspection."""

import argparse
import sys
from typing import NoReturn

from flask import Flask

from app import create_app
from app.database import (
    check_db_connection,
    get_current_revision,
    get_pending_migrations,
    upgrade_database,
)
from app.exceptions import RecordNotFoundException
from app.utils.partial_date import PartialDate


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Rig History Tracker CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # upgrade-db command
    upgrade_parser = subparsers.add_parser(
        "upgrade-db",
        help="Apply database migrations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Apply pending database migrations using Alembic.

Examples:
  rig-history-cli upgrade-db                    Apply pending migrations
  rig-history-cli upgrade-db --recreate --yes-i-am-sure  Drop all tables and recreate from migrations
        """,
    )
    upgrade_parser.add_argument(
        "--recreate",
        action="store_true",
        help="Drop all tables first, then run all migrations from scratch",
    )
    upgrade_parser.add_argument(
        "--yes-i-am-sure",
        action="store_true",
        help="Required safety flag when using --recreate",
    )

    # show-rig command
    show_rig_parser = subparsers.add_parser(
        "show-rig",
        help="Print the current parts and lifecycles of a motherboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Print the rig name, the parts currently connected and every computed
lifecycle of a motherboard with its resolved name.

Examples:
  rig-history-cli show-rig 12
        """,
    )
    show_rig_parser.add_argument("motherboard_id", type=int, help="Id of the motherboard part")

    return parser


def handle_upgrade_db(
    app: Flask, recreate: bool = False, confirmed: bool = False
) -> None:
    """Handle upgrade-db command."""
    with app.app_context():
        if not check_db_connection():
            print(
                "❌ Cannot connect to database. Check your DATABASE_URL configuration.",
                file=sys.stderr,
            )
            sys.exit(1)

        print(f"🗄  Using database: {app.config['SQLALCHEMY_DATABASE_URI']}")

        # Safety check for recreate
        if recreate and not confirmed:
            print(
                "❌ --recreate requires --yes-i-am-sure flag for safety",
                file=sys.stderr,
            )
            print(
                "   This will DROP ALL TABLES and erase the whole rig history!",
                file=sys.stderr,
            )
            sys.exit(1)

        if recreate:
            print("⚠️  WARNING: About to drop all tables and recreate from migrations!")
            print("   Every part, connection and disposal record will be lost.")

        current_rev = get_current_revision()
        pending = get_pending_migrations()

        if current_rev:
            print(f"📍 Current database revision: {current_rev}")
        else:
            print("📍 Database has no migration version (empty or new database)")

        if not (recreate or pending):
            print("✅ Database is up to date. No migrations to apply.")
            return

        if recreate:
            print("🔄 Recreating database from scratch...")
        else:
            print(f"📦 Found {len(pending)} pending migration(s)")

        try:
            applied = upgrade_database(recreate=recreate)
        except Exception as e:
            print(f"❌ Migration failed: {e}", file=sys.stderr)
            sys.exit(1)

        if applied:
            print(f"✅ Successfully applied {len(applied)} migration(s)")
            for revision, description in applied:
                print(f"   • {revision}: {description}")
        else:
            print("✅ Database migration completed")


def handle_show_rig(app: Flask, motherboard_id: int) -> None:
    """Handle show-rig command."""
    with app.app_context():
        try:
            details = app.container.rig_service().get_rig_details(motherboard_id)
        except RecordNotFoundException as e:
            print(f"❌ {e.message}", file=sys.stderr)
            sys.exit(1)

        print(f"🖥  {details.motherboard.display_name}: {details.rig_name or '(unnamed)'}")

        if details.active_connections:
            print(f"🔌 {len(details.active_connections)} connected part(s)")
            for connection in details.active_connections:
                since = PartialDate.from_stored(connection.connected_at, connection.connected_precision)
                print(f"   • {connection.part.type.value}: {connection.part.display_name} since {since}")
        else:
            print("🔌 No parts connected")

        if not details.lifecycles:
            print("📅 No lifecycles recorded")
            return

        print(f"📅 {len(details.lifecycles)} lifecycle(s)")
        for lifecycle, name in details.lifecycles:
            end = str(lifecycle.end) if lifecycle.end else "present"
            label = f" \"{name}\"" if name else ""
            print(f"   {lifecycle.sequence}. {lifecycle.start} to {end}{label}")


def main() -> NoReturn:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Create Flask app for database operations
    app = create_app()

    if args.command == "upgrade-db":
        handle_upgrade_db(
            app=app,
            recreate=args.recreate,
            confirmed=args.yes_i_am_sure,
        )
    elif args.command == "show-rig":
        handle_show_rig(app=app, motherboard_id=args.motherboard_id)
    else:
        print(f"❌ Unknown command: {args.command}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
