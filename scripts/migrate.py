#!/usr/bin/env python3
"""
Migration script for Microfeed API

Usage:
    python scripts/migrate.py upgrade              # Run all migrations
    python scripts/migrate.py downgrade -1         # Downgrade one revision
    python scripts/migrate.py create "Add field"   # Create migration
    python scripts/migrate.py history              # Show migration history
"""
import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
current_dir = Path(__file__).parent
root_dir = current_dir.parent
sys.path.insert(0, str(root_dir))

def main() -> None:
    from microfeed.db import migrations

    parser = argparse.ArgumentParser(
        description="Database migration management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upgrade_parser = subparsers.add_parser("upgrade", help="Upgrade to the latest revision")
    upgrade_parser.add_argument("--url", help="Database URL (defaults to settings)")

    downgrade_parser = subparsers.add_parser("downgrade", help="Downgrade to a revision")
    downgrade_parser.add_argument("revision", help="Target revision, e.g. -1 or base")

    create_parser = subparsers.add_parser("create", help="Create a new revision")
    create_parser.add_argument("message", help="Revision message")
    create_parser.add_argument("--empty", action="store_true", help="Skip autogenerate")

    subparsers.add_parser("history", help="Show migration history")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "upgrade":
            print("🔧 Upgrading database to head")
            migrations.run_migrations(args.url)
            print("✅ Database upgraded successfully")

        elif args.command == "downgrade":
            print(f"🔧 Downgrading database to revision: {args.revision}")
            migrations.downgrade_migration(args.revision)
            print("✅ Database downgraded successfully")

        elif args.command == "create":
            print(f"📝 Creating migration: {args.message}")
            migrations.create_migration(args.message, autogenerate=not args.empty)

        elif args.command == "history":
            migrations.show_migrations()

    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
