"""notesync command-line front-end.

Usage:
    notesync login admin@acme.test --password password
    notesync notes list
    notesync notes create "Title" "Body"
    notesync notes update NOTE_ID "Title" "Body"
    notesync notes delete NOTE_ID --yes
    notesync tenant show
    notesync tenant upgrade
    notesync logout

Every invocation restores the persisted session first, so a login carries
over to later commands until ``logout``.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from config.settings import get_settings
from notesync.app import NotesApp, create_app
from notesync.core.constants import DEMO_ACCOUNTS, DEMO_PASSWORD, UNLIMITED_SYMBOL
from notesync.core.logging import get_logger, setup_logging

log = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(prog="notesync", description="Multi-tenant notes client")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in and persist the session")
    login.add_argument("email")
    login.add_argument("--password", default=None, help="Prompted for when omitted")

    sub.add_parser("logout", help="Forget the persisted session")
    sub.add_parser("whoami", help="Show the signed-in identity")
    sub.add_parser("accounts", help="List the demo accounts")

    notes = sub.add_parser("notes", help="Manage notes")
    notes_sub = notes.add_subparsers(dest="notes_command", required=True)
    notes_sub.add_parser("list")
    create = notes_sub.add_parser("create")
    create.add_argument("title")
    create.add_argument("content")
    update = notes_sub.add_parser("update")
    update.add_argument("note_id")
    update.add_argument("title")
    update.add_argument("content")
    delete = notes_sub.add_parser("delete")
    delete.add_argument("note_id")
    delete.add_argument("--yes", action="store_true", help="Confirm the deletion")

    tenant = sub.add_parser("tenant", help="Tenant plan information")
    tenant_sub = tenant.add_subparsers(dest="tenant_command", required=True)
    tenant_sub.add_parser("show")
    tenant_sub.add_parser("upgrade")

    return parser.parse_args(argv)


def _print_notes(app: NotesApp) -> None:
    print(f"My Notes ({app.usage})")
    if not app.notes:
        print("No notes yet. Create your first note!")
        return
    for note in app.notes:
        print(f"[{note.id}] {note.title} (created {note.created_at.date().isoformat()})")
        print(f"    {note.content}")


def _print_tenant(app: NotesApp) -> None:
    tenant = app.tenant
    if tenant is None:
        print("Tenant information unavailable")
        return
    limit = "Unlimited" if tenant.is_unlimited else str(tenant.note_limit)
    print(f"Name: {tenant.name}")
    print(f"ID: {tenant.id}")
    print(f"Plan: {tenant.plan.value}")
    print(f"Note Limit: {limit}")
    print(f"Current Notes: {len(app.notes)}")


def _print_banner(app: NotesApp) -> None:
    tenant = app.tenant
    if app.gates.show_upgrade and tenant is not None:
        print(
            f"You've reached your note limit ({tenant.note_limit} notes). "
            "Upgrade to Pro for unlimited notes! Run: notesync tenant upgrade"
        )
    elif app.gates.quota_reached:
        print("Your tenant has reached its note limit. Ask an admin to upgrade.")


async def run(args: argparse.Namespace, app: NotesApp) -> bool:
    """Dispatch one command. Returns False when the command failed."""
    if args.command == "accounts":
        for email, label in DEMO_ACCOUNTS:
            print(f"{label}: {email}")
        print(f"All demo accounts use password: {DEMO_PASSWORD}")
        return True

    await app.startup()

    if args.command == "login":
        if app.user is not None:
            app.logout()
        password = args.password if args.password is not None else getpass.getpass("Password: ")
        ok = await app.submit_login(args.email, password)
    elif args.command == "logout":
        app.logout()
        ok = True
    elif app.user is None:
        print("Not signed in. Run: notesync login EMAIL", file=sys.stderr)
        return False
    elif args.command == "whoami":
        print(f"{app.user.email} ({app.user.role.value})")
        ok = True
    elif args.command == "notes":
        ok = await _run_notes(args, app)
    else:
        ok = await _run_tenant(args, app)

    if app.success:
        print(app.success)
    if app.error:
        print(f"Error: {app.error}", file=sys.stderr)
    return ok and app.error is None


async def _run_notes(args: argparse.Namespace, app: NotesApp) -> bool:
    command = args.notes_command
    if command == "create":
        app.note_form.title = args.title
        app.note_form.content = args.content
        ok = await app.submit_note()
    elif command == "update":
        if not app.start_edit(args.note_id):
            app.note_form.editing_id = args.note_id
        app.note_form.title = args.title
        app.note_form.content = args.content
        ok = await app.submit_note()
    elif command == "delete":
        if not args.yes:
            print("Refusing to delete without --yes", file=sys.stderr)
            return False
        ok = await app.delete_note(args.note_id, confirmed=True)
    else:
        ok = True

    _print_notes(app)
    _print_banner(app)
    return ok


async def _run_tenant(args: argparse.Namespace, app: NotesApp) -> bool:
    ok = True
    if args.tenant_command == "upgrade":
        if app.tenant is not None and app.tenant.is_unlimited:
            print(f"Already on Pro Plan ({UNLIMITED_SYMBOL} notes)")
            return True
        ok = await app.upgrade_tenant()
    _print_tenant(app)
    return ok


async def _amain(args: argparse.Namespace) -> int:
    async with create_app() as app:
        ok = await run(args, app)
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    """Entry point."""
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(level=settings.notes_log_level, json_output=settings.notes_log_json)
    log.debug("cli_command", command=args.command)
    return asyncio.run(_amain(args))


if __name__ == "__main__":
    sys.exit(main())
