"""
journey.__main__ -- CLI entry point.

Usage:
    journey init [--with-samples]
    journey new [--title T] [--content C] [--location L] [--image PATH] [--date YYYY-MM-DD]
    journey edit ID [--title T] [--content C] [--location L] [--image PATH | --clear-image]
    journey list [--search TEXT] [--sort newest|oldest|title-az|title-za]
    journey show ID
    journey delete ID
    journey profile [--name N] [--email E] [--bio B] [--image PATH | --clear-image]
    journey stats

Every command accepts --data-dir DIR and --config PATH.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

CONFIG_FILENAME = "journey.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="journey",
        description="Journey -- a local journal of entries, photos and places",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--data-dir", default=None, help="Path to data directory")
    common.add_argument("--config", default=None, help="Path to journey.yaml config")

    sub = parser.add_subparsers(dest="command")

    # -- init --------------------------------------------------------------
    init_p = sub.add_parser("init", parents=[common], help="Create a data directory")
    init_p.add_argument(
        "--with-samples", action="store_true", help="Seed the demo entries"
    )

    # -- new / edit --------------------------------------------------------
    new_p = sub.add_parser("new", parents=[common], help="Create an entry")
    _add_entry_fields(new_p)
    new_p.add_argument("--date", default=None, help="Creation date (YYYY-MM-DD)")

    edit_p = sub.add_parser("edit", parents=[common], help="Edit an entry")
    edit_p.add_argument("id", help="Entry id")
    _add_entry_fields(edit_p)
    edit_p.add_argument("--clear-image", action="store_true", help="Remove the photo")

    # -- list --------------------------------------------------------------
    list_p = sub.add_parser("list", parents=[common], help="List entries")
    list_p.add_argument("--search", default="", help="Filter on title/location/content")
    list_p.add_argument(
        "--sort",
        default="newest",
        choices=["newest", "oldest", "title-az", "title-za"],
        help="Sort order (default: newest)",
    )

    # -- show / delete -----------------------------------------------------
    show_p = sub.add_parser("show", parents=[common], help="Show one entry")
    show_p.add_argument("id", help="Entry id")

    delete_p = sub.add_parser("delete", parents=[common], help="Delete an entry")
    delete_p.add_argument("id", help="Entry id")

    # -- profile -----------------------------------------------------------
    profile_p = sub.add_parser("profile", parents=[common], help="Show or update profile")
    profile_p.add_argument("--name", default=None)
    profile_p.add_argument("--email", default=None)
    profile_p.add_argument("--bio", default=None)
    profile_p.add_argument("--image", default=None, help="Path to a profile photo")
    profile_p.add_argument("--clear-image", action="store_true")

    # -- stats -------------------------------------------------------------
    sub.add_parser("stats", parents=[common], help="Show journal statistics")

    args = parser.parse_args(argv)

    # -- Logging -----------------------------------------------------------
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        return 0

    handlers = {
        "init": _cmd_init,
        "new": _cmd_new,
        "edit": _cmd_edit,
        "list": _cmd_list,
        "show": _cmd_show,
        "delete": _cmd_delete,
        "profile": _cmd_profile,
        "stats": _cmd_stats,
    }
    return handlers[args.command](args)


def _add_entry_fields(p: argparse.ArgumentParser) -> None:
    p.add_argument("--title", default=None)
    p.add_argument("--content", default=None)
    p.add_argument("--location", default=None)
    p.add_argument("--image", default=None, help="Path to a photo to attach")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _open_app(args: argparse.Namespace):
    from journey.app import JourneyApp

    return JourneyApp(config=_load_config(args))


def _load_config(args: argparse.Namespace):
    """--config wins; otherwise a journey.yaml inside the data dir is used."""
    from journey.core.config import Config

    if args.config:
        config = Config.from_yaml(args.config)
    else:
        config = Config.from_data_dir(args.data_dir) if args.data_dir else Config()
        candidate = config.data_dir / CONFIG_FILENAME
        if candidate.exists():
            config = Config.from_yaml(candidate)
    if args.data_dir:
        config.data_dir = Path(args.data_dir).expanduser().resolve()
    return config


def _read_image(path: Optional[str]) -> Optional[bytes]:
    if path is None:
        return None
    return Path(path).read_bytes()


def _parse_date(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)


def _journal_json(journal, snippet_length: Optional[int] = None) -> dict:
    from journey.core.types import make_snippet

    data = journal.to_dict()
    if snippet_length is not None:
        data.pop("content", None)
        data["snippet"] = make_snippet(journal.content, snippet_length)
    return data


def _find(app, journal_id: str):
    journal = app.journals.get(journal_id)
    if journal is None:
        print(f"No journal with id {journal_id}", file=sys.stderr)
    return journal


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def _cmd_init(args: argparse.Namespace) -> int:
    with _open_app(args) as app:
        config_path = app.config.data_dir / CONFIG_FILENAME
        if not config_path.exists():
            config_path.write_text(
                "# Journey configuration\n"
                "journey:\n"
                f"  data_dir: {app.config.data_dir}\n"
                "  search_debounce_seconds: 0.5\n"
                "  lock_timeout: 5.0\n"
                "  structured_logging: false\n",
                encoding="utf-8",
            )
        seeded = app.seed_samples() if args.with_samples else 0
        print(f"Initialized Journey at: {app.config.data_dir}")
        print(f"  journals:    {app.config.journals_path}")
        print(f"  images:      {app.config.images_dir}")
        print(f"  config:      {config_path}")
        if seeded:
            print(f"  seeded {seeded} sample entries")
    return 0


def _cmd_new(args: argparse.Namespace) -> int:
    with _open_app(args) as app:
        editor = app.editor()
        editor.title = args.title or ""
        editor.content = args.content or ""
        editor.location = args.location or ""
        if args.date:
            editor.selected_date = _parse_date(args.date)
        if args.image:
            editor.set_image(_read_image(args.image))
        journal = editor.save()
        print(journal.id)
    return 0


def _cmd_edit(args: argparse.Namespace) -> int:
    with _open_app(args) as app:
        journal = _find(app, args.id)
        if journal is None:
            return 1
        editor = app.editor(journal)
        if args.title is not None:
            editor.title = args.title
        if args.content is not None:
            editor.content = args.content
        if args.location is not None:
            editor.location = args.location
        if args.clear_image:
            editor.set_image(None)
        elif args.image:
            editor.set_image(_read_image(args.image))
        saved = editor.save()
        print(json.dumps(_journal_json(saved), indent=2, ensure_ascii=False))
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    from journey.dashboard import SortOption, filter_and_sort

    with _open_app(args) as app:
        option = SortOption.parse(args.sort)
        journals = filter_and_sort(app.journals.load(), args.search, option)
        if not journals:
            print("No journals found.")
            return 0
        print(
            json.dumps(
                [_journal_json(j, snippet_length=app.config.snippet_length) for j in journals],
                indent=2,
                ensure_ascii=False,
            )
        )
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    with _open_app(args) as app:
        journal = _find(app, args.id)
        if journal is None:
            return 1
        detail = app.detail(journal)
        image = detail.image_source()
        print(detail.title)
        print(detail.formatted_date)
        if detail.has_location:
            print(journal.location)
        print(f"[image: {image.kind.value}{' ' + image.ref if image.ref else ''}]")
        print()
        print(journal.content or "")
    return 0


def _cmd_delete(args: argparse.Namespace) -> int:
    with _open_app(args) as app:
        if not app.journals.delete_by_id(args.id):
            print(f"No journal with id {args.id}", file=sys.stderr)
            return 1
        print(f"Deleted {args.id}")
    return 0


def _cmd_profile(args: argparse.Namespace) -> int:
    with _open_app(args) as app:
        info, image = app.profile.load()
        changed = any(
            v is not None for v in (args.name, args.email, args.bio, args.image)
        ) or args.clear_image
        if changed:
            if args.clear_image:
                new_image = None
            elif args.image:
                new_image = _read_image(args.image)
            else:
                new_image = image
            try:
                info = app.profile.save(
                    name=args.name if args.name is not None else info.name,
                    email=args.email if args.email is not None else info.email,
                    bio=args.bio if args.bio is not None else info.bio,
                    image=new_image,
                )
            except ValueError as exc:
                print(str(exc), file=sys.stderr)
                return 2
        print(json.dumps(info.to_dict(), indent=2, ensure_ascii=False))
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    with _open_app(args) as app:
        print(json.dumps(app.get_stats(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
