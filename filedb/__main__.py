"""FileDB CLI — operate on a post store from the command line.

Usage:
    python -m filedb list                       List all posts, newest first
    python -m filedb get ID                     Show one post
    python -m filedb search KEYWORD             Search titles and contents
    python -m filedb create --title T ...       Create a post
    python -m filedb update ID --title T ...    Replace a post's editable fields
    python -m filedb delete ID                  Delete a post
    python -m filedb upload FILE                Store an editor image
    python -m filedb attach-image ID FILE       Attach an image to a post
    python -m filedb gc                         Delete unreferenced editor images
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any
from uuid import uuid4

from filedb.config.settings import FileDBSettings, load_settings
from filedb.exceptions import FileDBError, InvalidUploadError, PostNotFoundError
from filedb.factory import FileDBServices, build_services
from filedb.schemas.post import Post
from filedb.utils.logging import configure_logging, get_logger

DEFAULT_CONFIG_PATH = Path("filedb.yaml")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="filedb",
        description="FileDB — file-based blog post store",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to filedb.yaml settings file",
    )
    parser.add_argument(
        "--base-path",
        type=Path,
        default=None,
        help="Directory for posts/ and sequences.json",
    )
    parser.add_argument(
        "--upload-path",
        type=Path,
        default=None,
        help="Directory for uploaded images",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List all posts, newest first")

    get = subparsers.add_parser("get", help="Show one post")
    get.add_argument("id", type=int)

    search = subparsers.add_parser("search", help="Search titles and contents")
    search.add_argument("keyword", nargs="?", default="")

    create = subparsers.add_parser("create", help="Create a post")
    _add_post_fields(create)

    update = subparsers.add_parser("update", help="Replace a post's editable fields")
    update.add_argument("id", type=int)
    _add_post_fields(update)

    delete = subparsers.add_parser("delete", help="Delete a post")
    delete.add_argument("id", type=int)

    upload = subparsers.add_parser("upload", help="Store an editor image")
    upload.add_argument("file", type=Path)

    attach = subparsers.add_parser("attach-image", help="Attach an image to a post")
    attach.add_argument("id", type=int)
    attach.add_argument("file", type=Path)

    subparsers.add_parser("gc", help="Delete unreferenced editor images")

    return parser.parse_args(argv)


def _add_post_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--title", required=True)
    parser.add_argument("--content", default="")
    parser.add_argument("--writer", required=True)


def _resolve_settings(args: argparse.Namespace) -> FileDBSettings:
    """Settings file and environment, then command-line overrides."""
    settings = load_settings(args.config)
    overrides: dict[str, Any] = {}
    if args.base_path is not None:
        overrides["base_path"] = args.base_path
    if args.upload_path is not None:
        overrides["upload_path"] = args.upload_path
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return replace(settings, **overrides)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _dump(post: Post) -> dict[str, Any]:
    return post.model_dump(by_alias=True)


def _request_from(args: argparse.Namespace) -> Post:
    return Post(title=args.title, content=args.content, writer=args.writer)


def _run(args: argparse.Namespace, services: FileDBServices) -> int:
    posts = services.posts

    if args.command == "list":
        _emit([_dump(p) for p in posts.list()])
    elif args.command == "get":
        _emit(_dump(posts.get(args.id)))
    elif args.command == "search":
        _emit([_dump(p) for p in posts.search(args.keyword)])
    elif args.command == "create":
        _emit(_dump(posts.create(_request_from(args))))
    elif args.command == "update":
        _emit(_dump(posts.update(args.id, _request_from(args))))
    elif args.command == "delete":
        posts.delete(args.id)
        _emit({"deleted": args.id})
    elif args.command == "upload":
        filename = services.editor_images.save_uploaded_image(
            args.file.read_bytes(), args.file.name
        )
        _emit({"filename": filename, "url": services.editor_images.image_url(filename)})
    elif args.command == "attach-image":
        _emit(_dump(posts.attach_image(args.id, args.file.read_bytes(), args.file.name)))
    elif args.command == "gc":
        _emit(services.image_collector.collect().summary())
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = _resolve_settings(args)
    configure_logging(json_output=settings.log_json, level=settings.log_level)
    logger = get_logger("cli", correlation_id=uuid4().hex[:12])
    logger.debug("Command started", command=args.command)

    services = build_services(settings)
    try:
        return _run(args, services)
    except (PostNotFoundError, InvalidUploadError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Cannot read input file: {exc}", file=sys.stderr)
        return 1
    except FileDBError as exc:
        logger.error("Command failed", command=args.command, error=str(exc))
        return 2


if __name__ == "__main__":
    sys.exit(main())
