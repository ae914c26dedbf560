"""
Word Store CLI
==============
Terminal command surface for inspecting and editing word books.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from wordstore.app.store import WordStore
from wordstore.config import StoreConfig
from wordstore.errors import WordStoreError
from wordstore.storage.models import Difficulty, WordBookCreate, WordCreate


def build_parser() -> argparse.ArgumentParser:
    """Create the root CLI parser."""
    parser = argparse.ArgumentParser(prog="wordstore", description="Word book store CLI")
    parser.add_argument("--backend", choices=["auto", "sqlite", "flat"], default="auto",
                        help="Storage backend (default: auto)")
    parser.add_argument("--data-dir", default="data", help="Data directory (default: data)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # list
    list_parser = subparsers.add_parser("list", help="List word books, newest first")
    list_parser.set_defaults(handler=handle_list)

    # show
    show_parser = subparsers.add_parser("show", help="Show a word book and its words")
    show_parser.add_argument("book_id", type=int)
    show_parser.set_defaults(handler=handle_show)

    # add-book
    add_book_parser = subparsers.add_parser("add-book", help="Create a word book")
    add_book_parser.add_argument("title")
    add_book_parser.add_argument("--description", default="")
    add_book_parser.add_argument("--icon", default="")
    add_book_parser.add_argument("--difficulty", default=Difficulty.EASY.value,
                                 help="easy, medium or hard (default: easy)")
    add_book_parser.add_argument("--gradient", default="")
    add_book_parser.set_defaults(handler=handle_add_book)

    # add-word
    add_word_parser = subparsers.add_parser("add-word", help="Add a word pair to a book")
    add_word_parser.add_argument("book_id", type=int)
    add_word_parser.add_argument("chinese")
    add_word_parser.add_argument("english")
    add_word_parser.set_defaults(handler=handle_add_word)

    # delete-book
    delete_book_parser = subparsers.add_parser("delete-book", help="Delete a book and all its words")
    delete_book_parser.add_argument("book_id", type=int)
    delete_book_parser.set_defaults(handler=handle_delete_book)

    # delete-word
    delete_word_parser = subparsers.add_parser("delete-word", help="Delete one word from a book")
    delete_word_parser.add_argument("book_id", type=int)
    delete_word_parser.add_argument("word_id", type=int)
    delete_word_parser.set_defaults(handler=handle_delete_word)

    # theme
    theme_parser = subparsers.add_parser("theme", help="Show or toggle the dark theme preference")
    theme_parser.add_argument("--toggle", action="store_true", help="Flip the preference")
    theme_parser.set_defaults(handler=handle_theme)

    return parser


def _print(msg: str, out: TextIO) -> None:
    out.write(msg + "\n")
    out.flush()


async def handle_list(args: argparse.Namespace, store: WordStore, out: TextIO) -> int:
    """List word books with live word counts."""
    books = await store.list_books()
    if not books:
        _print("no word books found", out)
        return 0

    for book in books:
        icon = f"{book.icon} " if book.icon else ""
        _print(
            f"- [{book.id}] {icon}{book.title} ({book.word_count} words, {book.difficulty or '-'})",
            out,
        )
    return 0


async def handle_show(args: argparse.Namespace, store: WordStore, out: TextIO) -> int:
    book = await store.get_book(args.book_id)
    if book is None:
        _print(f"error: word book not found: {args.book_id}", out)
        return 1

    _print(f"[{book.id}] {book.title}", out)
    if book.description:
        _print(f"  {book.description}", out)
    _print(f"  difficulty={book.difficulty or '-'} progress={book.progress} words={book.word_count}", out)
    for word in book.words:
        _print(f"  - ({word.id}) {word.chinese} = {word.english}", out)
    return 0


async def handle_add_book(args: argparse.Namespace, store: WordStore, out: TextIO) -> int:
    book_id = await store.add_book(WordBookCreate(
        title=args.title,
        description=args.description,
        icon=args.icon,
        difficulty=args.difficulty,
        gradient=args.gradient,
    ))
    _print(f"created word book: {book_id}", out)
    return 0


async def handle_add_word(args: argparse.Namespace, store: WordStore, out: TextIO) -> int:
    await store.add_word(args.book_id, WordCreate(chinese=args.chinese, english=args.english))
    _print(f"added '{args.chinese}' = '{args.english}' to book {args.book_id}", out)
    return 0


async def handle_delete_book(args: argparse.Namespace, store: WordStore, out: TextIO) -> int:
    if await store.get_book(args.book_id) is None:
        _print(f"error: word book not found: {args.book_id}", out)
        return 1
    await store.delete_book(args.book_id)
    _print(f"deleted word book {args.book_id}", out)
    return 0


async def handle_delete_word(args: argparse.Namespace, store: WordStore, out: TextIO) -> int:
    await store.delete_word(args.book_id, args.word_id)
    _print(f"deleted word {args.word_id} from book {args.book_id}", out)
    return 0


async def handle_theme(args: argparse.Namespace, store: WordStore, out: TextIO) -> int:
    theme = await store.settings()
    if args.toggle:
        await theme.toggle()
    _print(f"theme: {'dark' if theme.is_dark else 'light'}", out)
    return 0


def _default_store_factory(args: argparse.Namespace) -> WordStore:
    return WordStore(StoreConfig(data_dir=Path(args.data_dir), backend=args.backend))


async def _run(args: argparse.Namespace, store: WordStore, out: TextIO) -> int:
    try:
        await store.initialize()
        return int(await args.handler(args, store, out))
    finally:
        await store.close()


def main(
    argv: Optional[list[str]] = None,
    store_factory: Callable[[argparse.Namespace], WordStore] = _default_store_factory,
    out: TextIO = sys.stdout,
) -> int:
    """
    CLI entrypoint.

    Args:
        argv: Optional argv override for testing.
        store_factory: Dependency-injection hook for tests.
        out: Output stream.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(file=out)
        return 2

    store = store_factory(args)
    try:
        return asyncio.run(_run(args, store, out))
    except WordStoreError as exc:
        _print(f"error: {exc}", out)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
