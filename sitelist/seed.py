"""
SiteList Backend: Asset Seeding
==================================

What:  Copies a local directory of static files into the configured store.
Why:   Assets are served from the store, not from disk, so a deployment
       needs them uploaded once (and again whenever they change).
How:   Every regular file under the directory is written under its POSIX
       relative path: <dir>/css/app.css → key "css/app.css". Hidden files
       and directories (leading ".") are skipped.

Usage:
    python -m sitelist.seed ./public
    STORE_BACKEND=sql DATABASE_URL=... python -m sitelist.seed ./public

The collection key is never touched unless the directory contains a file
with that exact name.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import aiofiles

from sitelist.storage import KeyValueStore, create_store

logger = logging.getLogger(__name__)


def iter_asset_files(directory: Path) -> Iterator[Tuple[str, Path]]:
    """Yield (key, path) for every non-hidden regular file, sorted by key."""
    for path in sorted(directory.rglob("*")):
        relative = path.relative_to(directory)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file():
            yield relative.as_posix(), path


async def seed_assets(store: KeyValueStore, directory: Path) -> List[str]:
    """
    Write every asset file under `directory` into `store`.

    Returns:
        The keys written, in order.

    Raises:
        NotADirectoryError: `directory` does not exist or is not a directory.
        StoreError: a write failed (earlier writes are kept).
    """
    if not directory.is_dir():
        raise NotADirectoryError(str(directory))

    written: List[str] = []
    for key, path in iter_asset_files(directory):
        async with aiofiles.open(path, "rb") as f:
            content = await f.read()
        await store.write(key, content)
        logger.info("Seeded %s (%d bytes)", key, len(content))
        written.append(key)
    return written


async def _run(directory: Path) -> int:
    store = create_store()
    create_schema = getattr(store, "create_schema", None)
    try:
        if create_schema is not None:
            await create_schema()
        keys = await seed_assets(store, directory)
    finally:
        await store.close()
    logger.info("Seeded %d asset(s) from %s", len(keys), directory)
    return len(keys)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m sitelist.seed",
        description="Upload a directory of static assets into the SiteList store.",
    )
    parser.add_argument("directory", type=Path, help="Directory containing index.html etc.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stdout,
    )

    if not args.directory.is_dir():
        parser.error(f"not a directory: {args.directory}")

    asyncio.run(_run(args.directory))
    return 0


if __name__ == "__main__":
    sys.exit(main())
