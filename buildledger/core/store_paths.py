"""Layout of a store directory.

::

    <store>/
        meta/
            meta.db        # build metadata log (table ``meta``)
            progress.db    # execution progress log (table ``progress``)
"""

from __future__ import annotations

from pathlib import Path

META_DIR = "meta"
META_FILE = "meta.db"
PROGRESS_FILE = "progress.db"


def path_meta_dir(store: Path) -> Path:
    return Path(store) / META_DIR


def path_meta(store: Path) -> Path:
    """Path of the metadata database inside *store*."""
    return path_meta_dir(store) / META_FILE


def path_progress(store: Path) -> Path:
    """Path of the progress database inside *store*."""
    return path_meta_dir(store) / PROGRESS_FILE
