from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import List, Optional

from csm_publish.domain.models import PackagedFile
from csm_publish.errors import PackagingError

logger = logging.getLogger("packager")

TEMP_DIR_PREFIX = "csm-"

# Earliest timestamp a zip entry can carry; keeps archives byte-stable across runs
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

CHUNK_SIZE = 1024 * 1024


def create_temp_dir() -> Path:
    try:
        folder = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
    except OSError as e:
        raise PackagingError(f"could not create temp directory in {tempfile.gettempdir()}: {e}") from e
    logger.debug("temp folder created: %s", folder)
    return folder


def _walk_sorted(root: Path) -> List[Path]:
    out: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        base = Path(dirpath)
        if base != root and not dirnames and not filenames:
            out.append(base)
        out.extend(base / f for f in sorted(filenames))
    return out


def _zip_info(arcname: str, *, is_dir: bool) -> zipfile.ZipInfo:
    zi = zipfile.ZipInfo(arcname + "/" if is_dir else arcname, date_time=ZIP_EPOCH)
    if is_dir:
        zi.external_attr = (0o40755 << 16) | 0x10
    else:
        zi.external_attr = 0o100644 << 16
        zi.compress_type = zipfile.ZIP_DEFLATED
    return zi


def zip_directory(src_dir: Path, out_file: Path) -> Path:
    """
    Recursively archive the CONTENTS of src_dir into out_file.

    Entries are relative to src_dir, in sorted order, with a fixed timestamp,
    so the same tree always produces the same archive bytes.
    Empty sub-directories are kept as explicit directory entries.
    """
    src_dir = Path(src_dir)
    out_file = Path(out_file)
    logger.debug("adding %s to zip file", src_dir)
    try:
        with zipfile.ZipFile(out_file, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for p in _walk_sorted(src_dir):
                arcname = p.relative_to(src_dir).as_posix()
                if p.is_dir():
                    zf.writestr(_zip_info(arcname, is_dir=True), b"")
                    continue
                zi = _zip_info(arcname, is_dir=False)
                # size up front so zipfile picks ZIP64 headers before streaming
                zi.file_size = p.stat().st_size
                with p.open("rb") as src, zf.open(zi, "w") as dst:
                    shutil.copyfileobj(src, dst, CHUNK_SIZE)
    except OSError as e:
        raise PackagingError(f"could not write zip file {out_file}: {e}") from e
    logger.info("writing zip file: %s", out_file)
    return out_file


def package_directory(dir_path: str | Path, zip_file_name: str) -> Optional[PackagedFile]:
    """
    Reduce a directory to exactly one uploadable file.

      0 entries          -> None (caller fails the run)
      1 regular file     -> that file, untouched, no archive
      otherwise          -> {temp dir}/{zip_file_name} holding the whole tree

    A lone sub-directory is archived too: a blob can only hold a file.
    The temp directory is left in place for the OS to reclaim.
    """
    dir_path = Path(dir_path)
    try:
        entries = sorted(os.listdir(dir_path))
    except OSError as e:
        raise PackagingError(f"could not list {dir_path}: {e}") from e

    logger.debug("%d files in %s", len(entries), dir_path)
    if not entries:
        logger.warning("No files to publish")
        return None

    if len(entries) == 1:
        only = dir_path / entries[0]
        if only.is_file():
            logger.info("1 file detected, no zip: %s", only)
            return PackagedFile(file_name=entries[0], file_path=only)
        logger.info("single entry is not a regular file, zipping: %s", only)

    folder = create_temp_dir()
    out_file = zip_directory(dir_path, folder / zip_file_name)
    return PackagedFile(file_name=zip_file_name, file_path=out_file)
