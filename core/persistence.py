"""
Persistence
Writes a Document back over SqlStudio.bin, keeping a timestamped copy of the
previous file alongside it:

  SqlStudio.bin                      ← replaced with the new encoding
  SqlStudio_2026_10_19_142301.bin    ← the file as it was before the save

Order of work: encode, back up, write temp file, rename over the original.
Nothing on disk changes if encoding fails; the original is untouched if the
backup or the write fails.
"""

from __future__ import annotations
import os
import shutil
import struct
import logging
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable

from core import codec
from core.document import Document
from core.errors import BackupFailed, WriteFailed

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y_%m_%d_%H%M%S"


def backup_path_for(settings_path: Path, when: datetime) -> Path:
    settings_path = Path(settings_path)
    return settings_path.with_name(f"{settings_path.stem}_{when.strftime(BACKUP_TIMESTAMP_FORMAT)}.bin")


def create_backup(settings_path: Path, backup_path: Path) -> Path:
    """Copy the live file to `backup_path`. Never overwrites an existing backup."""
    created = False
    try:
        with open(settings_path, "rb") as src, open(backup_path, "xb") as dst:
            created = True
            shutil.copyfileobj(src, dst)
        shutil.copystat(settings_path, backup_path)
    except FileExistsError as e:
        raise BackupFailed(f"Backup file already exists: {backup_path}") from e
    except OSError as e:
        # A half-written backup would block a retry within the same second.
        if created:
            Path(backup_path).unlink(missing_ok=True)
        raise BackupFailed(f"Could not back up {settings_path} to {backup_path}: {e}") from e
    logger.info(f"Backed up {settings_path} → {backup_path}")
    return backup_path


def replace_file(path: Path, data: bytes):
    """Write `data` to a sibling temp file, then atomically rename it over `path`."""
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}_", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise WriteFailed(f"Could not write {path}: {e}") from e


def save_document(
    settings_path: Path,
    document: Document,
    now: Callable[[], datetime] = datetime.now,
) -> Path:
    """
    Persist `document` to `settings_path`. Returns the backup path.
    Raises WriteFailed (encode/write) or BackupFailed.
    """
    settings_path = Path(settings_path)
    try:
        data = codec.encode(document)
    except (struct.error, UnicodeEncodeError, TypeError) as e:
        raise WriteFailed(f"Could not encode settings document: {e}") from e

    backup = create_backup(settings_path, backup_path_for(settings_path, now()))
    replace_file(settings_path, data)
    logger.info(f"Saved {document.server_count} server(s) to {settings_path} ({len(data)} bytes)")
    return backup
