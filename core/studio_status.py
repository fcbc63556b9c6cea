"""
Management Studio process detection.
Studio rewrites SqlStudio.bin when it exits, so edits saved while it is
running are silently lost. The GUI checks this before saving.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

import psutil

logger = logging.getLogger(__name__)

STUDIO_PROCESS_NAMES = ["ssms.exe"]


@dataclass
class StudioStatus:
    """Runtime status snapshot for Management Studio."""
    is_running: bool = False
    process_pids: list[int] = field(default_factory=list)


def get_studio_status(process_names: list[str] | None = None) -> StudioStatus:
    names = [n.lower() for n in (process_names or STUDIO_PROCESS_NAMES)]
    pids = []
    try:
        for proc in psutil.process_iter(["pid", "name"]):
            if (proc.info.get("name") or "").lower() in names:
                pids.append(proc.info["pid"])
    except psutil.Error as e:
        logger.error(f"Process scan error: {e}")
    return StudioStatus(is_running=bool(pids), process_pids=pids)
