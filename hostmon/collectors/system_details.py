"""Static host details shown next to the live metrics."""
import logging
import os
import platform

import psutil

from .system_models import SystemDetails

logger = logging.getLogger(__name__)

_GB = 1_000_000_000.0


def get_system_details(disk_path: str = "~") -> SystemDetails:
    """Collect host facts that do not change while the monitor runs."""
    uname = platform.uname()
    os_name = f"{uname.system} {uname.release}".strip() or "N/A"

    try:
        storage_gb = round(psutil.disk_usage(os.path.expanduser(disk_path)).total / _GB, 1)
    except OSError as e:
        logger.debug("Storage size unavailable: %s", e)
        storage_gb = 0.0

    try:
        memory_gb = round(psutil.virtual_memory().total / _GB, 1)
    except (psutil.Error, OSError) as e:
        logger.debug("Memory size unavailable: %s", e)
        memory_gb = 0.0

    return SystemDetails(
        os_name=os_name,
        hostname=uname.node or "N/A",
        storage_gb=storage_gb,
        memory_gb=memory_gb,
        cpu_count=psutil.cpu_count() or 0,
    )


def format_gb(value: float) -> str:
    return f"{value:.1f} GB" if value > 0 else "N/A"
