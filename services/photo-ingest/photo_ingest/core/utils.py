"""
Utility functions for the photo-ingest service.
"""
import math
import os
import socket
import time
import logging
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

def parse_coordinate(value: Any) -> Optional[float]:
    """
    Parse a latitude or longitude value into a finite float.

    Returns None for missing, empty, non-numeric, NaN and infinite values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number

def now_millis() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)

def get_local_ip() -> str:
    """
    Best-effort LAN IPv4 address of this machine, for the startup banner.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # No packet is sent for a UDP connect; it only selects the outbound interface
        sock.connect(("10.255.255.255", 1))
        address = sock.getsockname()[0]
    except OSError as e:
        logger.info(f"Could not determine local IP: {str(e)}")
        return "localhost"
    finally:
        sock.close()
    if address.startswith("127."):
        return "localhost"
    return address

def discard(path: Path) -> None:
    """Remove a local temp file; a missing file is not an error."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Could not remove temp file {path}: {str(e)}")
