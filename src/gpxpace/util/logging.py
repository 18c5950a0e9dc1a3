# gpxpace/util/logging.py
from __future__ import annotations

import datetime
import sys

def log(msg: str) -> None:
    """Print a timestamped log line (local time with timezone) to stderr."""
    ts = datetime.datetime.now().astimezone().isoformat(timespec="seconds")
    print(f"{ts}  {msg}", file=sys.stderr)
