"""Runtime settings for shovel.

Values can be overridden through environment variables read at import time:

- ``SHOVEL_USER_AGENT``      -- User-Agent sent with every request
- ``SHOVEL_MAX_CONNECTIONS`` -- upper bound on simultaneous connections
- ``SHOVEL_TIMEOUT``         -- transport timeout in seconds
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------
USER_AGENT = os.getenv("SHOVEL_USER_AGENT", "httpx HTTP Client, shovel")

# ---------------------------------------------------------------------------
# Fixed request headers
# ---------------------------------------------------------------------------
ACCEPT_LANGUAGE = "en-US,en;q=0.9"

DEFAULT_HEADERS: dict[str, str] = {
    "Accept-Language": ACCEPT_LANGUAGE,
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------
MAX_CONNECTIONS = int(os.getenv("SHOVEL_MAX_CONNECTIONS", "32"))

TIMEOUT = float(os.getenv("SHOVEL_TIMEOUT", "30"))
