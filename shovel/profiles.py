"""YAML-based per-domain request profiles.

A profile file looks like::

    default:
      headers:
        Accept: text/html
    domains:
      example.com:
        headers:
          Cookie: consent=yes
      docs.example.com:
        headers:
          Accept-Language: de-DE

The most specific matching domain wins over shorter suffixes, and every
domain entry is layered over ``default``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

from shovel.client import HeaderCustomizer

logger = logging.getLogger(__name__)


def _best_domain(domains: dict[str, Any], host: str) -> dict[str, Any]:
    best_key = ""
    best_cfg: dict[str, Any] = {}
    for key, cfg in domains.items():
        if not isinstance(key, str) or not isinstance(cfg, dict):
            continue
        key_lower = key.lower()
        matches = host == key_lower or host.endswith("." + key_lower)
        if matches and len(key_lower) > len(best_key):
            best_key, best_cfg = key_lower, cfg
    if best_key:
        logger.debug("profile domain %r selected for %s", best_key, host)
    return best_cfg


def load_profile(path: str | Path, url: str) -> dict[str, Any]:
    """Load the YAML profile at *path* and return the settings merged for *url*.

    ``headers`` mappings are merged key by key; other keys are replaced.
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        return {"headers": {}}
    default = data.get("default") or {}
    domains = data.get("domains") or {}

    host = (urlparse(url).hostname or "").lower()
    specific = _best_domain(domains, host) if isinstance(domains, dict) else {}

    merged: dict[str, Any] = dict(default) if isinstance(default, dict) else {}
    headers = dict(merged.get("headers") or {})
    merged.update(specific)
    headers.update(specific.get("headers") or {})
    merged["headers"] = {str(k): str(v) for k, v in headers.items()}
    return merged


def profile_headers(path: str | Path, url: str) -> HeaderCustomizer:
    """Return a header customizer applying the profile's headers for *url*.

    Pass the result as ``request=`` to any fetch function.
    """
    extra = load_profile(path, url)["headers"]

    def apply(headers: dict[str, str]) -> None:
        headers.update(extra)

    return apply
