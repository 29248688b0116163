from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = frozenset(
    {
        "gclid",
        "fbclid",
        "mc_cid",
        "mc_eid",
        "ref",
        "referrer",
        "source",
    }
)


def is_tracking_param(key: str) -> bool:
    lowered = key.lower()
    return lowered.startswith("utm_") or lowered in TRACKING_PARAMS


def normalize_url(raw: str | None) -> str | None:
    """Canonicalize a posting URL so equivalent links compare equal.

    Drops the fragment, tracking query parameters and the trailing slash
    (the root path is left alone). Input that does not parse as an absolute
    URL comes back trimmed instead of being discarded.
    """
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None

    try:
        parts = urlsplit(value)
        if not parts.scheme or not parts.netloc:
            return value

        query = [
            (key, item)
            for key, item in parse_qsl(parts.query, keep_blank_values=True)
            if not is_tracking_param(key)
        ]
        # all trailing slashes; the root path stays "/"
        path = parts.path.rstrip("/") or "/"

        return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, urlencode(query), ""))
    except ValueError:
        return value
