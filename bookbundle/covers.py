"""Cover image URL resolution.

Marketplaces encode the cover size as a path segment of the image URL, so
switching sizes is a matter of swapping that segment.
"""

import re

ALADIN_COVER_SIZES: dict[str, str] = {
    "mini": "covermini",
    "sum": "coversum",
    "cover": "cover",
    "200": "cover200",
    "500": "cover500",
}


def resolve_cover_url(
    url: str | None,
    size: str,
    size_tokens: dict[str, str] = ALADIN_COVER_SIZES,
) -> str | None:
    """Return ``url`` upgraded to the cover variant named by ``size``.

    Args:
        url: Cover URL as found on the page. Empty values resolve to None.
        size: Key into ``size_tokens`` naming the desired variant.
        size_tokens: Mapping of size names to the URL path segment for each,
            smallest variant first.

    Covers are only ever enlarged: a URL that already points at ``size`` or
    a larger variant is returned unchanged, as are URLs that carry none of
    the known segments.
    """
    if size not in size_tokens:
        raise ValueError(f"Unknown cover size {size!r}; expected one of {sorted(size_tokens)}")
    if not url:
        return None

    rank = {token: i for i, token in enumerate(size_tokens.values())}
    # Longest first so "cover" never wins over "covermini".
    tokens = sorted(rank, key=len, reverse=True)
    pattern = re.compile(r"(?<=/)(" + "|".join(re.escape(t) for t in tokens) + r")(?=/)")
    match = pattern.search(url)
    if not match:
        return url

    wanted = size_tokens[size]
    if rank[match.group(1)] >= rank[wanted]:
        return url
    return url[: match.start()] + wanted + url[match.end():]
