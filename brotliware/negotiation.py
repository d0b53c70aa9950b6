# negotiation.py
"""Accept-Encoding negotiation."""
from typing import List, Optional, Sequence, Tuple

IDENTITY = "identity"


def parse_accept_encoding(header: Optional[str]) -> List[Tuple[str, float]]:
    """
    Parse an Accept-Encoding header into ``(token, quality)`` pairs.

    Pairs keep the order in which the client declared them. A missing
    ``q`` parameter means 1.0, an unparsable one means 0.0.

    Args:
        header: Raw header value, may be None

    Returns:
        Declared encodings with their weights
    """
    if not header:
        return []

    encodings = []
    for part in header.split(","):
        params = [p.strip() for p in part.split(";")]
        token = params[0].lower()
        if not token:
            continue

        quality = 1.0
        for param in params[1:]:
            if param.lower().startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 0.0
        encodings.append((token, quality))
    return encodings


def select_best_encoding(
    supported: Sequence[str], accept_encoding: Optional[str]
) -> Optional[str]:
    """
    Pick the best encoding in ``supported`` for the client's declaration.

    Candidates are ordered by descending weight, ties going to the server's
    order in ``supported``. ``*`` stands for every supported encoding the
    client did not name, and ``identity`` is acceptable unless it is
    excluded with ``q=0``.

    Returns:
        The chosen token, or None when nothing in ``supported`` is acceptable
    """
    declared = parse_accept_encoding(accept_encoding)
    named = {token for token, _ in declared}

    expanded = []
    for token, quality in declared:
        if token == "*":
            expanded.extend(
                (other, quality) for other in supported if other not in named
            )
        else:
            expanded.append((token, quality))

    def preference(item: Tuple[str, float]) -> Tuple[float, int]:
        token, quality = item
        rank = supported.index(token) if token in supported else len(supported)
        return (-quality, rank)

    candidates = [token for token, _ in sorted(expanded, key=preference)]
    if IDENTITY not in candidates:
        candidates.append(IDENTITY)

    rejected = {token for token, quality in expanded if quality == 0.0}
    for token in candidates:
        if token in supported and token not in rejected:
            return token
    return None
