"""Export serializer producing the canonical JSON document."""

import json
from collections.abc import Iterable

from bp_ledger.domain.reading import Reading


def export_document(readings: Iterable[Reading], indent: int = 2) -> str:
    """
    Serialize readings to the human-readable export document.

    Keys follow the stable order ``id, sys, dia, puls, date``. The function
    performs no I/O; delivering the text is up to the caller.

    Args:
        readings: Readings in the order they should appear.
        indent: Indentation of the pretty-printed JSON.

    Returns:
        JSON array text.
    """
    return json.dumps([r.to_dict() for r in readings], indent=indent, ensure_ascii=False)
