"""
History Export

Flattens the engine's per-joint angle history into CSV rows: one row per
sample index, one column per joint, values with 2 decimals.
"""

import csv
import io
from typing import List, Mapping, Sequence


def history_to_rows(history: Mapping[object, Sequence[float]]) -> List[List[str]]:
    """
    Build CSV rows (header first) from a history mapping.

    Series may have different lengths; missing cells are left blank.
    An empty history yields no rows at all.
    """
    if not history:
        return []

    keys = list(history.keys())
    header = ["Index"] + [getattr(key, "value", str(key)) for key in keys]
    max_length = max(len(history[key]) for key in keys)

    rows = [header]
    for i in range(max_length):
        row = [str(i)]
        for key in keys:
            values = history[key]
            row.append(f"{values[i]:.2f}" if i < len(values) else "")
        rows.append(row)
    return rows


def history_to_csv(history: Mapping[object, Sequence[float]]) -> str:
    """Render history_to_rows() as CSV text ("" for an empty history)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(history_to_rows(history))
    return buffer.getvalue()
