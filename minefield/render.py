
from __future__ import annotations
from typing import Sequence

# Bordered text grid with 1-indexed headers:
#
#  |123|
# -|---|
# 1|../|
# -|---|
#
# Labels are right-aligned to the widest one so boards past 9 rows or
# columns stay aligned.


def render_grid(snapshot: Sequence[Sequence[str]]) -> str:
    height = len(snapshot)
    width = len(snapshot[0]) if height else 0
    col_w = len(str(width))
    row_w = len(str(height))
    rule = '-' * row_w + '|' + '-' * (width * col_w) + '|'
    lines = [' ' * row_w + '|' + ''.join(str(c + 1).rjust(col_w) for c in range(width)) + '|', rule]
    for r, row in enumerate(snapshot, start=1):
        lines.append(str(r).rjust(row_w) + '|' + ''.join(s.rjust(col_w) for s in row) + '|')
    lines.append(rule)
    return '\n'.join(lines)
