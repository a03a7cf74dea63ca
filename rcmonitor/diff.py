"""
Line diffs between two revisions of a page.

The edit script is a shortest one (Myers' O(ND) greedy algorithm), so the
equal runs always cover a longest common subsequence of the two line
lists. Ops use the same (tag, i1, i2, j1, j2) shape as
difflib.SequenceMatcher.get_opcodes().
"""

from typing import Dict, List, Sequence, Tuple

from rcmonitor.models import DiffOp


def split_lines(text: str) -> List[str]:
    """
    Split text on "\\n".

    Text after the last newline is a line of its own, so a trailing newline
    gives a final empty line and "" gives [""]. Joining the result with
    "\\n" restores the input exactly.
    """
    return text.split("\n")


def _shortest_edit_matches(a: Sequence[str], b: Sequence[str]) -> List[Tuple[int, int]]:
    """
    Return the (i, j) index pairs of matched lines on a shortest edit path.

    trace[d] holds the furthest x reached on each diagonal k after d edits;
    the path is recovered by walking the trace backwards.
    """
    n, m = len(a), len(b)
    if n == 0 or m == 0:
        return []

    offset = n + m + 1
    v = [0] * (2 * offset + 1)
    trace: List[Dict[int, int]] = []
    for d in range(n + m + 1):
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]
            else:
                x = v[offset + k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[offset + k] = x
        trace.append({k: v[offset + k] for k in range(-d, d + 1, 2)})
        if v[offset + n - m] >= n and (n - m) % 2 == d % 2 and -d <= n - m <= d:
            break

    matches: List[Tuple[int, int]] = []
    x, y = n, m
    for d in range(len(trace) - 1, 0, -1):
        previous = trace[d - 1]
        k = x - y
        if k == -d or (k != d and previous[k - 1] < previous[k + 1]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = previous[prev_k]
        prev_y = prev_x - prev_k
        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            matches.append((x, y))
        x, y = prev_x, prev_y
    # Leading snake reached with zero edits
    while x > 0 and y > 0:
        x -= 1
        y -= 1
        matches.append((x, y))

    matches.reverse()
    return matches


def _matching_blocks(a: Sequence[str], b: Sequence[str]) -> List[Tuple[int, int, int]]:
    """
    Matched runs as (i, j, size), ending with the sentinel (len(a), len(b), 0).

    The common prefix and suffix are matched directly; only the middle goes
    through the edit-script search.
    """
    n, m = len(a), len(b)
    prefix = 0
    while prefix < n and prefix < m and a[prefix] == b[prefix]:
        prefix += 1
    suffix = 0
    while suffix < n - prefix and suffix < m - prefix and a[n - 1 - suffix] == b[m - 1 - suffix]:
        suffix += 1

    pairs = [(i, i) for i in range(prefix)]
    middle = _shortest_edit_matches(a[prefix:n - suffix], b[prefix:m - suffix])
    pairs.extend((i + prefix, j + prefix) for i, j in middle)
    pairs.extend((n - suffix + i, m - suffix + i) for i in range(suffix))

    blocks: List[List[int]] = []
    for i, j in pairs:
        if blocks and blocks[-1][0] + blocks[-1][2] == i and blocks[-1][1] + blocks[-1][2] == j:
            blocks[-1][2] += 1
        else:
            blocks.append([i, j, 1])
    return [(i, j, size) for i, j, size in blocks] + [(n, m, 0)]


def render_diff(before: str, after: str) -> List[DiffOp]:
    """
    Compute the line diff turning before into after.

    A changed run present on both sides is a single "replace" op rather
    than a delete followed by an insert.

    Args:
        before: Text of the old revision
        after: Text of the new revision

    Returns:
        Ordered DiffOps covering both inputs, "equal" runs included
    """
    before_lines = split_lines(before)
    after_lines = split_lines(after)

    ops: List[DiffOp] = []

    def add(tag: str, i1: int, i2: int, j1: int, j2: int) -> None:
        ops.append(DiffOp(
            tag=tag,
            before_start=i1,
            before_lines=tuple(before_lines[i1:i2]),
            after_start=j1,
            after_lines=tuple(after_lines[j1:j2]),
        ))

    i = j = 0
    for block_i, block_j, size in _matching_blocks(before_lines, after_lines):
        if i < block_i and j < block_j:
            add("replace", i, block_i, j, block_j)
        elif i < block_i:
            add("delete", i, block_i, j, block_j)
        elif j < block_j:
            add("insert", i, block_i, j, block_j)
        if size:
            add("equal", block_i, block_i + size, block_j, block_j + size)
        i, j = block_i + size, block_j + size
    return ops


__all__ = [
    'split_lines',
    'render_diff',
]
