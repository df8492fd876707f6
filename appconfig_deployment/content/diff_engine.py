"""
Diff Engine

Line-based comparison of two canonical payloads. Lines are matched with
``difflib.SequenceMatcher`` and rendered as a unified diff in which remote
lines are removals and local lines are additions.
"""

import difflib
from dataclasses import dataclass
from typing import List


@dataclass
class DiffResult:
    """Outcome of comparing local content against remote content."""

    has_changes: bool
    unified_diff: str = ""
    additions: int = 0
    deletions: int = 0

    @property
    def summary(self) -> str:
        return f"+{self.additions} additions, -{self.deletions} deletions"


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, keeping line endings."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _hunk_range(start: int, stop: int) -> str:
    # Always "start,length"; an empty range starts at the line before it
    length = stop - start
    return f"{start + 1 if length else start},{length}"


def _render_line(prefix: str, line: str) -> str:
    if line.endswith("\n"):
        return prefix + line
    return prefix + line + "\n\\ No newline at end of file\n"


class DiffEngine:
    """Compares canonical payloads; holds no state between calls."""

    def __init__(
        self,
        context_lines: int = 3,
        remote_label: str = "remote",
        local_label: str = "local",
    ):
        self.context_lines = context_lines
        self.remote_label = remote_label
        self.local_label = local_label

    def compare(self, local_canonical: str, remote_canonical: str) -> DiffResult:
        if local_canonical == remote_canonical:
            return DiffResult(has_changes=False)

        remote_lines = split_lines(remote_canonical)
        local_lines = split_lines(local_canonical)
        matcher = difflib.SequenceMatcher(None, remote_lines, local_lines)

        out = [f"--- {self.remote_label}\n", f"+++ {self.local_label}\n"]
        additions = deletions = 0
        for group in matcher.get_grouped_opcodes(self.context_lines):
            first, last = group[0], group[-1]
            out.append(
                f"@@ -{_hunk_range(first[1], last[2])} "
                f"+{_hunk_range(first[3], last[4])} @@\n"
            )
            for tag, i1, i2, j1, j2 in group:
                if tag == "equal":
                    out.extend(_render_line(" ", line) for line in remote_lines[i1:i2])
                    continue
                if tag in ("replace", "delete"):
                    out.extend(_render_line("-", line) for line in remote_lines[i1:i2])
                    deletions += i2 - i1
                if tag in ("replace", "insert"):
                    out.extend(_render_line("+", line) for line in local_lines[j1:j2])
                    additions += j2 - j1

        return DiffResult(
            has_changes=True,
            unified_diff="".join(out),
            additions=additions,
            deletions=deletions,
        )
