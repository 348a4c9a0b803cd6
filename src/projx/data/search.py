"""Text search over project files, delegated to grep."""

from __future__ import annotations

import logging
import re
import subprocess

from projx.errors import ExternalToolError
from projx.models.operations import SearchHit

logger = logging.getLogger(__name__)

_BATCH_SIZE = 500
_LINE_RE = re.compile(r"^(?P<path>.+?):(?P<line>\d+):(?P<text>.*)$")
_ERE_SPECIAL = re.compile(r"[.\[\]()*+?{}|^$\\]")


class GrepSearcher:
    """Runs ``grep -E`` over root-relative files, in batches."""

    def __init__(self, executable: str = "grep") -> None:
        self._executable = executable

    def search(
        self, pattern: str, root: str, files: list[str], *, whole_word: bool = False
    ) -> list[SearchHit]:
        """Search ``files`` (relative to ``root``) for the extended regex ``pattern``.

        Raises:
            ExternalToolError: grep is missing, or exits with status 2 or higher.
        """
        if not pattern:
            raise ExternalToolError("Search pattern cannot be empty")
        hits: list[SearchHit] = []
        for start in range(0, len(files), _BATCH_SIZE):
            batch = files[start : start + _BATCH_SIZE]
            hits.extend(self._run(pattern, root, batch, whole_word=whole_word))
        return hits

    def _run(
        self, pattern: str, root: str, files: list[str], *, whole_word: bool
    ) -> list[SearchHit]:
        args = [self._executable, "-n", "-H", "-I", "-E"]
        if whole_word:
            args.append("-w")
        args.extend(["-e", pattern, "--", *files])
        try:
            completed = subprocess.run(
                args, cwd=root, capture_output=True, text=True, errors="replace", check=False
            )
        except OSError as exc:
            raise ExternalToolError(f"Failed to run {self._executable}: {exc}") from exc
        # grep exits 1 when nothing matched.
        if completed.returncode > 1:
            message = completed.stderr.strip() or f"exit status {completed.returncode}"
            raise ExternalToolError(f"{self._executable} failed: {message}")
        return parse_grep_output(completed.stdout)


def parse_grep_output(output: str) -> list[SearchHit]:
    """Parse ``path:line:text`` lines, skipping anything that does not fit."""
    hits: list[SearchHit] = []
    for raw in output.splitlines():
        match = _LINE_RE.match(raw)
        if match is None:
            logger.debug("Skipping unparseable grep line: %r", raw)
            continue
        hits.append(
            SearchHit(
                path=match.group("path"),
                line_number=int(match.group("line")),
                text=match.group("text"),
            )
        )
    return hits


def todo_pattern(tokens: tuple[str, ...] | list[str]) -> str:
    """Build a ``grep -E`` alternation matching any of ``tokens`` literally."""
    return "(" + "|".join(_ERE_SPECIAL.sub(r"\\\g<0>", token) for token in tokens) + ")"
