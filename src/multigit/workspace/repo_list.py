from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path


class RepositoryListError(Exception):
    pass


def is_candidate_line(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


def _iter_candidates(list_file: Path) -> Iterator[str]:
    with open(list_file, encoding="utf-8") as f:
        for line in f:
            if is_candidate_line(line):
                yield line.strip()


def read_repo_list(list_file: Path) -> Iterator[str]:
    """Return a lazy iterator over the repository paths in ``list_file``.

    Blank lines and lines whose first non-whitespace character is ``#`` are
    skipped. Paths are yielded as written (stripped) so that relative entries
    reach the guard and get reported rather than silently resolved.

    Raises :class:`RepositoryListError` immediately if the file is missing.
    """
    if not list_file.is_file():
        raise RepositoryListError(f"No such file: {list_file}")
    return _iter_candidates(list_file)
