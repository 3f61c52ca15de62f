"""Page text sources backing the wikitext store."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import quote, unquote

from semprops.domain.errors import StoreError

log = logging.getLogger(__name__)

PAGE_SUFFIX = ".wiki"


@dataclass(frozen=True, slots=True)
class Revision:
    title: str
    comment: str | None


@runtime_checkable
class PageSource(Protocol):
    """Load and save whole page texts; ``load`` returns ``None`` for missing pages."""

    def load(self, title: str) -> str | None: ...

    def save(self, title: str, text: str, *, comment: str | None = None) -> None: ...


class InMemoryPageSource:
    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages: dict[str, str] = dict(pages or {})
        self.revisions: list[Revision] = []
        self._lock = threading.Lock()

    def load(self, title: str) -> str | None:
        with self._lock:
            return self.pages.get(title)

    def save(self, title: str, text: str, *, comment: str | None = None) -> None:
        with self._lock:
            self.pages[title] = text
            self.revisions.append(Revision(title=title, comment=comment))


class FilesystemPageSource:
    """One ``<title>.wiki`` file per page below ``root``.

    Titles are percent-encoded with spaces stored as underscores. Saves go
    through a temporary file and an atomic rename.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, title: str) -> Path:
        return self.root / f"{quote(title.replace(' ', '_'), safe='')}{PAGE_SUFFIX}"

    def titles(self) -> list[str]:
        return sorted(
            unquote(path.name.removesuffix(PAGE_SUFFIX)).replace("_", " ")
            for path in self.root.glob(f"*{PAGE_SUFFIX}")
        )

    def load(self, title: str) -> str | None:
        path = self.path_for(title)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError("Failed to read page", cause=str(exc)) from exc

    def save(self, title: str, text: str, *, comment: str | None = None) -> None:
        path = self.path_for(title)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(dir=self.root, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                    handle.write(text)
                Path(temp_name).replace(path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError("Failed to save page", cause=str(exc)) from exc
        log.info("Saved %s (%s)", path.name, comment or "no comment")
