"""Documents and the sources that supply them to the search engine."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentRef:
    """A note known to a source, before its text has been read."""

    path: str
    basename: str


@dataclass(frozen=True)
class Document:
    """A note with its text materialized. Identity is the path."""

    path: str
    basename: str
    text: str


class DocumentSource(Protocol):
    def list_documents(self) -> Iterable[DocumentRef]: ...

    def read_document(self, path: str) -> str: ...


@dataclass(frozen=True)
class VaultDocumentSource:
    """Markdown notes found below a vault *root* on disk.

    Paths are vault-relative and use forward slashes, the way Obsidian reports
    them. Hidden folders such as ``.obsidian`` and ``.trash`` are skipped.
    """

    root: Path

    def list_documents(self) -> list[DocumentRef]:
        refs: list[DocumentRef] = []
        for path in sorted(self.root.rglob("*.md")):
            relative = path.relative_to(self.root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if not path.is_file():
                continue
            refs.append(DocumentRef(path=relative.as_posix(), basename=path.stem))
        return refs

    def read_document(self, path: str) -> str:
        target = (self.root / path).resolve(strict=False)
        try:
            target.relative_to(self.root.resolve(strict=False))
        except ValueError:
            raise PermissionError(f"Path {path} is outside the vault") from None
        return target.read_text(encoding="utf-8")


def load_corpus(source: DocumentSource) -> list[Document]:
    """Read every document of *source*.

    A note that cannot be read is logged and left out so a single bad file
    does not abort the search.
    """

    documents: list[Document] = []
    for ref in source.list_documents():
        try:
            text = source.read_document(ref.path)
        except Exception as exc:
            logger.warning("Skipping unreadable note %s: %s", ref.path, exc)
            continue
        documents.append(Document(path=ref.path, basename=ref.basename, text=text))
    return documents
