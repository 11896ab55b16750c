"""In-memory catalog of documents"""

import asyncio
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..errors import DocumentNotFoundError
from ..models.document import Document, DocumentPatch, NewDocument
from ..utils.logging import logger


class CatalogStore:
    """
    Authoritative collection of catalog documents.

    Documents are frozen models; every mutation swaps in a new instance so
    snapshots handed out by ``list`` never change underneath a reader. All
    writers go through one ``asyncio.Lock``.
    """

    def __init__(self, documents: Iterable[Document] = ()):
        self._documents: Dict[int, Document] = {}
        for document in documents:
            if document.id in self._documents:
                raise ValueError(f"Duplicate document id {document.id}")
            self._documents[document.id] = document
        self._next_id = max(self._documents, default=0) + 1
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._documents)

    def list(self) -> Tuple[Document, ...]:
        """Snapshot of the catalog in insertion order."""
        return tuple(self._documents.values())

    def get(self, document_id: int) -> Document:
        try:
            return self._documents[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id) from None

    def contains(self, document_id: int) -> bool:
        return document_id in self._documents

    async def create(self, new_document: NewDocument) -> Document:
        async with self._lock:
            document = Document(id=self._next_id, **new_document.model_dump(exclude={"id"}))
            self._next_id += 1
            self._documents[document.id] = document

        logger.log_step("document_created", {
            "document_id": document.id,
            "name": document.name,
            "category": document.category
        })
        return document

    async def update(self, document_id: int, patch: DocumentPatch) -> Document:
        async with self._lock:
            current = self.get(document_id)
            updated = patch.apply(current)
            self._documents[document_id] = updated

        logger.log_step("document_updated", {
            "document_id": document_id,
            "fields": sorted(patch.model_dump(exclude_defaults=True))
        })
        return updated

    async def delete(self, document_id: int) -> Document:
        async with self._lock:
            removed = self._documents.pop(document_id, None)
        if removed is None:
            raise DocumentNotFoundError(document_id)

        logger.log_step("document_deleted", {"document_id": document_id})
        return removed

    async def update_many(
        self,
        document_ids: Iterable[int],
        patch_for: Callable[[Document], Optional[DocumentPatch]],
    ) -> List[Document]:
        """
        Apply a per-document patch to every known id under a single lock.

        ``patch_for`` returns ``None`` to leave a document untouched. Unknown
        ids are skipped. Returns the documents that actually changed.
        """
        changed: List[Document] = []
        async with self._lock:
            for document_id in document_ids:
                current = self._documents.get(document_id)
                if current is None:
                    continue
                patch = patch_for(current)
                if patch is None:
                    continue
                updated = patch.apply(current)
                if updated is not current:
                    self._documents[document_id] = updated
                    changed.append(updated)

        logger.log_step("documents_updated", {"document_ids": [doc.id for doc in changed]})
        return changed

    async def delete_many(self, document_ids: Iterable[int]) -> List[Document]:
        """Remove every known id under a single lock; unknown ids are skipped."""
        removed: List[Document] = []
        async with self._lock:
            for document_id in document_ids:
                document = self._documents.pop(document_id, None)
                if document is not None:
                    removed.append(document)

        logger.log_step("documents_deleted", {"document_ids": [doc.id for doc in removed]})
        return removed
