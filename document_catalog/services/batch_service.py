"""Bulk actions over a selection of catalog documents"""

from typing import Callable, Iterable, List, Optional, Sequence

from ..errors import InvalidBatchActionError
from ..models.document import ARCHIVED_STATUS, Document, DocumentPatch
from ..models.schemas import BatchAction, BatchResult
from ..utils.logging import logger
from ..utils.notifications import NotificationFeed, NotificationLevel
from .catalog_store import CatalogStore

ShareHandler = Callable[[List[Document]], None]

ACTION_VERBS = {
    BatchAction.DELETE: "Deleted",
    BatchAction.ARCHIVE: "Archived",
    BatchAction.DOWNLOAD: "Downloaded",
    BatchAction.SHARE: "Shared",
    BatchAction.TAG: "Tagged",
}


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Strip blanks and duplicates from user supplied tags, keeping their order."""
    cleaned = [tag.strip() for tag in (tags or []) if tag and tag.strip()]
    return list(dict.fromkeys(cleaned))


def format_share_summary(documents: Sequence[Document]) -> str:
    """Plain text summary of the selection, used when no native share target exists."""
    lines = [f"Shared documents ({len(documents)}):"]
    for document in documents:
        line = f"- {document.name} ({document.category}, {document.size}, uploaded {document.upload_date.isoformat()})"
        if document.property:
            line += f" - {document.property}"
        lines.append(line)
    return "\n".join(lines)


class BatchOperationCoordinator:
    """Applies one bulk action to a set of document ids through the catalog store."""

    def __init__(
        self,
        store: CatalogStore,
        notifier: NotificationFeed,
        share_handler: Optional[ShareHandler] = None,
    ):
        self.store = store
        self.notifier = notifier
        self.share_handler = share_handler

    async def apply(
        self,
        action,
        ids: Iterable[int],
        tags: Optional[Iterable[str]] = None,
    ) -> BatchResult:
        try:
            action = BatchAction(action)
        except ValueError:
            raise InvalidBatchActionError(f"Unknown bulk action: {action}") from None

        requested = list(dict.fromkeys(ids))
        if not requested:
            return BatchResult(action=action, message="No documents selected.")

        new_tags = normalize_tags(tags)
        if action is BatchAction.TAG and not new_tags:
            raise InvalidBatchActionError("The tag action requires at least one tag.")

        known = [document_id for document_id in requested if self.store.contains(document_id)]
        missing = [document_id for document_id in requested if document_id not in known]
        if missing:
            logger.log_step("batch_unknown_ids_ignored", {"action": action.value, "document_ids": missing})

        share_text = None
        if action is BatchAction.DELETE:
            documents = await self.store.delete_many(known)
        elif action is BatchAction.ARCHIVE:
            documents = await self.store.update_many(known, _archive_patch)
        elif action is BatchAction.TAG:
            patch = DocumentPatch(add_tags=tuple(new_tags))
            documents = await self.store.update_many(known, lambda _: patch)
        else:
            documents = [self.store.get(document_id) for document_id in known]
            if action is BatchAction.SHARE:
                share_text = self._share(documents)

        message = f"{ACTION_VERBS[action]} {len(documents)} documents"
        self.notifier.notify(message, NotificationLevel.SUCCESS)
        logger.log_step("batch_action_applied", {
            "action": action.value,
            "requested": len(requested),
            "affected": len(documents)
        })

        return BatchResult(
            action=action,
            message=message,
            affected_ids=[document.id for document in documents],
            missing_ids=missing,
            documents=documents,
            share_text=share_text,
        )

    def _share(self, documents: List[Document]) -> Optional[str]:
        if self.share_handler is not None:
            self.share_handler(documents)
            return None
        summary = format_share_summary(documents)
        self.notifier.notify("Share summary copied to clipboard", NotificationLevel.INFO)
        return summary


def _archive_patch(document: Document) -> Optional[DocumentPatch]:
    if document.status == ARCHIVED_STATUS:
        return None
    return DocumentPatch(status=ARCHIVED_STATUS)
