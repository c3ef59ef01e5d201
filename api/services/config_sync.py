"""
Config Sync service for the engine configuration.

Fetches the engine's active configuration, holds the operator's draft and
submits it back. The document content is opaque: the engine owns the
schema and is the only one that validates it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional
import structlog

from api.services.engine_client import EngineClient, call_engine
from api.services.errors import NoBaseline, OperationInProgress, StaleBaseline

logger = structlog.get_logger(__name__)


class Provenance(str, Enum):
    """Where the current draft comes from."""
    REMOTE_AUTHORITATIVE = "remote_authoritative"
    LOCALLY_EDITED = "locally_edited"


@dataclass
class ConfigDocument:
    """Baseline confirmed by the engine plus the operator's draft of it."""
    baseline: str
    draft: str
    provenance: Provenance = Provenance.REMOTE_AUTHORITATIVE
    revision: int = 1
    fetched_at: datetime = field(default_factory=datetime.now)
    saved_at: Optional[datetime] = None

    @property
    def has_local_edits(self) -> bool:
        return self.provenance is Provenance.LOCALLY_EDITED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "baseline": self.baseline,
            "draft": self.draft,
            "provenance": self.provenance.value,
            "revision": self.revision,
            "fetched_at": self.fetched_at.isoformat(),
            "saved_at": self.saved_at.isoformat() if self.saved_at else None,
        }


class ConfigSyncService:
    """
    Keeps the engine configuration and the operator's draft in sync.

    Only one remote operation (fetch or save) runs at a time. Draft edits
    and resets are local and never wait on the engine.
    """

    def __init__(
        self,
        engine: EngineClient,
        document: Optional[ConfigDocument] = None,
        call_timeout: float = 10.0
    ):
        self.engine = engine
        self.call_timeout = call_timeout
        self.document = document
        self.logger = logger.bind(component="ConfigSyncService")
        self._remote_operation: Optional[str] = None

    def get_document(self) -> Optional[ConfigDocument]:
        """Get the current document, or None if nothing was fetched yet."""
        return self.document

    @property
    def busy(self) -> bool:
        return self._remote_operation is not None

    def _ensure_idle(self, operation: str) -> None:
        if self._remote_operation is not None:
            raise OperationInProgress(
                f"Cannot {operation} configuration: {self._remote_operation} in progress",
                context={"operation": operation, "in_progress": self._remote_operation}
            )

    def _begin(self, operation: str) -> None:
        self._ensure_idle(operation)
        self._remote_operation = operation

    def _require_document(self, operation: str) -> ConfigDocument:
        if self.document is None:
            raise NoBaseline(
                f"Cannot {operation}: configuration has not been fetched from the engine yet",
                context={"operation": operation}
            )
        return self.document

    async def fetch_config(self) -> ConfigDocument:
        """
        Fetch the active configuration from the engine.

        The fetched text becomes the new baseline and the draft. On failure
        the previous document is left untouched.

        Raises:
            EngineUnavailable: engine could not be read
            OperationInProgress: a fetch or save is already running
        """
        self._begin("fetch")
        try:
            text = await call_engine(self.engine.get_config, "get config", self.call_timeout)
        finally:
            self._remote_operation = None

        previous = self.document
        if previous is not None and previous.has_local_edits:
            self.logger.warning("Discarding unsaved configuration edits after fetch")

        self.document = ConfigDocument(
            baseline=text,
            draft=text,
            revision=previous.revision + 1 if previous else 1
        )
        self.logger.info(f"Fetched configuration (revision {self.document.revision}, {len(text)} bytes)")
        return self.document

    def edit_draft(self, text: str, base_revision: Optional[int] = None) -> ConfigDocument:
        """
        Replace the draft with operator-edited text.

        Args:
            text: Full configuration text
            base_revision: Baseline revision the edit was made against, if known

        Raises:
            NoBaseline: nothing has been fetched yet
            StaleBaseline: base_revision does not match the current baseline
        """
        document = self._require_document("edit draft")
        if base_revision is not None and base_revision != document.revision:
            raise StaleBaseline(
                f"Draft was edited against revision {base_revision}, "
                f"current baseline is revision {document.revision}",
                context={"base_revision": base_revision, "revision": document.revision}
            )

        document.draft = text
        document.provenance = Provenance.LOCALLY_EDITED
        return document

    def reset_draft(self) -> ConfigDocument:
        """Discard local edits and restore the draft to the baseline."""
        document = self._require_document("reset draft")
        document.draft = document.baseline
        document.provenance = Provenance.REMOTE_AUTHORITATIVE
        self.logger.info(f"Draft reset to baseline revision {document.revision}")
        return document

    async def save_config(self) -> ConfigDocument:
        """
        Submit the current draft to the engine.

        On success the submitted text becomes the new baseline. On failure
        draft, baseline and provenance are unchanged.

        Raises:
            NoBaseline: nothing has been fetched yet
            EngineUnavailable: engine could not be reached
            ValidationRejected: engine refused the content
            OperationInProgress: a fetch or save is already running
        """
        document = self._require_document("save configuration")
        self._begin("save")
        submitted = document.draft
        try:
            await call_engine(
                lambda: self.engine.submit_config(submitted),
                "submit config",
                self.call_timeout
            )
        finally:
            self._remote_operation = None

        document.baseline = submitted
        document.revision += 1
        document.saved_at = datetime.now()
        # Edits or resets made while the save was in flight stay on top of the new baseline
        if document.draft == submitted:
            document.provenance = Provenance.REMOTE_AUTHORITATIVE
        else:
            document.provenance = Provenance.LOCALLY_EDITED
        self.logger.info(f"Saved configuration (revision {document.revision})")
        return document

    async def submit_config(self, text: str, base_revision: Optional[int] = None) -> ConfigDocument:
        """
        Replace the draft with the given text and save it in one step.

        The draft is only touched once no other fetch or save is running,
        so a rejected request leaves the document as it was.

        Raises:
            NoBaseline: nothing has been fetched yet
            StaleBaseline: base_revision does not match the current baseline
            OperationInProgress: a fetch or save is already running
            EngineUnavailable: engine could not be reached
            ValidationRejected: engine refused the content
        """
        self._require_document("save configuration")
        self._ensure_idle("save")
        self.edit_draft(text, base_revision=base_revision)
        return await self.save_config()
