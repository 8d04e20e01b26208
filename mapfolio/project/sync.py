"""Edit-Sync Channel: writes a layer's edited features back to their file."""

from __future__ import annotations

from typing import Callable, Optional

from ..features.layer import EditableLayer, EditEvent
from ..features.models import FeatureSet
from ..utils.logging import get_logger, log_edit_sync
from .assets import FeatureSetAsset

logger = get_logger(__name__)


class EditSyncChannel:
    """Listener that persists the full feature set after every layer edit.

    On each edit notification the channel queries the layer's complete
    current features, swaps them into the backing feature-set asset and
    overwrites the asset's file.  There is no debouncing and no partial
    write: one notification, one full rewrite.

    A failed write is logged and re-raised.  The asset's in-memory feature
    set has already been replaced at that point and is not rolled back.
    """

    def __init__(
        self,
        layer: EditableLayer,
        target: FeatureSetAsset,
        json_indent: Optional[int] = None,
    ):
        self.layer = layer
        self.target = target
        self.json_indent = json_indent
        self.snapshot: Optional[FeatureSet] = target.domain
        self.write_count = 0
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def attach(self) -> "EditSyncChannel":
        if self._unsubscribe is None:
            self._unsubscribe = self.layer.on_edits(self)
        return self

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def __call__(self, event: EditEvent) -> None:
        snapshot = await self.layer.query_features()
        self.target.replace(snapshot)
        self.snapshot = snapshot

        text = snapshot.to_json_text(indent=self.json_indent)
        try:
            async with self.target.handle.open_writer() as writer:
                await writer.write(text)
        except OSError as exc:
            logger.error(
                f"EDIT SYNC FAILED {self.layer.title} -> {self.target.file_name}: {exc}"
            )
            raise
        self.target.raw_text = text
        self.write_count += 1
        log_edit_sync(
            logger,
            self.layer.title,
            self.target.file_name,
            len(snapshot.features),
            len(text.encode("utf-8")),
        )
