"""State history log."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from gamelife.models.state import ProgressionState


class StateSnapshot(BaseModel):
    """Historical state snapshot with the reason it was taken."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    index: int = Field(ge=0, description="Sequential snapshot number")
    timestamp: datetime = Field(default_factory=datetime.now, description="When snapshot was created")
    state: ProgressionState = Field(description="Complete, self-contained state")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Reason and operation details")


class StateHistory:
    """Bounded log of applied operations. Not an undo stack."""

    def __init__(self, max_snapshots: int = 100) -> None:
        self._snapshots: list[StateSnapshot] = []
        self._next_index = 0
        self._max_snapshots = max_snapshots

    def create_snapshot(self, state: ProgressionState, metadata: Optional[dict] = None) -> StateSnapshot:
        """
        Create a snapshot of the current state.

        Args:
            state: State to snapshot
            metadata: Optional metadata for the snapshot

        Returns:
            Created StateSnapshot
        """
        snapshot = StateSnapshot(
            index=self._next_index,
            timestamp=datetime.now(),
            state=state,
            metadata=metadata or {},
        )
        self._snapshots.append(snapshot)
        self._next_index += 1
        if len(self._snapshots) > self._max_snapshots:
            self._snapshots = self._snapshots[-self._max_snapshots :]
        return snapshot

    def list_snapshots(self) -> list[StateSnapshot]:
        return self._snapshots.copy()

    def get_latest(self) -> Optional[StateSnapshot]:
        if self._snapshots:
            return self._snapshots[-1]
        return None
