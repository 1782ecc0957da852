"""State dumper for saving progression state to disk."""

import json
import logging
import re
import shutil
from pathlib import Path
from typing import Optional

from gamelife.config import DEFAULT_DUMP_DIRECTORY
from gamelife.models.state import ProgressionState

logger = logging.getLogger(__name__.split(".")[-1])

_VERSION_FILE = re.compile(r"^v(\d+)\.json$")


class StateDumper:
    """Dumps progression states to disk and loads them back."""

    def __init__(self, dump_directory: str = DEFAULT_DUMP_DIRECTORY):
        """
        Initialize state dumper.

        Args:
            dump_directory: Directory where states will be saved
        """
        self.dump_directory = Path(dump_directory)
        self._ensure_directory_exists()

    def _ensure_directory_exists(self) -> None:
        try:
            self.dump_directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"State dump directory ready: {self.dump_directory}")
        except PermissionError:
            logger.error(f"Permission denied creating directory: {self.dump_directory}")
            raise
        except OSError as e:
            logger.error(f"Error creating directory {self.dump_directory}: {e}")
            raise

    def get_state_directory(self, state_id: str) -> Path:
        return self.dump_directory / state_id

    def dump_state(self, state: ProgressionState) -> str:
        """
        Dump state to disk using structure: {state_id}/v{version}.json

        Returns:
            Path to the dumped file
        """
        state_dir = self.get_state_directory(state.state_id)
        file_path = state_dir / f"v{state.state_version}.json"

        try:
            state_dir.mkdir(parents=True, exist_ok=True)
            state_json = state.model_dump_json(indent=2)

            # Write to a temp file, then rename atomically
            temp_path = file_path.with_suffix(".tmp")
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(state_json)
            temp_path.replace(file_path)

            logger.debug(f"Dumped state {state.state_id} v{state.state_version} to {file_path}")
            return str(file_path)

        except Exception as e:
            logger.error(
                f"Error dumping state {state.state_id} v{state.state_version} to {file_path}: {e}", exc_info=True
            )
            raise

    def load_state(self, state_id: str, version: Optional[int] = None) -> Optional[ProgressionState]:
        """
        Load a state from disk.

        Args:
            state_id: State to load
            version: Optional version number. If None, loads the latest version.

        Returns:
            ProgressionState if found, None otherwise
        """
        state_dir = self.get_state_directory(state_id)
        if not state_dir.exists():
            logger.warning(f"State directory not found: {state_dir}")
            return None

        if version is not None:
            file_path = state_dir / f"v{version}.json"
            if not file_path.exists():
                logger.warning(f"State file not found: {file_path}")
                return None
            return self._load_state_from_file(file_path)

        latest_file = self._find_latest_version_file(state_dir)
        if latest_file is None:
            logger.warning(f"No state files found in {state_dir}")
            return None
        return self._load_state_from_file(latest_file)

    def _find_latest_version_file(self, state_dir: Path) -> Optional[Path]:
        latest_version = -1
        latest_file = None
        for file_path in state_dir.iterdir():
            match = _VERSION_FILE.match(file_path.name)
            if file_path.is_file() and match:
                version = int(match.group(1))
                if version > latest_version:
                    latest_version = version
                    latest_file = file_path
        return latest_file

    def _load_state_from_file(self, file_path: Path) -> Optional[ProgressionState]:
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                state_data = json.load(f)

            state = ProgressionState.model_validate(state_data)
            logger.debug(f"Loaded state from {file_path}")
            return state
        except Exception as e:
            logger.error(f"Error loading state from {file_path}: {e}", exc_info=True)
            return None

    def list_states(self) -> list[str]:
        """List all state ids that have saved versions."""
        if not self.dump_directory.exists():
            return []
        return sorted(
            item.name for item in self.dump_directory.iterdir() if item.is_dir() and any(item.glob("v*.json"))
        )

    def load_all_states(self) -> dict[str, ProgressionState]:
        """
        Load all states from disk (latest version of each).

        Returns:
            Dictionary mapping state_id to ProgressionState
        """
        states = {}
        for state_id in self.list_states():
            state = self.load_state(state_id)
            if state:
                states[state_id] = state
                logger.info(f"Loaded state {state_id} (version {state.state_version})")
            else:
                logger.warning(f"Failed to load state {state_id}")
        return states

    def delete_state(self, state_id: str) -> bool:
        """Delete every saved version of a state. Returns False if none existed."""
        state_dir = self.get_state_directory(state_id)
        if not state_dir.exists():
            return False
        shutil.rmtree(state_dir)
        logger.info(f"Deleted state directory {state_dir}")
        return True
