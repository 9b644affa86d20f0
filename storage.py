import json
import logging
import os

from nerts import State, StorageFailure

log = logging.getLogger(__name__)

SAVE_FILE = os.environ.get("NERTS_SAVE_FILE", "nerts.json")

# ---------- Persistence ----------

class JsonFileStore:
    """Keeps the whole game in one JSON save file."""

    def __init__(self, path=None):
        self.path = path or SAVE_FILE

    def load(self) -> State | None:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageFailure(f"Could not read {self.path}: {exc}") from exc
        return State.from_json(data)

    def save(self, state: State):
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(state.to_json(), f, indent=2)
        except (OSError, TypeError) as exc:
            raise StorageFailure(f"Could not write {self.path}: {exc}") from exc
        log.debug("Saved game to %s", self.path)

    def clear(self):
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
        except OSError as exc:
            raise StorageFailure(f"Could not remove {self.path}: {exc}") from exc


class MemoryStore:
    """Holds the last saved game as a JSON string, for tests and scratch sessions."""

    def __init__(self, blob: str | None = None):
        self.blob = blob
        self.saves = 0

    def load(self) -> State | None:
        if self.blob is None:
            return None
        return State.from_json(json.loads(self.blob))

    def save(self, state: State):
        self.blob = json.dumps(state.to_json())
        self.saves += 1

    def clear(self):
        self.blob = None
