import json
import logging
import uuid
from pathlib import Path
from typing import Optional, Union

DEFAULT_STORAGE_PATH = Path.home() / ".portfolio_analytics" / "visitor.json"


class VisitorIdentity:
    """
    Pseudo-random visitor identifier persisted in client-local storage.

    The identifier only needs enough entropy to tell browsers apart for
    statistics. It is generated on first use, written once, and reused for as
    long as the storage file exists. Collisions only skew visitor counts.
    """

    def __init__(self, storage_path: Union[str, Path] = DEFAULT_STORAGE_PATH):
        self.storage_path = Path(storage_path)
        self.__visitor_id: Optional[str] = None

    def get_visitor_id(self) -> str:
        if self.__visitor_id is None:
            self.__visitor_id = self.__load() or self.__create()
        return self.__visitor_id

    def __load(self) -> Optional[str]:
        try:
            stored = json.loads(self.storage_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logging.warning(f"Ignoring unreadable visitor storage {self.storage_path}: {e}")
            return None
        visitor_id = stored.get("visitorId") if isinstance(stored, dict) else None
        return visitor_id if isinstance(visitor_id, str) and visitor_id else None

    def __create(self) -> str:
        visitor_id = uuid.uuid4().hex
        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            self.storage_path.write_text(
                json.dumps({"visitorId": visitor_id}), encoding="utf-8"
            )
        except OSError as e:
            # Kept in memory only: stable for this instance, new on the next run
            logging.warning(f"Could not persist visitor id to {self.storage_path}: {e}")
            return visitor_id
        logging.info(f"Created new visitor id in {self.storage_path}")
        return visitor_id
