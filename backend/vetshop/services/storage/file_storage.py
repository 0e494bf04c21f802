import logging
import os
import re
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional, Union

from vetshop.services.storage.base import CartStorage, CartStorageError, slot_expired, utcnow

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class JsonFileCartStorage(CartStorage):
    """
    One JSON file per slot inside ``directory``.

    With a ``ttl``, a file whose modification time is older than ``ttl`` reads
    as absent and is deleted.
    """
    
    def __init__(
        self,
        directory: Union[str, Path],
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.directory = Path(directory)
        self.ttl = ttl
        self._clock = clock
    
    def path_for(self, key: str) -> Path:
        """Map a slot key to a file name that is safe on any filesystem."""
        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"
    
    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            if self.ttl is not None:
                updated_at = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
                if slot_expired(updated_at, self.ttl, self._clock()):
                    logger.info(f"Cart slot {key} expired")
                    path.unlink()
                    return None
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CartStorageError(f"Could not read cart slot {key}: {e}") from e
    
    def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise CartStorageError(f"Could not write cart slot {key}: {e}") from e
        logger.debug(f"Wrote cart slot {key} to {path}")
    
    def remove(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise CartStorageError(f"Could not remove cart slot {key}: {e}") from e
