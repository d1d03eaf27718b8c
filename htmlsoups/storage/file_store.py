"""
JSON file storage for learned selectors.

Layout under the storage directory:

    learning_state.json        full learning state
    domains/<domain>.json      per-domain exports
"""

import json
import os
import re
from pathlib import Path
from typing import Any

from htmlsoups.exceptions import StorageError
from htmlsoups.learning.state import LearningState
from htmlsoups.storage.base import DomainPatterns, patterns_from_dict, patterns_to_dict
from htmlsoups.utils import metrics
from htmlsoups.utils.logging import SoupsLogger

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class FileLearningStorage:
    """Learning state store backed by JSON files in a local directory."""

    backend = "file"
    STATE_FILE = "learning_state.json"
    DOMAINS_DIR = "domains"

    def __init__(
        self,
        directory: str | Path,
        logger: SoupsLogger | None = None,
    ):
        """
        Initialize the file store.

        Args:
            directory: Directory holding the JSON files; created on first save.
            logger: Logger instance.
        """
        self.directory = Path(directory).expanduser()
        self.logger = logger or SoupsLogger("file_storage")

    @property
    def state_path(self) -> Path:
        return self.directory / self.STATE_FILE

    def _domain_path(self, domain: str) -> Path:
        name = _UNSAFE_CHARS.sub("_", domain.lower()).strip(".") or "_"
        return self.directory / self.DOMAINS_DIR / f"{name}.json"

    def _write_json(self, path: Path, data: dict[str, Any], operation: str) -> None:
        """Write JSON through a temp file so readers never see a partial file."""
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            metrics.record_storage(self.backend, operation, False)
            raise StorageError(operation, self.backend, str(e)) from e
        metrics.record_storage(self.backend, operation, True)

    def _read_json(self, path: Path, operation: str) -> dict[str, Any] | None:
        """Read a JSON object, None if the file does not exist."""
        if not path.exists():
            metrics.record_storage(self.backend, operation, True)
            return None
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            metrics.record_storage(self.backend, operation, False)
            raise StorageError(operation, self.backend, f"{path}: {e}") from e

        if not isinstance(data, dict):
            metrics.record_storage(self.backend, operation, False)
            raise StorageError(operation, self.backend, f"{path}: expected a JSON object")

        metrics.record_storage(self.backend, operation, True)
        return data

    async def save(self, state: LearningState) -> None:
        self._write_json(self.state_path, state.to_dict(), "save")
        self.logger.debug("Saved learning state", path=str(self.state_path))

    async def load(self) -> LearningState:
        data = self._read_json(self.state_path, "load")
        if data is None:
            return LearningState()
        try:
            return LearningState.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StorageError("load", self.backend, f"corrupt state: {e}") from e

    async def save_domain_patterns(self, domain: str, patterns: DomainPatterns) -> None:
        payload = {"domain": domain, "patterns": patterns_to_dict(patterns)}
        self._write_json(self._domain_path(domain), payload, "save_domain")

    async def load_domain_patterns(self, domain: str) -> DomainPatterns:
        data = self._read_json(self._domain_path(domain), "load_domain")
        if data is None:
            return {}
        try:
            return patterns_from_dict(data.get("patterns", {}))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StorageError("load_domain", self.backend, f"corrupt patterns: {e}") from e

    async def list_domains(self) -> list[str]:
        domains: set[str] = set()

        domains_dir = self.directory / self.DOMAINS_DIR
        if domains_dir.is_dir():
            for path in domains_dir.glob("*.json"):
                data = self._read_json(path, "list_domains")
                if data:
                    domains.add(data.get("domain", path.stem))

        state = self._read_json(self.state_path, "list_domains")
        if state:
            domains.update(state.get("domain_patterns", {}))

        return sorted(domains)
