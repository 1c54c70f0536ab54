# ABOUTME: Actor store persisted to a JSON file between runs
# ABOUTME: Loads caster records on open and rewrites the file after every update

import json
from pathlib import Path
from typing import Any, Dict, Union

from weave_engine.core.caster import Caster
from weave_engine.host.memory_store import InMemoryActorStore


STORE_VERSION = "1.0.0"


class JsonActorStore(InMemoryActorStore):
    """
    InMemoryActorStore that keeps its records in a JSON file.

    File layout: {"version": "1.0.0", "casters": [<caster>, ...]}
    """

    def __init__(self, path: Union[str, Path]):
        """
        Open a caster file.

        Args:
            path: JSON file to read and write

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is corrupted or a record is invalid
        """
        super().__init__()
        self.path = Path(path)
        for caster in self._read():
            self.add(caster)

    def _read(self) -> list:
        if not self.path.exists():
            raise FileNotFoundError(f"Caster file not found: {self.path}")

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupted caster file: {e}")

        if not isinstance(data, dict) or "casters" not in data:
            raise ValueError(f"Caster file {self.path} is missing the 'casters' list")

        try:
            return [Caster.from_dict(entry) for entry in data["casters"]]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid caster record in {self.path}: {e}")

    def save(self) -> Path:
        """Write every record back to the file."""
        data: Dict[str, Any] = {
            "version": STORE_VERSION,
            "casters": [caster.to_dict() for caster in self.casters.values()]
        }
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return self.path

    async def _after_update(self, record: Caster) -> None:
        self.save()
