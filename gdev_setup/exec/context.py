"""
Run-scoped execution context.
Holds the project root and the log directory, and hands out log file paths.
"""

import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class ExecutionContext:
    """
    Process-wide context created once per run.

    Attributes:
        project_path: Working directory for every step and fix
        log_output_path: Directory receiving one log file per command attempt
    """
    project_path: Path
    log_output_path: Path
    _last_millis: int = field(default=0, init=False, repr=False)

    @classmethod
    def create(cls, project_path: Path, log_output_path: Optional[Path] = None) -> 'ExecutionContext':
        """
        Create a context, making a fresh temporary log directory if none is given.

        The directory is left in place after the run so logs can be inspected.
        """
        if log_output_path is None:
            log_output_path = Path(tempfile.mkdtemp(prefix="gdev-setup"))
        else:
            log_output_path.mkdir(parents=True, exist_ok=True)
        return cls(project_path=project_path, log_output_path=log_output_path.resolve())

    def allocate_log_path(self, key: str) -> Path:
        """
        Return a new log file path named <unix-millis>-<key>.log.

        The timestamp is strictly increasing within a run, so repeated
        attempts of the same key never collide. Path separators in the key
        become underscores so the file always lands in the log directory.
        """
        millis = max(int(time.time() * 1000), self._last_millis + 1)
        self._last_millis = millis
        return self.log_output_path / f"{millis}-{_safe_file_part(key)}.log"


def _safe_file_part(key: str) -> str:
    for separator in (os.sep, os.altsep):
        if separator:
            key = key.replace(separator, "_")
    return key
