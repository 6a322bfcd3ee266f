"""
Command runner for shell commands.
Runs one command through bash and streams combined output to a sink.
"""

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Dict, Optional

from ..exceptions import PreparationError


logger = logging.getLogger(__name__)

# Exit code reported when a command is killed after its timeout, as timeout(1) does
TIMEOUT_EXIT_CODE = 124


@dataclass
class CommandResult:
    """Completion status of one command."""
    exit_code: int
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class CommandRunner:
    """
    Executes shell commands synchronously.

    Commands are passed to ``<shell> -c`` as a single argv entry, so the
    shell does the parsing and no ``shell=True`` is needed.
    """

    def __init__(self, shell: str = "bash", timeout_sec: Optional[float] = None):
        """
        Initialize command runner.

        Args:
            shell: Shell used to interpret commands
            timeout_sec: Optional deadline applied to every command
        """
        self.shell = shell
        self.timeout_sec = timeout_sec

    def run(
        self,
        key: str,
        command: str,
        cwd: Path,
        env: Dict[str, str],
        sink: BinaryIO,
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            key: Step or fix key, used in error messages
            command: Shell command string
            cwd: Working directory
            env: Complete environment for the child process
            sink: Binary file receiving interleaved stdout and stderr

        Returns:
            CommandResult with the exit code (non-zero codes preserved)

        Raises:
            PreparationError: If the process could not be started
        """
        argv = [self.shell, "-c", command]
        logger.debug(f"Running '{key}': {command} (cwd={cwd})")

        try:
            process = subprocess.Popen(
                argv,
                cwd=str(cwd),
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=sink,
                stderr=subprocess.STDOUT,
                # With a deadline the command gets its own process group, so the
                # timeout can kill everything the shell started
                start_new_session=self.timeout_sec is not None,
            )
        except OSError as e:
            raise PreparationError(key, f"'{key}' failed to run: {e}") from e

        try:
            returncode = process.wait(timeout=self.timeout_sec)
        except subprocess.TimeoutExpired:
            logger.warning(f"'{key}' timed out after {self.timeout_sec} seconds")
            self._kill_process_group(process)
            return CommandResult(exit_code=TIMEOUT_EXIT_CODE, timed_out=True)

        logger.debug(f"'{key}' exited with code {returncode}")
        return CommandResult(exit_code=returncode)

    @staticmethod
    def _kill_process_group(process: subprocess.Popen) -> None:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            # group already exited between the timeout and the kill
            pass
        process.wait()
