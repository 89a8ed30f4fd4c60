"""
Inference Collaborator
======================
Wraps the external model executable (by default `ollama run tinyllama <prompt>`).

Only the exit status, stdout and stderr are used. The call is blocking;
the GUI runs it from an InferenceWorker thread and can `cancel()` it from
the GUI thread, which terminates the running process.
"""
from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass
from typing import List, Optional, Set

from tronk.config import (
    DEFAULT_INFERENCE_EXECUTABLE, DEFAULT_INFERENCE_SUBCOMMAND, DEFAULT_INFERENCE_MODEL, Settings,
)

logger = logging.getLogger(__name__)

# Seconds a terminated process gets before it is killed
TERMINATE_GRACE = 2.0


@dataclass(frozen=True)
class InferenceResult:
    ok: bool
    text: str
    returncode: Optional[int] = None


class InferenceClient:
    def __init__(
        self,
        executable: str = DEFAULT_INFERENCE_EXECUTABLE,
        subcommand: str = DEFAULT_INFERENCE_SUBCOMMAND,
        model: str = DEFAULT_INFERENCE_MODEL,
        timeout: Optional[float] = None,
    ) -> None:
        self.executable = executable
        self.subcommand = subcommand
        self.model = model
        self.timeout = timeout

        # Processes still running, and those we were asked to stop
        self._lock = threading.Lock()
        self._running: Set[subprocess.Popen] = set()
        self._cancelled: Set[subprocess.Popen] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> InferenceClient:
        return cls(
            executable=settings.inference_executable,
            subcommand=settings.inference_subcommand,
            model=settings.inference_model,
            timeout=settings.inference_timeout,
        )

    @property
    def is_running(self) -> bool:
        with self._lock:
            return bool(self._running)

    def build_command(self, prompt: str) -> List[str]:
        return [self.executable, self.subcommand, self.model, prompt]

    def run(self, prompt: str) -> InferenceResult:
        """
        Run one prompt to completion.

        Success returns stdout, a non-zero exit returns stderr. Failing to
        launch the executable, hitting the timeout or being cancelled is
        reported as a failed result instead of an exception.
        """
        cmd = self.build_command(prompt)
        logger.info(f"Running inference with model '{self.model}'")
        logger.debug(f"Inference command: {cmd!r}")
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error(f"Failed to execute {self.executable}: {e}")
            return InferenceResult(ok=False, text=f"failed to execute {self.executable} command: {e}")

        with self._lock:
            self._running.add(proc)
        try:
            stdout, stderr = proc.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Inference timed out after {self.timeout}s.")
            proc.kill()
            proc.communicate()
            return InferenceResult(ok=False, text=f"{self.executable} timed out after {self.timeout}s")
        finally:
            with self._lock:
                self._running.discard(proc)
                cancelled = proc in self._cancelled
                self._cancelled.discard(proc)

        if cancelled:
            logger.info(f"Inference request cancelled ({self.executable} exited with {proc.returncode}).")
            return InferenceResult(ok=False, text=f"{self.executable} request cancelled",
                                   returncode=proc.returncode)

        if proc.returncode == 0:
            return InferenceResult(ok=True, text=stdout, returncode=0)

        logger.warning(f"{self.executable} exited with status {proc.returncode}")
        return InferenceResult(ok=False, text=stderr, returncode=proc.returncode)

    def cancel(self) -> int:
        """
        Terminate every running request; each pending `run()` returns a
        cancelled result. Returns the number of processes stopped.
        """
        with self._lock:
            procs = list(self._running)
            self._cancelled.update(procs)

        for proc in procs:
            try:
                proc.terminate()
                proc.wait(timeout=TERMINATE_GRACE)
            except subprocess.TimeoutExpired:
                logger.warning(f"{self.executable} ignored terminate, killing it.")
                proc.kill()
            except OSError as e:
                logger.warning(f"Could not stop {self.executable}: {e}")

        if procs:
            logger.info(f"Cancelled {len(procs)} inference request(s).")
        return len(procs)
