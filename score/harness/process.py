# *******************************************************************************
# Copyright (c) 2026 Contributors to the Eclipse Foundation
#
# See the NOTICE file(s) distributed with this work for additional
# information regarding copyright ownership.
#
# This program and the accompanying materials are made available under the
# terms of the Apache License Version 2.0 which is available at
# https://www.apache.org/licenses/LICENSE-2.0
#
# SPDX-License-Identifier: Apache-2.0
# *******************************************************************************
"""Handle of a spawned subject process."""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from score.harness.exception import HarnessRuntimeError
from score.harness.resource import Disposable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutput:
    """Exit status and captured output of a finished process."""

    exit_code: int
    stdout: str
    stderr: str


class ProcessHandle(Disposable):
    """Wraps a running ``psutil.Popen`` started by :meth:`CommandBuilder.spawn`.

    Disposal sends a termination signal and does not wait for the process to
    exit. Tests that care about the result call :meth:`wait` before the
    enclosing scope ends.
    """

    def __init__(self, process, options=None):
        self._process = process
        self._options = options
        self._output: Optional[CommandOutput] = None
        self._disposed = False

    def __repr__(self):
        return f"ProcessHandle(pid={self.pid}, program={getattr(self._options, 'program', None)!r})"

    @property
    def process(self):
        return self._process

    @property
    def options(self):
        return self._options

    @property
    def pid(self):
        return self._process.pid

    def is_running(self) -> bool:
        # poll() will return the exit code, if set, otherwise None
        return self._process.poll() is None

    def wait(self, timeout=None) -> CommandOutput:
        """Wait for the process to finish and return its captured output.

        :param timeout: maximum wait duration in seconds, ``None`` waits forever
        :return: exit code, stdout and stderr of the process
        :raise: HarnessRuntimeError on timeout, the process keeps running
        """
        if self._output is not None:
            return self._output
        try:
            stdout, stderr = self._process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as original_exception:
            raise HarnessRuntimeError(
                f"Process with PID [{self.pid}] didn't finish for timeout of {timeout} seconds."
            ) from original_exception

        self._output = CommandOutput(exit_code=self._process.returncode, stdout=stdout or "", stderr=stderr or "")
        logger.debug(f"Process with PID [{self.pid}] finished with exit code [{self._output.exit_code}]")
        return self._output

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        try:
            self._process.terminate()
        except Exception:  # noqa: BLE001
            # Most commonly the process has already exited
            logger.debug(f"Ignoring error terminating process with PID [{self.pid}]", exc_info=True)

        for stream in (self._process.stdout, self._process.stderr):
            if stream is None:
                continue
            try:
                stream.close()
            except Exception:  # noqa: BLE001
                logger.debug("Ignoring error closing process pipe", exc_info=True)
