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
"""Command configuration builder spawning subject processes."""

import logging
import os
import pathlib
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Optional

import psutil

import score.harness.config as harness_config
from score.harness.exception import SpawnError
from score.harness.process import ProcessHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOptions:
    """Snapshot of a command configuration taken at spawn time."""

    program: str
    cwd: pathlib.Path
    env: dict = field(default_factory=dict)
    args: tuple = ()

    def command_line(self) -> list:
        return [self.program, *self.args]


class CommandBuilder:
    """Fluent accumulation of the parameters of one subject process.

    The builder owns a private copy of the environment it is seeded with, so
    changes never leak into sibling commands or back into the context.

    Parameters:
        cwd: Working directory of the process.
        env: Environment of the process, copied.
        program: Program to run, defaults to ``config.SUBJECT_EXECUTABLE``.
        owner: :class:`ResourceStack` that takes ownership of spawned handles.
    """

    def __init__(self, cwd, env=None, program=None, owner=None):
        self._cwd = pathlib.Path(cwd)
        self._env = dict(env or {})
        self._program = program if program is not None else harness_config.SUBJECT_EXECUTABLE
        self._args: tuple = ()
        self._owner = owner

    def set_env(self, key: str, value: str):
        self._env[key] = value
        return self

    def set_cwd(self, path):
        self._cwd = pathlib.Path(path)
        return self

    def set_program(self, program: str):
        self._program = program
        return self

    def set_args(self, *args: str):
        self._args = tuple(str(arg) for arg in args)
        return self

    def options(self) -> CommandOptions:
        return CommandOptions(program=self._program, cwd=self._cwd, env=dict(self._env), args=self._args)

    def spawn(self) -> ProcessHandle:
        """Start the configured program without waiting for it to finish.

        The process environment is exactly the accumulated environment, nothing
        is inherited from the harness process. stdout and stderr are captured.

        :return: handle of the running process, owned by the builder's owner if any
        :raise: SpawnError if the program cannot be located or started
        """
        options = self.options()
        executable = _resolve_program(options.program, options.cwd)
        cmd_line_args = [executable, *options.args]

        logger.info(f"Starting process: {' '.join(cmd_line_args)} in [{options.cwd}]")
        try:
            process = psutil.Popen(
                cmd_line_args,
                env=options.env,
                cwd=str(options.cwd),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="backslashreplace",
                close_fds=True,
            )
        except OSError as ex:
            raise SpawnError(f"Could not run {cmd_line_args}") from ex

        handle = ProcessHandle(process, options)
        logger.info(f"Process [{options.program}] started with PID: [{process.pid}]")
        if self._owner is not None:
            self._owner.push(handle)
        return handle


def _resolve_program(program: str, cwd) -> str:
    """Return the executable path for *program*.

    Bare names are searched on the harness ``PATH``, relative paths are taken
    relative to the working directory of the command.
    """
    if os.sep in program or (os.altsep and os.altsep in program):
        candidate = os.path.join(cwd, program)
        executable: Optional[str] = os.path.abspath(candidate) if shutil.which(candidate) else None
    else:
        executable = shutil.which(program)
    if executable is None:
        raise SpawnError(f"Program [{program}] not found or not executable")
    return executable
