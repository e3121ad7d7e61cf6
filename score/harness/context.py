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
"""Execution context: working directory and environment shared by the commands of a test."""

import logging
import pathlib
from dataclasses import dataclass, field
from typing import Optional

from score.harness.command import CommandBuilder
from score.harness.exception import AllocationError
from score.harness.resource import Disposable, ResourceStack
from score.harness.temp_dir import TempDir

logger = logging.getLogger(__name__)


@dataclass
class ContextOptions:
    env: dict = field(default_factory=dict)
    cwd: Optional[str] = None
    temp_cwd: bool = False
    temp_prefix: Optional[str] = None
    program: Optional[str] = None


class ExecutionContextBuilder:
    """Fluent configuration of an :class:`ExecutionContext`.

    Only :meth:`build` allocates anything, all other calls are pure configuration.
    """

    def __init__(self, program=None):
        self._options = ContextOptions(program=program)

    def set_env(self, key: str, value: str):
        self._options.env[key] = value
        return self

    def use_temp_cwd(self, prefix=None):
        self._options.temp_cwd = True
        self._options.temp_prefix = prefix
        return self

    def set_cwd(self, subdir):
        """Run in *subdir*, relative to the temporary or the current working directory."""
        self._options.cwd = subdir
        return self

    def set_program(self, program: str):
        self._options.program = program
        return self

    def build(self) -> "ExecutionContext":
        """Create the context.

        :raise: AllocationError if the temporary working directory cannot be created
        """
        return ExecutionContext(self._options)


class ExecutionContext(Disposable):
    """Top-level scope of a test.

    Owns every resource allocated through it (its temporary working directory,
    extra temporary directories and spawned processes) and releases them in
    reverse order of allocation on :meth:`dispose`.
    """

    def __init__(self, options: ContextOptions):
        self._resources = ResourceStack("ExecutionContext")
        self._env = dict(options.env)
        self._program = options.program
        self._temp_dir = None

        try:
            if options.temp_cwd:
                self._temp_dir = self._resources.push(TempDir(prefix=options.temp_prefix))
                cwd = self._temp_dir.path
            else:
                cwd = pathlib.Path.cwd()
            if options.cwd is not None:
                cwd = cwd / options.cwd
                if self._temp_dir is not None:
                    cwd.mkdir(parents=True, exist_ok=True)
        except OSError as ex:
            self._resources.dispose()
            raise AllocationError(f"Could not prepare working directory for {options}") from ex
        except AllocationError:
            self._resources.dispose()
            raise

        self._cwd = cwd.absolute()
        logger.debug(f"Created execution context in [{self._cwd}]")

    def __repr__(self):
        return f"ExecutionContext(cwd={str(self._cwd)!r})"

    @property
    def cwd(self) -> pathlib.Path:
        return self._cwd

    @property
    def env(self) -> dict:
        return dict(self._env)

    @property
    def temp_dir(self) -> Optional[TempDir]:
        return self._temp_dir

    @property
    def disposed(self) -> bool:
        return self._resources.disposed

    @property
    def warnings(self):
        """Cleanup failures reported while disposing this context."""
        return list(self._resources.warnings)

    def new_command(self) -> CommandBuilder:
        """Return a command builder seeded with a copy of this context's environment and cwd."""
        return CommandBuilder(cwd=self._cwd, env=self._env, program=self._program, owner=self._resources)

    def new_temp_dir(self, prefix=None) -> TempDir:
        """Allocate an extra temporary directory released together with the context."""
        return self._resources.push(TempDir(prefix=prefix))

    def own(self, resource):
        """Release *resource* together with the context."""
        return self._resources.push(resource)

    def dispose(self) -> None:
        if self._resources.disposed:
            return
        logger.debug(f"Disposing execution context in [{self._cwd}] ({len(self._resources)} resources)")
        self._resources.dispose()
