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
"""Harness for running a subject command in an isolated, self-cleaning environment.

Public API::

    from score.harness import ExecutionContextBuilder

    with ExecutionContextBuilder().use_temp_cwd().set_env("FOO", "bar").build() as context:
        output = context.new_command().set_args("--version").spawn().wait(timeout=10)
"""

import sys

import pytest

from score.harness.command import CommandBuilder, CommandOptions
from score.harness.context import ExecutionContext, ExecutionContextBuilder
from score.harness.exception import (
    AllocationError,
    CatalogError,
    CleanupWarning,
    HarnessRuntimeError,
    SpawnError,
)
from score.harness.process import CommandOutput, ProcessHandle
from score.harness.resource import Disposable, ResourceStack
from score.harness.temp_dir import TempDir


def run(current_file):
    """Run the tests in *current_file* with the harness fixtures loaded."""
    args = sys.argv[1:] + ["-p", "score.harness.plugins", "--show-capture=no", current_file]
    sys.exit(pytest.main(args))
