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
"""Pytest plugin providing execution contexts to tests.

Load with ``-p score.harness.plugins`` or ``pytest_plugins = ["score.harness.plugins"]``.

Usage in a test::

    def test_version(exec_context):
        output = exec_context.new_command().set_args("--version").spawn().wait(timeout=10)
        assert output.exit_code == 0
"""

import logging

import pytest

import score.harness.config as harness_config
from score.harness.context import ExecutionContextBuilder

logger = logging.getLogger(__name__)


# Pylint doesn't handle pytest fixture chains well
# pylint: disable=redefined-outer-name


def pytest_addoption(parser):
    parser.addoption(
        "--subject-executable",
        action="store",
        default=None,
        help=f"Program spawned by command builders (default: {harness_config.SUBJECT_EXECUTABLE})",
    )


@pytest.fixture
def subject_executable(request):
    return request.config.getoption("--subject-executable") or harness_config.SUBJECT_EXECUTABLE


@pytest.fixture
def context_builder(subject_executable):
    """Fresh, unconfigured context builder for the configured subject program."""
    return ExecutionContextBuilder(program=subject_executable)


@pytest.fixture
def exec_context(context_builder):
    """Context running in its own temporary directory, disposed after the test."""
    with context_builder.use_temp_cwd().build() as context:
        yield context

    for warning in context.warnings:
        logger.warning(f"Cleanup warning after test: {warning}")
