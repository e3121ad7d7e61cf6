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
"""Fixtures provided by ``score.harness.plugins``."""

import score.harness.config as harness_config


def test_exec_context_runs_in_temp_directory(exec_context):
    assert exec_context.temp_dir is not None
    assert exec_context.cwd == exec_context.temp_dir.path
    assert exec_context.cwd.is_dir()


def test_context_builder_uses_configured_subject(context_builder, request):
    expected = request.config.getoption("--subject-executable") or harness_config.SUBJECT_EXECUTABLE
    with context_builder.build() as context:
        assert context.new_command().options().program == expected


def test_exec_context_is_disposed_after_test(pytester):
    pytester.makepyfile(
        """
        import pytest

        seen = []

        def test_first(exec_context):
            seen.append(exec_context)
            (exec_context.cwd / "leftover.txt").write_text("x")

        def test_second():
            assert seen[0].disposed
            assert not seen[0].cwd.exists()
        """
    )
    result = pytester.runpytest("-p", "score.harness.plugins")
    result.assert_outcomes(passed=2)
