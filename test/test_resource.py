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
"""Ownership stack: release order, failure isolation and idempotence."""

import logging

import pytest

from score.harness import CleanupWarning, Disposable, ResourceStack


class RecordingResource(Disposable):
    def __init__(self, name, events, error=None):
        self.name = name
        self.events = events
        self.error = error

    def __repr__(self):
        return f"RecordingResource({self.name!r})"

    def dispose(self):
        self.events.append(self.name)
        if self.error:
            raise self.error


def test_release_order_is_reverse_of_acquisition():
    events = []
    stack = ResourceStack()
    for name in ("first", "second", "third"):
        stack.push(RecordingResource(name, events))

    stack.dispose()

    assert events == ["third", "second", "first"]
    assert len(stack) == 0


def test_failing_release_does_not_stop_the_chain(caplog):
    events = []
    stack = ResourceStack("test-stack")
    stack.push(RecordingResource("first", events))
    broken = stack.push(RecordingResource("broken", events, error=OSError("busy")))
    stack.push(RecordingResource("last", events))

    with caplog.at_level(logging.WARNING):
        stack.dispose()

    assert events == ["last", "broken", "first"]
    assert len(stack.warnings) == 1
    assert stack.warnings[0].resource is broken
    assert isinstance(stack.warnings[0].error, OSError)
    assert any("test-stack" in r.message and "busy" in r.message for r in caplog.records)


def test_returned_cleanup_warning_is_collected():
    class SoftFailure(Disposable):
        def dispose(self):
            return CleanupWarning(self, PermissionError("denied"))

    stack = ResourceStack()
    stack.push(SoftFailure())
    stack.dispose()

    assert len(stack.warnings) == 1
    assert isinstance(stack.warnings[0].error, PermissionError)


def test_dispose_twice_is_a_noop():
    events = []
    stack = ResourceStack()
    stack.push(RecordingResource("only", events))

    stack.dispose()
    stack.dispose()

    assert events == ["only"]
    assert stack.disposed


def test_push_after_dispose_releases_immediately():
    events = []
    stack = ResourceStack()
    stack.dispose()

    resource = stack.push(RecordingResource("late", events))

    assert resource.name == "late"
    assert events == ["late"]


def test_with_block_releases_on_exception_and_propagates_it():
    events = []
    with pytest.raises(ValueError, match="test body failed"):
        with ResourceStack() as stack:
            stack.push(RecordingResource("owned", events))
            raise ValueError("test body failed")

    assert events == ["owned"]
