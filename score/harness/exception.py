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
"""Exceptions raised (and warnings reported) by the harness."""


class HarnessRuntimeError(RuntimeError):
    """Base class for all errors raised by the harness."""


class AllocationError(HarnessRuntimeError):
    """A temporary directory or a process could not be created."""


class SpawnError(AllocationError):
    """The configured program could not be located or started."""


class CatalogError(HarnessRuntimeError):
    """A scenario catalog file is malformed."""


class CleanupWarning(UserWarning):
    """A disposal step failed after the resource was allocated.

    Instances are logged and collected by the owning resource, never raised.
    """

    def __init__(self, resource, error):
        super().__init__(f"Failed cleaning up {resource!r}: {error!r}")
        self.resource = resource
        self.error = error
