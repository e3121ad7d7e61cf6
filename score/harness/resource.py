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
"""Scoped acquisition with guaranteed release.

Every harness resource is usable as soon as its constructor returns and must
be released with :meth:`Disposable.dispose` (or by leaving a ``with`` block)
before the enclosing scope ends. Resources created through a parent are
tracked on the parent's :class:`ResourceStack` and released with it::

    with ExecutionContextBuilder().use_temp_cwd().build() as context:
        context.new_command().set_args("--version").spawn()
    # process terminated first, then the temporary directory removed
"""

import logging
from abc import ABC, abstractmethod

from score.harness.exception import CleanupWarning

logger = logging.getLogger(__name__)


class Disposable(ABC):
    """Resource released exactly by :meth:`dispose`."""

    @abstractmethod
    def dispose(self):
        """Release the resource. Calling it more than once has no additional effect.

        Implementations report failures they already handled by returning a
        :class:`CleanupWarning`, anything else they return is ignored.
        """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False


class ResourceStack(Disposable):
    """Ordered collection of owned resources, released last-allocated-first.

    A failure releasing one resource is logged and recorded in :attr:`warnings`,
    the remaining resources are still released.
    """

    def __init__(self, name="resources"):
        self._name = name
        self._resources: list[Disposable] = []
        self._disposed = False
        self.warnings: list[CleanupWarning] = []

    def __len__(self):
        return len(self._resources)

    def __repr__(self):
        return f"ResourceStack({self._name!r}, owned={len(self._resources)}, disposed={self._disposed})"

    @property
    def disposed(self) -> bool:
        return self._disposed

    def push(self, resource):
        """Take ownership of *resource* and return it.

        A resource handed to an already disposed stack is released right away.
        """
        if self._disposed:
            logger.warning(f"{self._name} already disposed, releasing {resource!r} immediately")
            self._release(resource)
            return resource
        self._resources.append(resource)
        return resource

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        while self._resources:
            self._release(self._resources.pop())

    def _release(self, resource) -> None:
        try:
            warning = resource.dispose()
        except Exception as ex:  # noqa: BLE001
            warning = CleanupWarning(resource, ex)
            logger.warning(f"{self._name}: {warning}")
        if isinstance(warning, CleanupWarning):
            self.warnings.append(warning)
