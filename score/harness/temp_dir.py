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
"""Uniquely named temporary directory removed on disposal."""

import logging
import os
import pathlib
import shutil
import tempfile

import tenacity

import score.harness.config as harness_config
from score.harness.exception import AllocationError, CleanupWarning
from score.harness.resource import Disposable

logger = logging.getLogger(__name__)


class TempDir(Disposable):
    """Temporary directory, allocated when the object is constructed.

    Parameters:
        prefix: Directory name prefix, defaults to ``config.TEMP_DIR_PREFIX``.
        suffix: Directory name suffix.
        parent: Directory to create the temporary directory in, defaults to the
                platform temporary directory.
        retry_count: Removal attempts before a failure is reported.
        retry_delay: Seconds between removal attempts.

    Raises:
        AllocationError: The directory could not be created.
    """

    def __init__(
        self,
        prefix=None,
        suffix=None,
        parent=None,
        retry_count: int = harness_config.CLEANUP_RETRY_COUNT,
        retry_delay: float = harness_config.CLEANUP_RETRY_DELAY_S,
    ):
        prefix = prefix if prefix is not None else harness_config.TEMP_DIR_PREFIX
        try:
            path = tempfile.mkdtemp(prefix=prefix, suffix=suffix, dir=parent)
        except OSError as ex:
            raise AllocationError(f"Could not create temporary directory in [{parent or tempfile.gettempdir()}]") from ex

        self._path = pathlib.Path(os.path.abspath(path))
        self._retry_count = max(1, retry_count)
        self._retry_delay = retry_delay
        self._removed = False
        logger.debug(f"Created temporary directory [{self._path}]")

    def __repr__(self):
        return f"TempDir({str(self._path)!r})"

    def __fspath__(self):
        return str(self._path)

    @property
    def path(self) -> pathlib.Path:
        return self._path

    def cleanup(self):
        """Recursively remove the directory.

        A directory that no longer exists counts as removed. Any other failure is
        logged and returned as a :class:`CleanupWarning` instead of being raised.
        """
        if self._removed:
            return None
        if harness_config.KEEP_TEMP_DIRS:
            logger.warning(f"Keeping temporary directory [{self._path}], HARNESS_KEEP_TEMP_DIRS is set")
            self._removed = True
            return None

        @tenacity.retry(
            retry=tenacity.retry_if_exception_type(OSError),
            wait=tenacity.wait_fixed(self._retry_delay),
            stop=tenacity.stop_after_attempt(self._retry_count),
            reraise=True,
        )
        def _inner():
            try:
                shutil.rmtree(self._path)
            except FileNotFoundError:
                logger.debug(f"Temporary directory [{self._path}] already removed")

        try:
            _inner()
        except OSError as ex:
            warning = CleanupWarning(self, ex)
            logger.warning(f"Failed cleaning up temp dir [{self._path}] - Error: {ex}")
            return warning

        self._removed = True
        return None

    def dispose(self):
        return self.cleanup()
