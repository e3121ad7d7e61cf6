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
import os
import sys


# Program spawned by command builders unless overridden
SUBJECT_EXECUTABLE = os.getenv(
    "HARNESS_SUBJECT_EXECUTABLE", default="deno.exe" if sys.platform == "win32" else "deno"
)

# Prefix of every temporary directory allocated by the harness
TEMP_DIR_PREFIX = os.getenv("HARNESS_TEMP_DIR_PREFIX", default="harness-")

# Removal of a temporary directory is retried COUNT times, waiting DELAY_S between attempts,
# a process killed during disposal may still hold files open for a short while
CLEANUP_RETRY_COUNT = 3
CLEANUP_RETRY_DELAY_S = 0.2

# Default duration in seconds for a scenario step to finish
TIMEOUT_S = 60

# Keep temporary directories after the test for post-test analysis
KEEP_TEMP_DIRS = "HARNESS_KEEP_TEMP_DIRS" in os.environ
