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
"""Scenario catalog: named sequences of command-line invocations.

A catalog file is JSON, either a single scenario::

    {"tempDir": true, "args": "run main.ts", "output": "main.out"}

or a set of named scenarios, each with one or more steps::

    {
      "tests": {
        "basic": {"envs": {"NO_COLOR": "1"}, "steps": [{"args": ["--version"], "output": "[WILDCARD]"}]}
      }
    }

The harness only runs the steps and hands back their captured output,
comparing it with :class:`ExpectedOutput` is up to the caller.
"""

import json
import logging
import pathlib
import shlex
from dataclasses import dataclass, field
from typing import Optional

import score.harness.config as harness_config
from score.harness.context import ExecutionContextBuilder
from score.harness.exception import CatalogError
from score.harness.process import CommandOutput

logger = logging.getLogger(__name__)

WILDCARD = "[WILDCARD]"
FIXTURE_SUFFIX = ".out"


@dataclass(frozen=True)
class ExpectedOutput:
    """Expected output of a step: literal text, a fixture file or the wildcard."""

    text: Optional[str] = None
    fixture: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> "ExpectedOutput":
        if value == WILDCARD:
            return cls()
        if value.endswith(FIXTURE_SUFFIX):
            return cls(fixture=value)
        return cls(text=value)

    @property
    def is_wildcard(self) -> bool:
        return self.text is None and self.fixture is None

    def load(self, base_dir) -> Optional[str]:
        """Return the expected text, reading the fixture relative to *base_dir*, ``None`` for the wildcard."""
        if self.fixture is not None:
            return (pathlib.Path(base_dir) / self.fixture).read_text(encoding="utf-8")
        return self.text


@dataclass(frozen=True)
class Step:
    args: tuple
    output: ExpectedOutput = field(default_factory=ExpectedOutput)
    cwd: Optional[str] = None
    envs: dict = field(default_factory=dict)
    exit_code: int = 0


@dataclass(frozen=True)
class Scenario:
    name: str
    steps: tuple
    envs: dict = field(default_factory=dict)
    temp_dir: bool = False
    base_dir: pathlib.Path = field(default_factory=pathlib.Path)


@dataclass(frozen=True)
class StepResult:
    step: Step
    output: CommandOutput


def _parse_args(value, where):
    if isinstance(value, str):
        return tuple(shlex.split(value))
    if isinstance(value, list) and all(isinstance(arg, str) for arg in value):
        return tuple(value)
    raise CatalogError(f"{where}: 'args' must be a string or a list of strings, got {value!r}")


def _parse_envs(value, where):
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise CatalogError(f"{where}: 'envs' must map names to strings, got {value!r}")
    return dict(value)


def _parse_step(raw, where) -> Step:
    if not isinstance(raw, dict):
        raise CatalogError(f"{where}: step must be an object, got {raw!r}")
    if "args" not in raw:
        raise CatalogError(f"{where}: step is missing 'args'")
    output = raw.get("output", WILDCARD)
    if not isinstance(output, str):
        raise CatalogError(f"{where}: 'output' must be a string, got {output!r}")
    exit_code = raw.get("exitCode", 0)
    if not isinstance(exit_code, int):
        raise CatalogError(f"{where}: 'exitCode' must be an integer, got {exit_code!r}")
    return Step(
        args=_parse_args(raw["args"], where),
        output=ExpectedOutput.parse(output),
        cwd=raw.get("cwd"),
        envs=_parse_envs(raw.get("envs"), where),
        exit_code=exit_code,
    )


def _parse_scenario(name, raw, base_dir) -> Scenario:
    if not isinstance(raw, dict):
        raise CatalogError(f"{name}: scenario must be an object, got {raw!r}")
    if "steps" in raw:
        if not isinstance(raw["steps"], list):
            raise CatalogError(f"{name}: 'steps' must be a list")
        steps = tuple(_parse_step(step, f"{name}[{i}]") for i, step in enumerate(raw["steps"]))
    else:
        steps = (_parse_step(raw, name),)
    return Scenario(
        name=name,
        steps=steps,
        envs=_parse_envs(raw.get("envs"), name),
        temp_dir=bool(raw.get("tempDir", False)),
        base_dir=base_dir,
    )


def load_catalog(path) -> list:
    """Load the scenarios described by the JSON catalog at *path*.

    :raise: CatalogError if the file cannot be read, is not valid JSON or an entry is malformed
    """
    path = pathlib.Path(path)
    logger.info(f"Loading scenario catalog from {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as ex:
        raise CatalogError(f"{path}: could not read catalog") from ex
    except (json.JSONDecodeError, UnicodeDecodeError) as ex:
        raise CatalogError(f"{path}: invalid JSON") from ex

    base_dir = path.parent.absolute()
    if isinstance(raw, dict) and "tests" in raw:
        if not isinstance(raw["tests"], dict):
            raise CatalogError(f"{path}: 'tests' must be an object")
        return [_parse_scenario(name, entry, base_dir) for name, entry in raw["tests"].items()]
    return [_parse_scenario(path.parent.name, raw, base_dir)]


def run_scenario(scenario: Scenario, program=None, timeout=harness_config.TIMEOUT_S) -> list:
    """Run every step of *scenario* inside one execution context.

    :return: list of :class:`StepResult` in step order
    :raise: AllocationError, SpawnError or HarnessRuntimeError (on timeout); the
            context is disposed in every case
    """
    builder = ExecutionContextBuilder(program=program)
    for key, value in scenario.envs.items():
        builder.set_env(key, value)
    if scenario.temp_dir:
        builder.use_temp_cwd()

    results = []
    with builder.build() as context:
        logger.info(f"Running scenario [{scenario.name}] in [{context.cwd}]")
        for step in scenario.steps:
            command = context.new_command().set_args(*step.args)
            for key, value in step.envs.items():
                command.set_env(key, value)
            if step.cwd is not None:
                command.set_cwd(context.cwd / step.cwd)
            output = command.spawn().wait(timeout)
            results.append(StepResult(step=step, output=output))
    return results
