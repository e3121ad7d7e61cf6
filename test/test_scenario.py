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
import json
import os
import sys

import pytest

from score.harness import CatalogError, SpawnError
from score.harness.scenario import ExpectedOutput, load_catalog, run_scenario


def write_catalog(directory, content):
    path = directory / "__test__.json"
    path.write_text(json.dumps(content))
    return path


# ---------------------------------------------------------------------------
# Expected output descriptors
# ---------------------------------------------------------------------------


def test_expected_output_kinds(tmp_path):
    (tmp_path / "main.out").write_text("from fixture\n")

    wildcard = ExpectedOutput.parse("[WILDCARD]")
    fixture = ExpectedOutput.parse("main.out")
    literal = ExpectedOutput.parse("hello\n")

    assert wildcard.is_wildcard
    assert wildcard.load(tmp_path) is None
    assert fixture.fixture == "main.out"
    assert fixture.load(tmp_path) == "from fixture\n"
    assert not literal.is_wildcard
    assert literal.load(tmp_path) == "hello\n"


# ---------------------------------------------------------------------------
# Catalog loading
# ---------------------------------------------------------------------------


def test_load_single_scenario(tmp_path):
    path = write_catalog(tmp_path, {"tempDir": True, "args": "run --quiet main.ts", "output": "main.out"})

    (scenario,) = load_catalog(path)

    assert scenario.name == tmp_path.name
    assert scenario.temp_dir
    assert scenario.base_dir == tmp_path
    assert len(scenario.steps) == 1
    assert scenario.steps[0].args == ("run", "--quiet", "main.ts")
    assert scenario.steps[0].output.fixture == "main.out"
    assert scenario.steps[0].exit_code == 0


def test_load_named_scenarios_with_steps(tmp_path):
    path = write_catalog(
        tmp_path,
        {
            "tests": {
                "first": {
                    "envs": {"NO_COLOR": "1"},
                    "steps": [
                        {"args": ["--version"]},
                        {"args": "eval 'exit 2'", "output": "", "exitCode": 2, "cwd": "sub", "envs": {"A": "b"}},
                    ],
                },
                "second": {"args": "--help", "output": "[WILDCARD]"},
            }
        },
    )

    first, second = load_catalog(path)

    assert first.name == "first"
    assert first.envs == {"NO_COLOR": "1"}
    assert not first.temp_dir
    assert first.steps[0].output.is_wildcard
    assert first.steps[1].args == ("eval", "exit 2")
    assert first.steps[1].exit_code == 2
    assert first.steps[1].cwd == "sub"
    assert first.steps[1].envs == {"A": "b"}
    assert first.steps[1].output.text == ""
    assert second.name == "second"
    assert second.steps[0].output.is_wildcard


@pytest.mark.parametrize(
    "content",
    [
        {"output": "missing args"},
        {"args": 42},
        {"args": "ok", "exitCode": "zero"},
        {"args": "ok", "envs": {"A": 1}},
        {"steps": {"args": "not a list"}},
        {"tests": ["not", "an", "object"]},
        {"tests": {"bad": "not an object"}},
    ],
)
def test_malformed_catalog_raises(tmp_path, content):
    with pytest.raises(CatalogError):
        load_catalog(write_catalog(tmp_path, content))


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "__test__.json"
    path.write_text("{ not json")
    with pytest.raises(CatalogError, match="invalid JSON"):
        load_catalog(path)


# ---------------------------------------------------------------------------
# Running scenarios
# ---------------------------------------------------------------------------


@pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell utilities")
def test_run_scenario_hands_back_captured_output(tmp_path):
    path = write_catalog(
        tmp_path,
        {
            "tempDir": True,
            "envs": {"GREETING": "hello"},
            "steps": [
                {"args": ["-c", 'mkdir sub && printf "%s\\n" "$GREETING"']},
                {"args": ["-c", 'pwd -P; printf "%s\\n" "$GREETING"'], "cwd": "sub", "envs": {"GREETING": "hi"}},
                {"args": ["-c", "echo oops >&2; exit 4"], "exitCode": 4},
            ],
        },
    )
    (scenario,) = load_catalog(path)
    scenario.envs["PATH"] = os.environ.get("PATH", os.defpath)

    results = run_scenario(scenario, program="sh", timeout=10)

    assert [r.step for r in results] == list(scenario.steps)
    assert results[0].output.stdout == "hello\n"
    cwd, greeting = results[1].output.stdout.splitlines()
    assert os.path.basename(cwd) == "sub"
    assert greeting == "hi"
    assert results[2].output.exit_code == 4
    assert results[2].output.stderr == "oops\n"
    assert not os.path.exists(os.path.dirname(cwd))


def test_run_scenario_with_missing_program(tmp_path):
    (scenario,) = load_catalog(write_catalog(tmp_path, {"tempDir": True, "args": "--version"}))
    with pytest.raises(SpawnError):
        run_scenario(scenario, program="harness-no-such-program")


def test_missing_catalog_raises(tmp_path):
    with pytest.raises(CatalogError, match="could not read catalog"):
        load_catalog(tmp_path / "missing.json")


def test_undecodable_catalog_raises(tmp_path):
    path = tmp_path / "__test__.json"
    path.write_bytes(b"\xff\xfe{}")
    with pytest.raises(CatalogError, match="invalid JSON"):
        load_catalog(path)
