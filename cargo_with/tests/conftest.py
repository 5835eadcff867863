from __future__ import annotations

import json

import pytest

TARGET_DIR = "/home/user/project/target/debug"


def make_artifact_line(
    name: str,
    kind: str = "bin",
    *,
    test: bool = False,
    executable: str | None = "default",
    filenames: list[str] | None = None,
    fresh: bool = False,
) -> str:
    """A compiler-artifact message as printed by cargo."""
    if executable == "default":
        if kind in ("lib", "rlib", "proc-macro", "custom-build") and not test:
            executable = None
        elif test:
            executable = f"{TARGET_DIR}/deps/{name}-0123456789abcdef"
        elif kind == "example":
            executable = f"{TARGET_DIR}/examples/{name}"
        else:
            executable = f"{TARGET_DIR}/{name}"
    if filenames is None:
        filenames = [executable] if executable else [f"{TARGET_DIR}/deps/lib{name}.rlib"]
    message = {
        "reason": "compiler-artifact",
        "package_id": "project 0.1.0 (path+file:///home/user/project)",
        "manifest_path": "/home/user/project/Cargo.toml",
        "target": {
            "kind": [kind],
            "crate_types": [kind],
            "name": name,
            "src_path": f"/home/user/project/src/{name}.rs",
            "edition": "2021",
            "doc": True,
            "doctest": False,
            "test": True,
        },
        "profile": {
            "opt_level": "0",
            "debuginfo": 2,
            "debug_assertions": True,
            "overflow_checks": True,
            "test": test,
        },
        "features": [],
        "filenames": filenames,
        "executable": executable,
        "fresh": fresh,
    }
    return json.dumps(message)


def make_finished_line(success: bool = True) -> str:
    return json.dumps({"reason": "build-finished", "success": success})


@pytest.fixture
def artifact_line():
    return make_artifact_line


@pytest.fixture
def finished_line():
    return make_finished_line
