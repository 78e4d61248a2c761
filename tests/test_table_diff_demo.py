from __future__ import annotations

import importlib.util
import json
from pathlib import Path


def _load_demo_module():
    module_path = Path(__file__).resolve().parents[1] / "examples" / "table-diff-demo" / "demo.py"
    spec = importlib.util.spec_from_file_location("table_diff_demo", module_path)
    if spec is None or spec.loader is None:
        raise RuntimeError("failed to load table diff demo module")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_table_diff_demo_reports_divergent_countries(tmp_path: Path) -> None:
    module = _load_demo_module()
    output = tmp_path / "diff.json"
    assert module.run_demo(output) == 0

    changes = json.loads(output.read_text(encoding="utf-8"))
    assert changes == {
        "Austria": ["NO_SUPPORT", "FULL_SUPPORT"],
        "Germany": ["NO_SUPPORT", "FULL_SUPPORT"],
    }


def test_same_version_has_no_changes() -> None:
    module = _load_demo_module()
    assert module.diff_versions("v2", "v2") == {}
