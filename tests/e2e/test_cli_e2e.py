from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Invokes the entry point script in a subprocess and validates exit codes,
stream output (stdout/stderr) and file side effects. Token counting is
disabled so that no encoder download is attempted.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "notegraph4ai" / "main.py"


def run_cli(args: List[str], cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    The 'src' directory is injected into PYTHONPATH so the package resolves
    without installation. HOME is inherited from the isolated test env.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


def test_cli_help_exits_cleanly() -> None:
    result = run_cli(["--help"])

    assert result.returncode == 0
    assert "--depth" in result.stdout


def test_cli_raw_composite_to_stdout(sample_vault: Path) -> None:
    result = run_cli(["-v", str(sample_vault), "-n", "Home", "-d", "1", "--raw", "--no-tokens", "--use-defaults"])

    assert result.returncode == 0, result.stderr
    assert result.stdout.startswith("# Home\n\n")
    assert "# Backlinks to Home" in result.stdout
    assert "# Projects" not in result.stdout
    assert "Composition completed." in result.stderr


def test_cli_json_report(sample_vault: Path) -> None:
    result = run_cli(["-v", str(sample_vault), "-n", "Home", "--json", "--no-tokens", "--use-defaults"])

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["root_path"] == "Home.md"
    assert data["max_depth"] == 1
    assert data["node_count"] == 6
    assert data["diagnostics"] == []


def test_cli_writes_output_file(sample_vault: Path, tmp_path: Path) -> None:
    out = tmp_path / "out" / "prompt.md"

    result = run_cli([
        "-v", str(sample_vault), "-n", "Projects/Beta", "-d", "2",
        "--template-file", "Templates/Meeting", "-o", str(out),
        "--no-tokens", "--use-defaults",
    ])

    assert result.returncode == 0, result.stderr
    assert result.stdout == ""
    text = out.read_text(encoding="utf-8")
    assert 'content from "Beta"' in text
    assert "recursion depth: 2" in text
    assert text.endswith("## Agenda\n## Notes")


def test_cli_lists_templates(sample_vault: Path) -> None:
    result = run_cli(["-v", str(sample_vault), "--list-templates", "--use-defaults"])

    assert result.returncode == 0
    assert result.stdout.splitlines() == ["Templates/Meeting.md"]


def test_cli_dump_config_clamps_depth(sample_vault: Path) -> None:
    result = run_cli(["-v", str(sample_vault), "-d", "9", "--dump-config", "--use-defaults"])

    assert result.returncode == 0
    assert json.loads(result.stdout)["depth"] == 4
    assert "Clamped to 4" in result.stderr


def test_cli_missing_note_is_invalid_input(sample_vault: Path) -> None:
    result = run_cli(["-v", str(sample_vault), "--use-defaults"])
    assert result.returncode == 2


def test_cli_unknown_note_is_invalid_input(sample_vault: Path) -> None:
    result = run_cli(["-v", str(sample_vault), "-n", "Nowhere", "--use-defaults"])

    assert result.returncode == 2
    assert "Nowhere" in result.stderr


def test_cli_missing_vault_is_invalid_input(tmp_path: Path) -> None:
    result = run_cli(["-v", str(tmp_path / "absent"), "-n", "Home", "--use-defaults"])
    assert result.returncode == 2


def test_cli_saved_session_is_reused(sample_vault: Path) -> None:
    first = run_cli(["-v", str(sample_vault), "-n", "Journal", "-d", "0", "--no-tokens", "--save-config"])
    assert first.returncode == 0, first.stderr

    second = run_cli(["--raw"])

    assert second.returncode == 0, second.stderr
    assert second.stdout == "# Journal\n\nToday: [[Home]], [[Missing]] and [site](https://example.com/page.md).\n\n---\n\n"


def test_cli_writes_persistent_log(sample_vault: Path, isolated_user_dir: Path) -> None:
    result = run_cli(["-v", str(sample_vault), "-n", "Home", "--raw", "--no-tokens", "--use-defaults"])

    assert result.returncode == 0, result.stderr
    log_file = isolated_user_dir / ".notegraph4ai" / "logs" / "notegraph4ai.log"
    assert "Composing context for 'Home.md'" in log_file.read_text(encoding="utf-8")
