from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, persistent storage and CLI overrides), vault loading,
composition and output delivery.
"""

import asyncio
import json
import os
import sys
from typing import Any, Dict, List, Optional

from notegraph4ai.core.pipeline.validator import validate_config
from notegraph4ai.core.services.composer import run_composition
from notegraph4ai.core.services.templates import find_template_documents
from notegraph4ai.domain.composition_models import CompositionResult
from notegraph4ai.domain.config import get_default_config, load_app_state, load_config, save_config
from notegraph4ai.infra.fs import normalize_path, read_text_file, write_text_file
from notegraph4ai.infra.logging import LoggingConfig, configure_logging, get_default_log_path, get_logger
from notegraph4ai.infra.vault import FilesystemVault
from notegraph4ai.interface.cli import args as cli_args
from notegraph4ai.utils.i18n import i18n

logger = get_logger(__name__)

MERGE_KEYS = [
    "vault_path", "note", "extensions", "depth",
    "prompt_template", "template_file", "raw_output",
    "output_path", "target_model", "count_tokens",
]

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 2 invalid input, 130 interrupted).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (stderr, plus the rotating file when enabled)
    app_settings = load_app_state().get("app_settings", {})
    configure_logging(LoggingConfig.from_settings(
        app_settings,
        debug=args.debug,
        log_file=args.log_file,
        default_log_file=get_default_log_path(),
    ))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (Default vs Persistent state)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 4. Map and merge command-line overrides
    overrides = cli_args.args_to_overrides(args)
    if args.prompt_template_path:
        try:
            overrides["prompt_template"] = read_text_file(args.prompt_template_path)
        except OSError as e:
            return _fail(i18n.t("cli.errors.prompt_template", path=args.prompt_template_path, error=e), 2)

    raw_conf = _merge_config(base_conf, overrides)

    # 5. Schema validation and normalization
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 6. Vault resolution
    vault_path = normalize_path(clean_conf["vault_path"], os.getcwd())
    if not os.path.isdir(vault_path):
        return _fail(i18n.t("cli.errors.vault_not_found", path=vault_path), 2)

    vault = FilesystemVault(vault_path, clean_conf["extensions"])

    if args.list_templates:
        documents = asyncio.run(vault.list_documents())
        for doc in find_template_documents(documents):
            print(doc.path)
        return 0

    note = clean_conf["note"]
    if not note:
        return _fail(i18n.t("cli.errors.note_missing"), 2)

    root = vault.get_document(note)
    if root is None:
        return _fail(i18n.t("cli.errors.note_not_found", note=note, path=vault_path), 2)

    template_document = None
    if clean_conf["template_file"]:
        template_document = vault.get_document(clean_conf["template_file"])
        if template_document is None:
            return _fail(i18n.t("cli.errors.template_not_found", note=clean_conf["template_file"]), 2)

    # 7. Composition phase
    logger.info(f"Composing context for '{root.path}' in {vault_path}")
    try:
        result = run_composition(
            root,
            clean_conf["depth"],
            vault,
            vault,
            template=clean_conf["prompt_template"],
            template_document=template_document,
            target_model=clean_conf["target_model"],
            measure_tokens=clean_conf["count_tokens"],
        )
    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return 130
    except Exception as e:
        msg = i18n.t("cli.errors.composition_fail", error=str(e))
        logger.critical(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 1

    if args.save_config:
        save_config(clean_conf)

    # 8. Output delivery phase
    if args.json_output:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0 if result.ok else 1

    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 1

    text = result.composite if clean_conf["raw_output"] else result.prompt
    output_path = clean_conf["output_path"]
    if output_path:
        try:
            write_text_file(output_path, text)
        except OSError as e:
            return _fail(i18n.t("cli.errors.write_fail", path=output_path, error=e), 1)
    else:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")

    _print_human_summary(result, output_path)
    return 0

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of known, non-None override values into the base config.
    """
    out = dict(base)
    for k in MERGE_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: CompositionResult, output_path: str) -> None:
    """
    Print a short report on stderr so stdout carries only the prompt.
    """
    out = sys.stderr
    print(i18n.t("cli.status.success"), file=out)
    if output_path:
        print(i18n.t("cli.status.output_file", path=output_path), file=out)

    print(i18n.t("cli.status.nodes", count=result.node_count, depth=result.max_depth), file=out)

    if result.token_count > 0:
        print(i18n.t("cli.status.tokens", count=f"{result.token_count:,}", model=result.target_model), file=out)
        print(i18n.t("cli.status.cost", cost=f"{result.estimated_cost:.4f}"), file=out)

    if result.diagnostics:
        print(i18n.t("cli.status.diagnostics", count=len(result.diagnostics)), file=out)
        for d in result.diagnostics:
            print(f"  - {d.describe()}", file=out)


def _fail(msg: str, code: int) -> int:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)
    return code

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
