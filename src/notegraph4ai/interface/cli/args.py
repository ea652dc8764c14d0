from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates raw argparse
namespaces into domain-compatible configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from notegraph4ai.utils.i18n import i18n

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the NoteGraph4AI CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="notegraph4ai",
        description=i18n.t("app.description"),
    )

    # --- Source Selection ---
    p.add_argument(
        "-v", "--vault",
        dest="vault_path",
        default=None,
        help=i18n.t("cli.args.vault"),
    )
    p.add_argument(
        "-n", "--note",
        dest="note",
        default=None,
        help=i18n.t("cli.args.note"),
    )
    p.add_argument(
        "--ext",
        dest="extensions",
        default=None,
        help=i18n.t("cli.args.ext"),
    )

    # --- Traversal ---
    p.add_argument(
        "-d", "--depth",
        dest="depth",
        type=int,
        default=None,
        help=i18n.t("cli.args.depth"),
    )

    # --- Prompt Construction ---
    p.add_argument(
        "--template-file",
        dest="template_file",
        default=None,
        help=i18n.t("cli.args.template_file"),
    )
    p.add_argument(
        "--prompt-template",
        dest="prompt_template_path",
        default=None,
        help=i18n.t("cli.args.prompt_template"),
    )
    p.add_argument(
        "--raw",
        action="store_true",
        help=i18n.t("cli.args.raw"),
    )
    p.add_argument(
        "--list-templates",
        action="store_true",
        help=i18n.t("cli.args.list_templates"),
    )

    # --- Output ---
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help=i18n.t("cli.args.output"),
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help=i18n.t("cli.args.json"),
    )

    # --- Metrics ---
    p.add_argument(
        "--model",
        dest="target_model",
        default=None,
        help=i18n.t("cli.args.model"),
    )
    p.add_argument(
        "--no-tokens",
        action="store_true",
        help=i18n.t("cli.args.no_tokens"),
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help=i18n.t("cli.args.defaults"),
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help=i18n.t("cli.args.dump"),
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help=i18n.t("cli.args.save"),
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help=i18n.t("cli.args.log_file"),
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help=i18n.t("cli.args.debug"),
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a domain configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["vault_path"] = args.vault_path
    overrides["note"] = args.note
    overrides["depth"] = args.depth
    overrides["template_file"] = args.template_file
    overrides["output_path"] = args.output_path
    overrides["target_model"] = args.target_model

    if args.extensions:
        overrides["extensions"] = _split_csv(args.extensions)
    if args.raw:
        overrides["raw_output"] = True
    if args.no_tokens:
        overrides["count_tokens"] = False

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
