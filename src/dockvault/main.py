#!/usr/bin/env python3

"""Main dockvault module, containing the main CLI entry point."""

import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import List, Optional

from dockvault.config import load_settings
from dockvault.data_structures import ScopePolicy
from dockvault.dockvault import DockVault
from dockvault.errors import DockVaultError
from dockvault.logger import add_file_handler, logger, set_log_level


def parse_args(argv: Optional[List[str]] = None) -> Namespace:
    """Parses CLI parameters.

    Args:
        argv (Optional[List[str]]): Arguments to parse. Defaults to sys.argv[1:].

    Returns:
        Namespace: Parsed arguments.
    """
    parser = ArgumentParser(prog="dockvault")

    parser.add_argument("-c", "--config", help="Path to a settings file (.yaml).")
    parser.add_argument("-r", "--root", help="Backup root directory.")
    parser.add_argument("--helper-image", help="Image used to create and extract volume archives.")
    parser.add_argument("--log-level", help="Logging level, e.g. DEBUG or INFO.")
    parser.add_argument("--log-file", help="Additionally write log messages to this file.")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for command in ("backup", "restore"):
        subparser = subparsers.add_parser(command, help=f"{command.capitalize()} containers.")
        subparser.add_argument("containers", nargs="*", help="Containers to process. Defaults to all containers.")

        scope = subparser.add_mutually_exclusive_group()
        scope.add_argument(
            "--only-containers", action="store_true", help="Only process container configurations, skip volumes."
        )
        scope.add_argument("--only-volumes", action="store_true", help="Only process volumes.")

    args = parser.parse_args(argv)

    for path_arg in ("config", "root", "log_file"):
        if getattr(args, path_arg):
            setattr(args, path_arg, Path(getattr(args, path_arg)))

    return args


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = parse_args(argv)

    try:
        settings = load_settings(
            args.config,
            root=args.root,
            helper_image=args.helper_image,
            log_level=args.log_level,
            log_file=args.log_file,
        )
    except RuntimeError as error:
        logger.error(f"Exited with an error: {error}.")
        sys.exit(1)

    set_log_level(settings.log_level)
    if settings.log_file is not None:
        add_file_handler(settings.log_file)

    scope = ScopePolicy(restrict_to_config=args.only_containers, restrict_to_volumes=args.only_volumes)
    containers = args.containers or None

    try:
        vault = DockVault(settings)
        if args.command == "backup":
            stats = vault.backup(containers, scope)
        else:
            stats = vault.restore(containers, scope)
    except DockVaultError as error:
        logger.error(f"Exited with an error: {error}.")
        sys.exit(1)

    if stats["error"] > 0:
        logger.error(f"Exited with an error: {stats['error']} container(s) failed.")
        sys.exit(1)

    logger.info("Exited with success.")
    sys.exit(0)
