"""CLI application entry point and command routing for expokit.

This module is the **sole error boundary** for the entire application.
It catches :class:`~expokit.exceptions.ExpokitError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the command
  modules, which call into the core and infrastructure layers.
* Argument validation (types, required flags, ``--help``) is done by
  argparse before any command runs.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from expokit.cli import exit_codes
from expokit.cli.console import configure_logging, console
from expokit.exceptions import ExpokitError, PackageManagerError
from expokit.utils.env import is_debug
from expokit.version import __version__

INSTALL: str = "install"
CODESIGNING_CONFIGURE: str = "codesigning:configure"
CODESIGNING_GENERATE: str = "codesigning:generate"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_project_root_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_root",
        nargs="?",
        default=None,
        type=Path,
        help="Project directory (default: current working directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands:
    * ``expokit install [packages...] [--check] [--fix] [--npm|--yarn] [-- <args>]``
    * ``expokit codesigning:configure``
    * ``expokit codesigning:generate``
    """
    # --debug is accepted before or after the sub-command; SUPPRESS keeps a
    # sub-parser from resetting a value given at the top level.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Enable debug logging (same as EXPO_DEBUG=1).",
    )

    parser = argparse.ArgumentParser(
        prog="expokit",
        description="Expo project helpers: SDK-compatible installs and code signing.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (same as EXPO_DEBUG=1).",
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>")

    install = commands.add_parser(
        INSTALL,
        parents=[common],
        help="Install SDK-compatible versions of packages.",
        description=(
            "Install a package version compatible with the project's Expo SDK. "
            "Arguments after -- are passed to the package manager."
        ),
    )
    install.add_argument("packages", nargs="*", metavar="package", help="Packages to install.")
    install.add_argument(
        "--check",
        action="store_true",
        help="Check which installed packages need to be updated.",
    )
    install.add_argument(
        "--fix",
        action="store_true",
        help="Automatically update any invalid package versions.",
    )
    backend = install.add_mutually_exclusive_group()
    backend.add_argument("--npm", action="store_true", help="Use npm to install dependencies.")
    backend.add_argument("--yarn", action="store_true", help="Use yarn to install dependencies.")

    configure = commands.add_parser(
        CODESIGNING_CONFIGURE,
        parents=[common],
        help="Configure and validate expo-updates code signing for this project.",
        description="Configure and validate expo-updates code signing for this project.",
    )
    configure.add_argument(
        "--certificate-input-directory",
        required=True,
        metavar="<string>",
        help="Directory containing code signing certificate.",
    )
    configure.add_argument(
        "--key-input-directory",
        required=True,
        metavar="<string>",
        help="Directory containing private and public keys.",
    )
    _add_project_root_argument(configure)

    generate = commands.add_parser(
        CODESIGNING_GENERATE,
        parents=[common],
        help="Generate expo-updates keys and a self-signed code signing certificate.",
        description=(
            "Generate expo-updates private key, public key, and code signing "
            "certificate using that public key (self-signed by the private key)."
        ),
    )
    generate.add_argument(
        "--key-output-directory",
        required=True,
        metavar="<string>",
        help="Directory in which to put the generated private and public keys.",
    )
    generate.add_argument(
        "--certificate-output-directory",
        required=True,
        metavar="<string>",
        help="Directory in which to put the generated certificate.",
    )
    generate.add_argument(
        "--certificate-validity-duration-years",
        required=True,
        type=int,
        metavar="<number>",
        help="Validity duration in years.",
    )
    generate.add_argument(
        "--certificate-common-name",
        required=True,
        metavar="<string>",
        help="Common name attribute for certificate.",
    )
    _add_project_root_argument(generate)

    return parser


def _split_passthrough(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split *argv* at the first ``--`` into own and pass-through arguments."""
    if "--" not in argv:
        return argv, []
    index = argv.index("--")
    return argv[:index], argv[index + 1:]


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_install(args: argparse.Namespace, passthrough: list[str]) -> int:
    from expokit.cli.install import install
    from expokit.core.models import InstallOptions

    options = InstallOptions(check=args.check, fix=args.fix, npm=args.npm, yarn=args.yarn)
    return install(args.packages, options, passthrough)


def _handle_configure(args: argparse.Namespace) -> int:
    from expokit.cli.codesigning import run_configure_code_signing

    return run_configure_code_signing(
        args.project_root or Path.cwd(),
        certificate_input=args.certificate_input_directory,
        key_input=args.key_input_directory,
    )


def _handle_generate(args: argparse.Namespace) -> int:
    from expokit.cli.codesigning import run_generate_code_signing

    return run_generate_code_signing(
        args.project_root or Path.cwd(),
        key_output=args.key_output_directory,
        certificate_output=args.certificate_output_directory,
        certificate_validity_duration_years=args.certificate_validity_duration_years,
        certificate_common_name=args.certificate_common_name,
    )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the expokit CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    own, passthrough = _split_passthrough(list(sys.argv[1:] if argv is None else argv))
    parser = _build_parser()
    args = parser.parse_args(own)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if passthrough and args.command != INSTALL:
        parser.error(f"unrecognized arguments: -- {' '.join(passthrough)}")

    if args.command == INSTALL and not args.packages and not (args.check or args.fix):
        parser.error("install: specify at least one package, or use --check / --fix")

    configure_logging(debug=args.debug or is_debug())

    if args.command == INSTALL:
        return _handle_install(args, passthrough)
    if args.command == CODESIGNING_CONFIGURE:
        return _handle_configure(args)
    return _handle_generate(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except PackageManagerError as exc:
        console.error(str(exc), exc.hint)
        sys.exit(exc.exit_code)
    except ExpokitError as exc:
        console.error(str(exc), exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.GENERAL_ERROR)
