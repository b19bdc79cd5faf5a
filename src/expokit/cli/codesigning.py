"""``expokit codesigning:*`` — expo-updates code-signing commands.

Argument validation happens in :mod:`expokit.cli.app`; these handlers
forward the validated values unchanged and render the outcome.
"""

from __future__ import annotations

from pathlib import Path

from expokit.cli import exit_codes
from expokit.cli.console import console


def run_generate_code_signing(
    project_root: Path,
    *,
    key_output: str,
    certificate_output: str,
    certificate_validity_duration_years: int,
    certificate_common_name: str,
) -> int:
    """Generate a key pair and certificate, then print the next step."""
    from expokit.infra.code_signing import generate_code_signing

    paths = generate_code_signing(
        project_root,
        certificate_validity_duration_years=certificate_validity_duration_years,
        key_output=key_output,
        certificate_output=certificate_output,
        certificate_common_name=certificate_common_name,
    )

    console.print(
        f"Generated public and private keys output in [bold]{paths.private_key.parent}[/bold]. "
        "Remember to add them to .gitignore or to encrypt them (e.g. with git-crypt)."
    )
    console.print(f"Generated code signing certificate output in [bold]{paths.certificate.parent}[/bold]")
    console.print(
        "To automatically configure this project for code signing, run "
        f"[bold]expokit codesigning:configure --certificate-input-directory={certificate_output} "
        f"--key-input-directory={key_output}[/bold]"
    )
    return exit_codes.SUCCESS


def run_configure_code_signing(
    project_root: Path,
    *,
    certificate_input: str,
    key_input: str,
) -> int:
    """Validate existing code-signing files and write them into the app config."""
    from expokit.infra.code_signing import configure_code_signing

    modification = configure_code_signing(
        project_root,
        certificate_input=certificate_input,
        key_input=key_input,
    )
    console.print(
        f"[bold green]Code signing configuration written to {modification.config_path}.[/bold green]"
    )
    return exit_codes.SUCCESS
