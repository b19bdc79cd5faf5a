"""Infrastructure: expo-updates code-signing keys and certificates.

This module is the **only** place in the codebase that imports
``cryptography``.  Key generation produces a 2048-bit RSA key pair and
a certificate self-signed by that key, restricted to code signing.
Configuration validates an existing key pair and certificate and
writes their location into the app config.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
from pathlib import Path

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from expokit.core.models import CodeSigningPaths, ConfigModification
from expokit.exceptions import CodeSigningError, ConfigError
from expokit.infra.project_config import get_config, modify_config

logger = logging.getLogger(__name__)

PRIVATE_KEY_FILE: str = "private-key.pem"
PUBLIC_KEY_FILE: str = "public-key.pem"
CERTIFICATE_FILE: str = "certificate.pem"

CODE_SIGNING_METADATA: dict[str, str] = {"keyid": "main", "alg": "rsa-v1_5-sha256"}

_KEY_SIZE: int = 2048
_PROBE_MESSAGE: bytes = b"expokit code signing probe"


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def _add_years(moment: dt.datetime, years: int) -> dt.datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # Feb 29 into a non-leap year.
        return moment.replace(year=moment.year + years, day=28)


def _prepare_empty_dir(directory: Path, label: str) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
        existing = os.listdir(directory)
    except OSError as exc:
        raise CodeSigningError(f"Cannot use {label} directory {directory}: {exc}") from exc
    if existing:
        raise CodeSigningError(
            f"{label} directory must be empty: {directory}",
            hint="Choose a new directory or remove its contents.",
        )


def build_self_signed_certificate(
    private_key: rsa.RSAPrivateKey,
    *,
    common_name: str,
    validity_duration_years: int,
    now: dt.datetime | None = None,
) -> x509.Certificate:
    """Create a code-signing certificate for *private_key*'s public key."""
    not_before = now or dt.datetime.now(dt.timezone.utc)
    not_after = _add_years(not_before, validity_duration_years)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])

    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.CODE_SIGNING]), critical=True)
        .sign(private_key, hashes.SHA256())
    )


def generate_code_signing(
    project_root: Path,
    *,
    certificate_validity_duration_years: int,
    key_output: str,
    certificate_output: str,
    certificate_common_name: str,
) -> CodeSigningPaths:
    """Generate a key pair and self-signed certificate.

    Output directories are resolved against *project_root*, created if
    needed, and must be empty.

    Raises
    ------
    CodeSigningError
        On invalid parameters, non-empty output directories or write
        failures.
    """
    if certificate_validity_duration_years <= 0:
        raise CodeSigningError("Certificate validity duration must be a positive number of years.")
    if not certificate_common_name.strip():
        raise CodeSigningError("Certificate common name must not be empty.")

    key_dir = (project_root / key_output).resolve()
    certificate_dir = (project_root / certificate_output).resolve()
    _prepare_empty_dir(key_dir, "Key output")
    if certificate_dir != key_dir:
        _prepare_empty_dir(certificate_dir, "Certificate output")

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=_KEY_SIZE)
    certificate = build_self_signed_certificate(
        private_key,
        common_name=certificate_common_name,
        validity_duration_years=certificate_validity_duration_years,
    )

    paths = CodeSigningPaths(
        private_key=key_dir / PRIVATE_KEY_FILE,
        public_key=key_dir / PUBLIC_KEY_FILE,
        certificate=certificate_dir / CERTIFICATE_FILE,
    )
    try:
        paths.private_key.write_bytes(
            private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        )
        paths.public_key.write_bytes(
            private_key.public_key().public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        )
        paths.certificate.write_bytes(certificate.public_bytes(serialization.Encoding.PEM))
    except OSError as exc:
        raise CodeSigningError(f"Failed to write code signing files: {exc}") from exc

    logger.debug("Generated code signing files %s", paths)
    return paths


# ---------------------------------------------------------------------------
# Validation and configuration
# ---------------------------------------------------------------------------

def _read_pem(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise CodeSigningError(f"Failed to read {path}: {exc}") from exc


def load_code_signing_files(
    paths: CodeSigningPaths,
) -> tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey, x509.Certificate]:
    """Parse the PEM files at *paths*.

    Raises
    ------
    CodeSigningError
        If a file is missing, unparsable or not an RSA key.
    """
    try:
        private_key = serialization.load_pem_private_key(_read_pem(paths.private_key), password=None)
        public_key = serialization.load_pem_public_key(_read_pem(paths.public_key))
        certificate = x509.load_pem_x509_certificate(_read_pem(paths.certificate))
    except (ValueError, TypeError) as exc:
        raise CodeSigningError(f"Invalid code signing file: {exc}") from exc

    if not isinstance(private_key, rsa.RSAPrivateKey) or not isinstance(public_key, rsa.RSAPublicKey):
        raise CodeSigningError("Code signing keys must be RSA keys.")
    return private_key, public_key, certificate


def validate_code_signing(
    private_key: rsa.RSAPrivateKey,
    public_key: rsa.RSAPublicKey,
    certificate: x509.Certificate,
    *,
    now: dt.datetime | None = None,
) -> None:
    """Check that the key pair and certificate belong together and are usable.

    Raises
    ------
    CodeSigningError
        On mismatched keys, an expired or not-yet-valid certificate, or a
        certificate without the code-signing extended key usage.
    """
    if private_key.public_key().public_numbers() != public_key.public_numbers():
        raise CodeSigningError("Public key does not match private key.")

    certificate_key = certificate.public_key()
    if not isinstance(certificate_key, rsa.RSAPublicKey) or (
        certificate_key.public_numbers() != public_key.public_numbers()
    ):
        raise CodeSigningError("Certificate public key does not match the key pair.")

    signature = private_key.sign(_PROBE_MESSAGE, padding.PKCS1v15(), hashes.SHA256())
    try:
        certificate_key.verify(signature, _PROBE_MESSAGE, padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature as exc:
        raise CodeSigningError("Certificate cannot verify signatures made with the private key.") from exc

    moment = now or dt.datetime.now(dt.timezone.utc)
    if not certificate.not_valid_before_utc <= moment <= certificate.not_valid_after_utc:
        raise CodeSigningError(
            "Certificate is not currently valid.",
            hint="Generate a new certificate with codesigning:generate.",
        )

    try:
        usage = certificate.extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
    except x509.ExtensionNotFound as exc:
        raise CodeSigningError("Certificate has no extended key usage extension.") from exc
    if ExtendedKeyUsageOID.CODE_SIGNING not in usage:
        raise CodeSigningError("Certificate is not valid for code signing.")


def _config_relative(project_root: Path, path: Path) -> str:
    try:
        relative = path.resolve().relative_to(project_root.resolve())
    except ValueError:
        return path.resolve().as_posix()
    return f"./{relative.as_posix()}"


def configure_code_signing(
    project_root: Path,
    *,
    certificate_input: str,
    key_input: str,
) -> ConfigModification:
    """Validate existing code-signing files and reference them in the app config.

    Raises
    ------
    CodeSigningError
        If the files are missing or invalid.
    ConfigError
        If the app config is dynamic and cannot be written.
    """
    key_dir = project_root / key_input
    certificate_dir = project_root / certificate_input
    paths = CodeSigningPaths(
        private_key=key_dir / PRIVATE_KEY_FILE,
        public_key=key_dir / PUBLIC_KEY_FILE,
        certificate=certificate_dir / CERTIFICATE_FILE,
    )
    validate_code_signing(*load_code_signing_files(paths))

    config = get_config(project_root, skip_sdk_version_requirement=True, skip_plugins=True)
    updates = dict(config.exp.get("updates") or {})
    updates["codeSigningCertificate"] = _config_relative(project_root, paths.certificate)
    updates["codeSigningMetadata"] = dict(CODE_SIGNING_METADATA)

    modification = modify_config(project_root, {"updates": updates})
    if not modification.success:
        raise ConfigError(
            modification.message,
            hint=(
                "Add the following to the expo.updates object of your app config:\n"
                f'  "codeSigningCertificate": "{updates["codeSigningCertificate"]}",\n'
                '  "codeSigningMetadata": {"keyid": "main", "alg": "rsa-v1_5-sha256"}'
            ),
        )
    return modification
