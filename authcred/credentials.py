"""Credentials for confidential client applications."""

from __future__ import annotations

import base64
import binascii
import enum
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

__all__ = [
    "CredentialKind",
    "Credential",
    "cert_from_pem",
    "new_cred_from_secret",
    "new_cred_from_assertion_callback",
    "new_cred_from_cert",
    "new_cred_from_token_provider",
    "auto_detect_region",
]

_PEM_BLOCK = re.compile(
    rb"-----BEGIN ([A-Z0-9 ]+)-----\r?\n(.*?)-----END \1-----", re.DOTALL
)
_KEY_LABELS = ("PRIVATE KEY", "RSA PRIVATE KEY")


class CredentialKind(enum.Enum):
    """How a credential authenticates the application."""

    SECRET = "secret"
    CERTIFICATE = "certificate"
    ASSERTION_CALLBACK = "assertion_callback"
    TOKEN_PROVIDER = "token_provider"


@dataclass(frozen=True)
class Credential:
    """A credential used in confidential client flows."""

    secret: str = field(default="", repr=False)
    cert: x509.Certificate | None = None
    key: Any = field(default=None, repr=False)
    x5c: tuple[str, ...] = ()
    assertion_callback: Callable[..., str] | None = None
    token_provider: Callable[..., Any] | None = None

    def kind(self) -> CredentialKind:
        """Return what the credential holds, or raise ValueError if it is incomplete."""
        if self.secret:
            return CredentialKind.SECRET
        if self.cert is not None:
            if self.key is None:
                raise ValueError("missing private key for certificate")
            return CredentialKind.CERTIFICATE
        if self.key is not None:
            raise ValueError("missing certificate for private key")
        if self.assertion_callback is not None:
            return CredentialKind.ASSERTION_CALLBACK
        if self.token_provider is not None:
            return CredentialKind.TOKEN_PROVIDER
        raise ValueError("invalid credential")


def _split_block(body: bytes) -> tuple[dict[str, str], bytes] | None:
    lines = body.splitlines()
    headers: dict[str, str] = {}
    if lines and b":" in lines[0]:
        while lines and lines[0].strip():
            name, _, value = lines.pop(0).partition(b":")
            headers[name.strip().decode("ascii", "replace")] = value.strip().decode(
                "ascii", "replace"
            )
        lines = lines[1:]
    try:
        der = base64.b64decode(b"".join(line.strip() for line in lines), validate=True)
    except (binascii.Error, ValueError):
        return None
    return headers, der


def _load_key(label: str, der: bytes) -> Any:
    try:
        key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ValueError(f"could not decode private key: {exc}") from exc
    if label == "RSA PRIVATE KEY" and not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError("could not decode private key: not an RSA key")
    return key


def _decrypt_key(block: bytes, password: str) -> Any:
    try:
        return serialization.load_pem_private_key(
            block, password=password.encode() if password else None
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ValueError(f"could not decrypt encrypted PEM block: {exc}") from exc


def cert_from_pem(
    pem_data: bytes | str, password: str = ""
) -> tuple[list[x509.Certificate], Any]:
    """Read certificates and one private key from PEM data.

    Encrypted key blocks are decrypted with ``password``. Blocks of other
    types are ignored. Raises ValueError when the data is unusable.
    """
    if isinstance(pem_data, str):
        pem_data = pem_data.encode()
    certs: list[x509.Certificate] = []
    priv = None
    for match in _PEM_BLOCK.finditer(pem_data):
        label = match.group(1).decode("ascii")
        split = _split_block(match.group(2))
        if split is None:
            continue
        headers, der = split

        if "ENCRYPTED" in headers.get("Proc-Type", ""):
            if label not in _KEY_LABELS:
                raise ValueError("encounter encrypted PEM block that did not decode")
            key = _decrypt_key(match.group(0), password)
            if priv is not None:
                raise ValueError("found multiple private key blocks")
            priv = key
            continue

        if label == "CERTIFICATE":
            try:
                certs.append(x509.load_der_x509_certificate(der))
            except ValueError as exc:
                raise ValueError(
                    f"block labelled 'CERTIFICATE' could not be parsed by x509: {exc}"
                ) from exc
        elif label in _KEY_LABELS:
            if priv is not None:
                raise ValueError("found multiple private key blocks")
            priv = _load_key(label, der)

    if not certs:
        raise ValueError("no certificates found")
    if priv is None:
        raise ValueError("no private key found")
    return certs, priv


def new_cred_from_secret(secret: str) -> Credential:
    """Create a credential from a client secret."""
    if not secret:
        raise ValueError("secret can't be empty string")
    return Credential(secret=secret)


def new_cred_from_assertion_callback(callback: Callable[..., str]) -> Credential:
    """Create a credential that calls ``callback`` to get assertions; it must be thread safe."""
    return Credential(assertion_callback=callback)


def new_cred_from_cert(
    certs: Iterable[x509.Certificate | None], key: Any
) -> Credential:
    """Create a credential from a certificate chain and the RSA key of one of its certificates.

    The certificate whose public key matches ``key`` is placed first in x5c.
    """
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError("key must be an RSA key")
    private_numbers = key.public_key().public_numbers()
    signing_cert = None
    x5c: list[str] = []
    for cert in certs:
        if cert is None:
            continue
        encoded = base64.b64encode(cert.public_bytes(serialization.Encoding.DER)).decode(
            "ascii"
        )
        cert_key = cert.public_key()
        if (
            isinstance(cert_key, rsa.RSAPublicKey)
            and cert_key.public_numbers() == private_numbers
        ):
            signing_cert = cert
            x5c.insert(0, encoded)
        else:
            x5c.append(encoded)
    if signing_cert is None:
        raise ValueError("key doesn't match any certificate")
    return Credential(cert=signing_cert, key=key, x5c=tuple(x5c))


def new_cred_from_token_provider(provider: Callable[..., Any]) -> Credential:
    """Create a credential whose ``provider`` supplies access tokens; it must be thread safe."""
    return Credential(token_provider=provider)


def auto_detect_region() -> str:
    """Return the marker that asks for the Azure region to be detected automatically."""
    return "TryAutoDetect"