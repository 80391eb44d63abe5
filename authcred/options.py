"""Optional settings for confidential clients and their token requests."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .cache import ExportReplace
from .credentials import Credential

__all__ = [
    "ClientOptions",
    "CallOption",
    "AuthCodeURLOptions",
    "AcquireSilentOptions",
    "AcquireByAuthCodeOptions",
    "AcquireByCredentialOptions",
    "AcquireOnBehalfOfOptions",
    "apply_options",
    "with_cache",
    "with_client_capabilities",
    "with_http_client",
    "with_x5c",
    "with_instance_discovery",
    "with_azure_region",
    "client_options",
    "with_login_hint",
    "with_domain_hint",
    "with_claims",
    "with_authentication_scheme",
    "with_tenant_id",
    "with_silent_account",
    "with_challenge",
    "silent_options",
]


@dataclass
class ClientOptions:
    """Settings used when a confidential client is created."""

    authority: str = ""
    accessor: ExportReplace | None = None
    azure_region: str = ""
    capabilities: tuple[str, ...] = ()
    disable_instance_discovery: bool = False
    send_x5c: bool = False
    http_client: Any = None


@dataclass
class AuthCodeURLOptions:
    """Optional settings for building an authorization code URL."""

    claims: str = ""
    login_hint: str = ""
    tenant_id: str = ""
    domain_hint: str = ""


@dataclass
class AcquireSilentOptions:
    """Optional settings for acquiring a token from the cache."""

    account: Any = None
    claims: str = ""
    tenant_id: str = ""
    authn_scheme: Any = None

    @property
    def is_app_cache(self) -> bool:
        """True when no account is given, so the application token cache is searched."""
        return not self.account


@dataclass
class AcquireByAuthCodeOptions:
    """Optional settings for the authorization code flow."""

    challenge: str = ""
    claims: str = ""
    tenant_id: str = ""


@dataclass
class AcquireByCredentialOptions:
    """Optional settings for the client credentials grant."""

    claims: str = ""
    tenant_id: str = ""
    authn_scheme: Any = None


@dataclass
class AcquireOnBehalfOfOptions:
    """Optional settings for the on-behalf-of flow."""

    claims: str = ""
    tenant_id: str = ""


_TOKEN_REQUESTS = (
    AcquireByAuthCodeOptions,
    AcquireByCredentialOptions,
    AcquireOnBehalfOfOptions,
    AcquireSilentOptions,
    AuthCodeURLOptions,
)


@dataclass(frozen=True)
class CallOption:
    """Sets one field on the option sets it is valid for."""

    name: str
    value: Any
    targets: tuple[type, ...] = field(repr=False)

    def apply(self, target: Any) -> None:
        """Set the field on ``target``; raise TypeError if this option does not apply to it."""
        if not isinstance(target, self.targets):
            raise TypeError(f"unexpected options type {type(target).__name__}")
        setattr(target, self.name, self.value)


def apply_options(target: Any, opts: Iterable[CallOption]) -> Any:
    """Apply ``opts`` to ``target`` in order and return it."""
    for opt in opts:
        if not isinstance(opt, CallOption):
            raise TypeError(f"unexpected option {opt!r}")
        opt.apply(target)
    return target


def with_cache(accessor: ExportReplace) -> CallOption:
    """Read and write authentication data through an externally managed cache."""
    return CallOption("accessor", accessor, (ClientOptions,))


def with_client_capabilities(capabilities: Iterable[str]) -> CallOption:
    """Declare client capabilities such as "CP1"."""
    return CallOption("capabilities", tuple(capabilities), (ClientOptions,))


def with_http_client(http_client: Any) -> CallOption:
    """Use a custom HTTP client."""
    return CallOption("http_client", http_client, (ClientOptions,))


def with_x5c() -> CallOption:
    """Send the x5c claim to enable Subject Name Issuer authentication."""
    return CallOption("send_x5c", True, (ClientOptions,))


def with_instance_discovery(enabled: bool) -> CallOption:
    """Enable or disable authority validation; disable it for private clouds."""
    return CallOption("disable_instance_discovery", not enabled, (ClientOptions,))


def with_azure_region(val: str) -> CallOption:
    """Use the regional token service of ``val``, or auto-detect with auto_detect_region()."""
    return CallOption("azure_region", val, (ClientOptions,))


def client_options(authority: str, credential: Credential, *args: CallOption) -> ClientOptions:
    """Validate ``credential`` and build client settings from ``args``.

    A token provider credential handles authentication itself, so instance
    discovery is disabled for it unless an option turns it back on.
    """
    credential.kind()
    opts = ClientOptions(
        authority=authority,
        disable_instance_discovery=credential.token_provider is not None,
    )
    return apply_options(opts, args)


def with_login_hint(username: str) -> CallOption:
    """Pre-populate the login prompt with a username."""
    return CallOption("login_hint", username, (AuthCodeURLOptions,))


def with_domain_hint(domain: str) -> CallOption:
    """Add the identity provider domain as the domain_hint query parameter."""
    return CallOption("domain_hint", domain, (AuthCodeURLOptions,))


def with_claims(claims: str) -> CallOption:
    """Request additional, already decoded claims for the token."""
    return CallOption("claims", claims, _TOKEN_REQUESTS)


def with_authentication_scheme(authn_scheme: Any) -> CallOption:
    """Use a custom authentication scheme for proof-of-possession tokens."""
    return CallOption(
        "authn_scheme", authn_scheme, (AcquireSilentOptions, AcquireByCredentialOptions)
    )


def with_tenant_id(tenant_id: str) -> CallOption:
    """Use a tenant for a single request, which may differ from the client's."""
    return CallOption("tenant_id", tenant_id, _TOKEN_REQUESTS)


def with_silent_account(account: Any) -> CallOption:
    """Search the cache for tokens of ``account``."""
    return CallOption("account", account, (AcquireSilentOptions,))


def with_challenge(challenge: str) -> CallOption:
    """Provide a PKCE challenge for the authorization code flow."""
    return CallOption("challenge", challenge, (AcquireByAuthCodeOptions,))


def silent_options(*args: CallOption) -> AcquireSilentOptions:
    """Build the settings of a silent request; claims cannot be served from the cache."""
    opts = apply_options(AcquireSilentOptions(), args)
    if opts.claims:
        raise ValueError("call another AcquireToken method to request a new token having these claims")
    return opts