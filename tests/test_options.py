import pytest

from authcred.cache import ExportReplace
from authcred.credentials import (
    Credential,
    new_cred_from_secret,
    new_cred_from_token_provider,
)
from authcred.options import (
    AcquireByAuthCodeOptions,
    AcquireByCredentialOptions,
    AcquireOnBehalfOfOptions,
    AcquireSilentOptions,
    AuthCodeURLOptions,
    CallOption,
    ClientOptions,
    apply_options,
    client_options,
    silent_options,
    with_authentication_scheme,
    with_azure_region,
    with_cache,
    with_challenge,
    with_claims,
    with_client_capabilities,
    with_domain_hint,
    with_http_client,
    with_instance_discovery,
    with_login_hint,
    with_silent_account,
    with_tenant_id,
    with_x5c,
)

AUTHORITY = "https://login.microsoftonline.com/your_tenant"


class _MemoryAccessor(ExportReplace):
    def replace(self, cache, hints):
        cache.unmarshal(b"")

    def export(self, cache, hints):
        cache.marshal()


def test_client_options_defaults_for_secret():
    opts = client_options(AUTHORITY, new_cred_from_secret("secret"))
    assert opts == ClientOptions(authority=AUTHORITY)
    assert opts.disable_instance_discovery is False


def test_client_options_token_provider_disables_discovery():
    cred = new_cred_from_token_provider(lambda params: None)
    assert client_options(AUTHORITY, cred).disable_instance_discovery is True
    reenabled = client_options(AUTHORITY, cred, with_instance_discovery(True))
    assert reenabled.disable_instance_discovery is False


def test_client_options_applies_all():
    accessor = _MemoryAccessor()
    http = object()
    caps = ["CP1"]
    opts = client_options(
        AUTHORITY,
        new_cred_from_secret("secret"),
        with_cache(accessor),
        with_client_capabilities(caps),
        with_http_client(http),
        with_x5c(),
        with_instance_discovery(False),
        with_azure_region("centralus"),
    )
    assert opts.accessor is accessor
    assert opts.capabilities == ("CP1",)
    assert opts.http_client is http
    assert opts.send_x5c is True
    assert opts.disable_instance_discovery is True
    assert opts.azure_region == "centralus"


def test_capabilities_are_copied():
    caps = ["CP1"]
    opts = client_options(AUTHORITY, new_cred_from_secret("secret"), with_client_capabilities(caps))
    caps.append("other")
    assert opts.capabilities == ("CP1",)


def test_client_options_rejects_invalid_credential():
    with pytest.raises(ValueError, match="invalid credential"):
        client_options(AUTHORITY, Credential())


def test_client_option_not_valid_for_request():
    with pytest.raises(TypeError, match="unexpected options type"):
        apply_options(AuthCodeURLOptions(), [with_x5c()])


def test_auth_code_url_options():
    opts = apply_options(
        AuthCodeURLOptions(),
        [
            with_claims("claims"),
            with_login_hint("user@example.com"),
            with_domain_hint("example.com"),
            with_tenant_id("tenant"),
        ],
    )
    assert opts == AuthCodeURLOptions(
        claims="claims",
        login_hint="user@example.com",
        tenant_id="tenant",
        domain_hint="example.com",
    )


@pytest.mark.parametrize(
    "target",
    [
        AcquireByAuthCodeOptions,
        AcquireByCredentialOptions,
        AcquireOnBehalfOfOptions,
        AcquireSilentOptions,
        AuthCodeURLOptions,
    ],
)
def test_claims_and_tenant_valid_everywhere(target):
    opts = apply_options(target(), [with_claims("c"), with_tenant_id("t")])
    assert (opts.claims, opts.tenant_id) == ("c", "t")


@pytest.mark.parametrize(
    "option",
    [with_login_hint("user@example.com"), with_domain_hint("example.com"), with_challenge("x")],
)
def test_options_rejected_for_silent(option):
    with pytest.raises(TypeError):
        option.apply(AcquireSilentOptions())


def test_authentication_scheme_targets():
    scheme = object()
    silent = apply_options(AcquireSilentOptions(), [with_authentication_scheme(scheme)])
    cred = apply_options(AcquireByCredentialOptions(), [with_authentication_scheme(scheme)])
    assert silent.authn_scheme is scheme
    assert cred.authn_scheme is scheme
    with pytest.raises(TypeError):
        with_authentication_scheme(scheme).apply(AcquireOnBehalfOfOptions())


def test_challenge_for_auth_code():
    opts = apply_options(AcquireByAuthCodeOptions(), [with_challenge("challenge")])
    assert opts.challenge == "challenge"


def test_later_option_wins():
    opts = apply_options(AcquireOnBehalfOfOptions(), [with_tenant_id("a"), with_tenant_id("b")])
    assert opts.tenant_id == "b"


def test_apply_options_rejects_non_option():
    with pytest.raises(TypeError):
        apply_options(AcquireSilentOptions(), [lambda o: None])


def test_silent_options_app_cache_without_account():
    opts = silent_options(with_tenant_id("tenant"))
    assert opts.is_app_cache is True
    assert opts.tenant_id == "tenant"


def test_silent_options_with_account():
    account = {"home_account_id": "uid.utid"}
    opts = silent_options(with_silent_account(account))
    assert opts.account is account
    assert opts.is_app_cache is False


def test_silent_options_rejects_claims():
    with pytest.raises(ValueError, match="having these claims"):
        silent_options(with_claims("claims"))


def test_call_option_apply_sets_field():
    option = CallOption("tenant_id", "t", (AcquireOnBehalfOfOptions,))
    target = AcquireOnBehalfOfOptions()
    option.apply(target)
    assert target.tenant_id == "t"