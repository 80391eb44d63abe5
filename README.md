# authcred

Building blocks for confidential OAuth 2.0 client applications: services
that run on servers and can keep an application secret or a certificate.

The package has four modules:

- `authcred.credentials`: `Credential`, built from a client secret, a
  certificate and RSA private key, an assertion callback, or a token
  provider; `cert_from_pem` to read certificates and a private key out of
  PEM data.
- `authcred.cache`: the `ExportReplace` interface for keeping token-cache
  data in external storage, the `Marshaler`, `Unmarshaler` and
  `Serializer` interfaces a cache implements, and `FileCacheAccessor`, a
  file-backed `ExportReplace`.
- `authcred.options`: client settings (`ClientOptions`, built by
  `client_options`) and per-call settings for the token request flows,
  set through `CallOption` values such as `with_tenant_id` or
  `with_claims`.
- `authcred.errors`: `CallError` for failed HTTP calls and `verbose`,
  which renders the most detailed message of an error chain.

## Credentials

From a secret:

```python
from authcred.credentials import new_cred_from_secret

cred = new_cred_from_secret("secret")
```

An empty secret raises `ValueError`.

From PEM data holding the certificate(s) and the private key:

```python
from pathlib import Path

from authcred.credentials import cert_from_pem, new_cred_from_cert

pem_data = Path("key.pem").read_bytes()
certs, key = cert_from_pem(pem_data)
cred = new_cred_from_cert(certs, key)
```

If the key block is encrypted, pass the password as the second argument:

```python
password = "password"
certs, key = cert_from_pem(pem_data, password)
```

`cert_from_pem` accepts `bytes` or `str`, reads `CERTIFICATE`,
`PRIVATE KEY` and `RSA PRIVATE KEY` blocks and ignores other block types.
It raises `ValueError` when no certificate or no private key is found,
when more than one private key block is present, or when a block cannot
be parsed or decrypted.

`new_cred_from_cert` requires an RSA private key and a certificate whose
public key matches it; otherwise it raises `ValueError`. `None` entries in
the certificate list are skipped. The base64 DER encodings of all
certificates go into `Credential.x5c`, with the matching certificate
first.

From a callback that produces signed assertions, or from a provider that
supplies access tokens itself:

```python
from authcred.credentials import (
    new_cred_from_assertion_callback,
    new_cred_from_token_provider,
)

cred = new_cred_from_assertion_callback(lambda options: "token")
```

`Credential.kind()` returns a `CredentialKind` (`SECRET`, `CERTIFICATE`,
`ASSERTION_CALLBACK` or `TOKEN_PROVIDER`) and raises `ValueError` for an
incomplete credential, such as a certificate without a key.

`auto_detect_region()` returns `"TryAutoDetect"`, the value to pass to
`with_azure_region` to have the region detected automatically.

## Options

Client settings:

```python
from authcred.credentials import auto_detect_region, new_cred_from_secret
from authcred.options import client_options, with_azure_region, with_x5c

cred = new_cred_from_secret("secret")
opts = client_options(
    "https://login.example.com/your_tenant",
    cred,
    with_x5c(),
    with_azure_region(auto_detect_region()),
)
```

`client_options` first checks the credential with `kind()`. For a token
provider credential, instance discovery starts disabled; an explicit
`with_instance_discovery(True)` turns it back on. Other client options
are `with_cache`, `with_client_capabilities` and `with_http_client`.

Per-call settings:

| Options class                 | Accepted options                                                     |
|-------------------------------|----------------------------------------------------------------------|
| `AuthCodeURLOptions`          | `with_claims`, `with_tenant_id`, `with_login_hint`, `with_domain_hint` |
| `AcquireSilentOptions`        | `with_claims`, `with_tenant_id`, `with_silent_account`, `with_authentication_scheme` |
| `AcquireByAuthCodeOptions`    | `with_claims`, `with_tenant_id`, `with_challenge`                    |
| `AcquireByCredentialOptions`  | `with_claims`, `with_tenant_id`, `with_authentication_scheme`        |
| `AcquireOnBehalfOfOptions`    | `with_claims`, `with_tenant_id`                                      |

```python
from authcred.options import (
    AcquireByAuthCodeOptions,
    apply_options,
    silent_options,
    with_challenge,
    with_tenant_id,
)

call = silent_options(with_tenant_id("other_tenant"))
auth_code = apply_options(AcquireByAuthCodeOptions(), [with_challenge("challenge")])
```

Applying an option to a class it is not valid for raises `TypeError`.
`silent_options` raises `ValueError` if claims are set, since a token with
new claims cannot come from the cache. `AcquireSilentOptions.is_app_cache`
is true when no account is given.

## Keeping the token cache elsewhere

Implement `ExportReplace` to load the cache before an operation and store
it afterwards:

```python
from authcred.cache import ExportHints, ExportReplace, ReplaceHints


class MemoryStore(ExportReplace):
    def __init__(self):
        self.data = b""

    def replace(self, cache, hints: ReplaceHints):
        cache.unmarshal(self.data)

    def export(self, cache, hints: ExportHints):
        self.data = cache.marshal()
```

Hand it to `client_options` through `with_cache(MemoryStore())`. The hints
carry a suggested `partition_key`.

`FileCacheAccessor(path)` stores the data in one file. `export` writes the
file, creating it with mode `0600`; `replace` loads it, and loads empty
data (logging a warning) when the file cannot be read.

## Errors

```python
from authcred.errors import verbose

try:
    ...
except Exception as err:
    print(verbose(err))
```

`verbose` joins the messages of an error and every error it was raised
from (`__cause__`), using an error's own `verbose()` where it has one. For
a `CallError` that includes the request and the response of the failed
call, printed field by field with empty fields left out.

## What this package does not do

It holds no client: nothing here contacts a token service, sends HTTP
requests, acquires or refreshes tokens, or keeps an in-memory token cache.
The credentials and options describe what such a client would use, and the
cache interfaces and `FileCacheAccessor` only move opaque bytes that a
cache provides.