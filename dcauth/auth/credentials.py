"""Credential normalization.

Usernames arrive in several shapes: `DOMAIN\\user`, `user@domain` (UPN), or a
bare `user` optionally accompanied by a domain hint. `normalize` reduces each
to a `NormalizedCredential` and the `*_bind_*` helpers turn that back into the
name a given mechanism expects. Nothing here performs I/O.
"""
from typing import Tuple

from pydantic import SecretStr

from dcauth.auth.models import Mechanism, NormalizedCredential, UsernamePrecedence



def normalize(
    username: str,
    domain_hint: str | None = None,
    password: SecretStr | str = "",
    precedence: UsernamePrecedence = UsernamePrecedence.UPN
) -> NormalizedCredential:
    """Split a raw username into a bind domain and bind principal.

    Rules are applied in order and the first match wins...
    1. A backslash splits on the *first* backslash into (domain, user).
    2. An '@' marks a UPN, used verbatim with no bind domain.
    3. A non-empty domain hint becomes the bind domain.
    4. Otherwise the name is left unqualified.

    When a username contains both a backslash and an '@', `precedence` decides.
    With `UsernamePrecedence.UPN` the '@' always wins and the bind domain is
    dropped; the principal is the text after the first backslash if that text
    is itself a UPN, otherwise the username verbatim. With
    `UsernamePrecedence.BACKSLASH` rule 1 applies as written.

    Args:
        username: The raw username from the request.
        domain_hint: Domain from the request, falling back to configuration.
        password: Password, copied onto the credential.
        precedence: Rule for usernames containing both '\\' and '@'.
    """
    if "\\" in username:
        domain_part, user_part = username.split("\\", 1)
        if "@" in username and precedence is UsernamePrecedence.UPN:
            principal = user_part if "@" in user_part else username
            return NormalizedCredential(bind_principal=principal, password=password)
        return NormalizedCredential(
            bind_domain=domain_part or None,
            bind_principal=user_part,
            password=password
        )
    if "@" in username:
        return NormalizedCredential(bind_principal=username, password=password)
    if domain_hint and domain_hint.strip():
        return NormalizedCredential(
            bind_domain=domain_hint.strip(),
            bind_principal=username,
            password=password
        )
    return NormalizedCredential(bind_principal=username, password=password)


def simple_bind_name(credential: NormalizedCredential) -> str:
    """Format the name for a simple bind.

    UPN if the principal contains '@', `domain\\user` when a domain is known,
    else the bare principal.
    """
    principal = credential.bind_principal
    if "@" in principal:
        return principal
    if credential.bind_domain:
        return f"{credential.bind_domain}\\{principal}"
    return principal


def mechanism_bind_credentials(
    credential: NormalizedCredential,
    mechanism: Mechanism
) -> Tuple[str, str | None]:
    """Return the `(user, realm)` pair a mechanism binds with.
    
    SASL mechanisms take the domain as a separate realm rather than a prefix.
    """
    if mechanism is Mechanism.SIMPLE:
        return simple_bind_name(credential), None
    if "@" in credential.bind_principal:
        return credential.bind_principal, None
    return credential.bind_principal, credential.bind_domain
