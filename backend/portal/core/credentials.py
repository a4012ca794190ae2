"""Credential verification strategies.

Callers ask a verifier whether a submitted secret matches the stored one and
never compare strings themselves, so the comparison strategy can change
(hashing, constant-time compare, attempt limiting) without touching them.
"""

import hmac
from typing import Protocol, runtime_checkable


@runtime_checkable
class CredentialVerifier(Protocol):
    """Decides whether a submitted secret matches a stored credential."""

    def verify(self, stored: str | None, submitted: str | None) -> bool:
        ...


class PlaintextVerifier:
    """Exact equality against a plaintext stored value.

    With ``case_insensitive=True`` both sides are uppercased first, which is
    how client passcodes are matched. Admin passwords use exact equality.
    """

    def __init__(self, case_insensitive: bool = False):
        self.case_insensitive = case_insensitive

    def verify(self, stored: str | None, submitted: str | None) -> bool:
        if stored is None or submitted is None:
            return False
        if self.case_insensitive:
            return stored.upper() == submitted.upper()
        return stored == submitted


class ConstantTimeVerifier(PlaintextVerifier):
    """Same matching rules as PlaintextVerifier, compared with hmac.compare_digest."""

    def verify(self, stored: str | None, submitted: str | None) -> bool:
        if stored is None or submitted is None:
            return False
        if self.case_insensitive:
            stored, submitted = stored.upper(), submitted.upper()
        return hmac.compare_digest(stored.encode("utf-8"), submitted.encode("utf-8"))


def get_passcode_verifier() -> CredentialVerifier:
    return PlaintextVerifier(case_insensitive=True)


def get_password_verifier() -> CredentialVerifier:
    return PlaintextVerifier()
