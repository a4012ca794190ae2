"""Client passcode generation and normalisation.

A generated passcode looks like ``K7QM-3XHP``: two groups of four characters
drawn from an alphabet without the easily confused 0/O and 1/I.
"""

import secrets

PASSCODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PASSCODE_GROUP_LENGTH = 4


def generate_passcode() -> str:
    """Return a fresh random passcode in AAAA-AAAA form."""
    groups = [
        "".join(secrets.choice(PASSCODE_ALPHABET) for _ in range(PASSCODE_GROUP_LENGTH))
        for _ in range(2)
    ]
    return "-".join(groups)


def normalize_passcode(passcode: str) -> str:
    """Stored form of a passcode: surrounding whitespace stripped, uppercased."""
    return passcode.strip().upper()
