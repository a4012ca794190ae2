"""Object-storage path naming for uploaded files.

Paths embed the upload time in epoch milliseconds plus a short random token
so two uploads of the same file name never collide.
"""

import secrets
import string
import time

ASSET_KINDS: tuple[str, ...] = ("brand_guide", "logo", "font", "media")

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
_TOKEN_LENGTH = 6


def file_extension(file_name: str) -> str:
    """Text after the last dot, or the whole name when there is no dot."""
    return file_name.rsplit(".", 1)[-1]


def random_token() -> str:
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(_TOKEN_LENGTH))


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def project_file_path(project_id: str, file_name: str, epoch_ms: int | None = None, token: str | None = None) -> str:
    """Blob path for a deliverable/project attachment: {project_id}/{epoch_ms}-{token}.{ext}"""
    epoch_ms = _epoch_ms() if epoch_ms is None else epoch_ms
    token = random_token() if token is None else token
    return f"{project_id}/{epoch_ms}-{token}.{file_extension(file_name)}"


def onboarding_asset_path(
    project_id: str, kind: str, file_name: str, epoch_ms: int | None = None, token: str | None = None
) -> str:
    """Blob path for an onboarding asset: {project_id}/{kind}/{epoch_ms}_{token}.{ext}

    Raises:
        ValueError: If kind is not one of ASSET_KINDS
    """
    if kind not in ASSET_KINDS:
        raise ValueError(f"Invalid asset kind: {kind}. Must be one of {list(ASSET_KINDS)}.")
    epoch_ms = _epoch_ms() if epoch_ms is None else epoch_ms
    token = random_token() if token is None else token
    return f"{project_id}/{kind}/{epoch_ms}_{token}.{file_extension(file_name)}"
