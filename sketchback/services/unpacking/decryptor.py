"""
Section Decryptor.

Sections are obfuscated with a fixed AES-128-CBC transform whose key and IV are
constants of the format, not project secrets. Every decryption is verified: the
result must unpad cleanly and decode as UTF-8.
"""

from __future__ import annotations

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad, unpad

from ...core.config import get_config
from ...core.exceptions import DecryptionFailed
from ...core.logging import get_logger
from ...core.types import SECTION_NAMES
from ...models.project import DecryptedProject, RawProject

logger = get_logger(__name__)


def _cipher(key: bytes | None, iv: bytes | None):
    decoding = get_config().decoding
    key = key or decoding.cipher_key.encode("utf-8")
    iv = iv or decoding.cipher_iv.encode("utf-8")
    return AES.new(key, AES.MODE_CBC, iv)


def looks_encrypted(buffer: bytes) -> bool:
    """Probe whether a buffer is ciphertext.

    Decodes the buffer as UTF-8 (replacing invalid sequences) and re-encodes
    it; any byte-level difference means the buffer was not valid UTF-8 text.

    Args:
        buffer: Raw section contents.

    Returns:
        True if the buffer is ciphertext, False if it is already plaintext.
    """
    return buffer.decode("utf-8", errors="replace").encode("utf-8") != buffer


def decrypt(
    buffer: bytes,
    section: str = "",
    key: bytes | None = None,
    iv: bytes | None = None,
) -> str:
    """Decrypt one section buffer into text.

    Args:
        buffer: Ciphertext.
        section: Section name, used in error messages.
        key: Override for the format key.
        iv: Override for the format IV.

    Returns:
        The decrypted UTF-8 text.

    Raises:
        DecryptionFailed: If the buffer is not a whole number of blocks, the
            padding is invalid, or the plaintext is not UTF-8.
    """
    if len(buffer) % AES.block_size != 0 or not buffer:
        raise DecryptionFailed(
            message=f"ciphertext length {len(buffer)} is not a positive multiple of {AES.block_size}",
            section=section,
        )

    try:
        padded = _cipher(key, iv).decrypt(buffer)
        plain = unpad(padded, AES.block_size)
    except ValueError as e:
        raise DecryptionFailed(message="invalid padding after transform", section=section, cause=e) from e

    try:
        return plain.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionFailed(message="result is not valid UTF-8", section=section, cause=e) from e


def encrypt(text: str, key: bytes | None = None, iv: bytes | None = None) -> bytes:
    """Apply the format transform to plaintext (inverse of decrypt)."""
    return _cipher(key, iv).encrypt(pad(text.encode("utf-8"), AES.block_size))


def decrypt_if_needed(buffer: bytes, section: str = "") -> str:
    """Return a section's text, decrypting only when the probe says ciphertext.

    Plaintext input is returned unchanged; the transform is never applied twice.
    """
    if looks_encrypted(buffer):
        logger.debug("Decrypting section", section=section, size=len(buffer))
        return decrypt(buffer, section=section)

    logger.debug("Section is already plaintext", section=section, size=len(buffer))
    return buffer.decode("utf-8")


def decrypt_project(raw: RawProject) -> DecryptedProject:
    """Decrypt every section of a raw project, probing each one independently."""
    return DecryptedProject(
        sections={name: decrypt_if_needed(raw[name], section=name) for name in SECTION_NAMES}
    )
