"""Container unpacking and section decryption."""

from .container import read_folder, unpack, write_folder
from .decryptor import decrypt, decrypt_if_needed, decrypt_project, encrypt, looks_encrypted

__all__ = [
    "read_folder",
    "unpack",
    "write_folder",
    "decrypt",
    "decrypt_if_needed",
    "decrypt_project",
    "encrypt",
    "looks_encrypted",
]
