"""Utility functions for neo-tenancy."""

from .uuid import generate_uuid_v7, to_base36, random_base36
from .encryption import SecretEncryption, get_encryption, reset_encryption_instance

__all__ = [
    "generate_uuid_v7",
    "to_base36",
    "random_base36",
    "SecretEncryption",
    "get_encryption",
    "reset_encryption_instance",
]
