"""
Operator keys configured through the environment.

Operator keys are not stored in the database; they grant every permission on
every tenant.
"""
from typing import Set

from ..config import ADMIN_KEYS, ALLOW_DEV_KEYS, DEV_ADMIN_KEY


def get_operator_keys() -> Set[str]:
    keys = set(ADMIN_KEYS)
    # Dev key only when explicitly enabled
    if ALLOW_DEV_KEYS and DEV_ADMIN_KEY:
        keys.add(DEV_ADMIN_KEY)
    return keys


OPERATOR_KEYS = get_operator_keys()


def is_operator_key(key: str) -> bool:
    return key in OPERATOR_KEYS
