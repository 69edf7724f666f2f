"""
VM Workflow - Resource Naming

GCE resource names must match [a-z]([-a-z0-9]{0,61}[a-z0-9])?, so random
names are lowercase letters and digits behind a lowercase prefix.
"""

import random
import string

SUFFIX_LENGTH = 8
MAX_NAME_LENGTH = 63


def create_random_name(prefix: str, length: int = SUFFIX_LENGTH) -> str:
    """
    Create a random resource name.

    Args:
        prefix: Leading part of the name, e.g. 'rg' or 'vmwf-dsk'
        length: Number of random characters appended

    Returns:
        str: e.g. 'rg-k3x9q0ab'

    Raises:
        ValueError: If the prefix does not start with a letter or the name
                    would exceed 63 characters
    """
    prefix = prefix.lower().rstrip('-')
    if not prefix or not prefix[0].isalpha():
        raise ValueError(f"Name prefix must start with a letter: '{prefix}'")

    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=length))
    name = f"{prefix}-{suffix}"
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"Name '{name}' is longer than {MAX_NAME_LENGTH} characters")
    return name
