"""
Identifier allocation for ClipTrail
History entries are named by a hexadecimal counter
"""
import string


HEX_BASE = 16
_DIGITS = string.digits + string.ascii_lowercase


def identifier_to_value(name, base=HEX_BASE):
    """
    Decode an entry name into its counter value

    Args:
        name: Filename of a history entry
        base: Radix the name is written in

    Returns:
        The decoded integer, or None if the name is not a plain
        non-negative number in the given base
    """
    if not name:
        return None

    allowed = _DIGITS[:base]
    if any(ch not in allowed for ch in name.lower()):
        return None

    return int(name, base)


def value_to_identifier(value, base=HEX_BASE):
    """Encode a counter value as an entry name (lower-case, no padding)"""
    if value < 0:
        raise ValueError(f"Identifier values cannot be negative: {value}")
    if value == 0:
        return '0'

    digits = []
    while value:
        value, rem = divmod(value, base)
        digits.append(_DIGITS[rem])
    return ''.join(reversed(digits))


class IdentifierAllocator:
    """Hands out unused entry names"""

    def __init__(self, seed=0):
        self._count = seed

    @classmethod
    def from_names(cls, names):
        """Seed from the largest decodable name, ignoring foreign files"""
        values = [identifier_to_value(name) for name in names]
        return cls(max((v for v in values if v is not None), default=0))

    @property
    def current(self):
        """Last allocated (or seeded) counter value"""
        return self._count

    def next(self):
        """Advance the counter and return its identifier"""
        self._count += 1
        return value_to_identifier(self._count)
