"""Short code encoding

Maps a numeric counter onto a fixed-length Base62 short code. The mapping is
an affine permutation of the code space (BASE**length), so distinct counters
below BASE**length always give distinct codes, and consecutive counters give
codes which look unrelated to each other.

Functions:
    generate_shortcode(counter, salt='linkshortener', length=7, mult=1315423911):
        Encode a counter as a short code.

Example:
    >>> from linkshortener.utils import generate_shortcode
    >>> code = generate_shortcode(12345, salt='my_secret')
    >>> len(code)
    7
"""

import math
import string

import xxhash

from linkshortener.constants import Defaults


# 26 lowercase + 26 uppercase + 10 digits
ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)


def generate_shortcode(
    counter: int,
    salt: str = Defaults.CODE_SALT,
    length: int = Defaults.CODE_LENGTH,
    mult: int = 1315423911,
) -> str:
    """Encode a counter as a fixed-length Base62 short code.

    Args:
        counter (int):
            Non-negative integer, typically the backing store's global counter.

        salt (str, optional):
            Secret shifting the permutation; different salts give different codes.

        length (int, optional):
            Exact length of the resulting code. Defaults to 7 (62**7 ~ 3.5e12 codes).

        mult (int, optional):
            Multiplicative factor of the permutation.
            Must be coprime with BASE**length.

    Returns:
        str: `length` characters from [a-zA-Z0-9].

    Raises:
        TypeError: on non-integer counter or non-string salt.
        ValueError: on negative counter, empty salt, non-positive length,
                    or a multiplier sharing a factor with the code space.

    NOTE:
        - Counters wrap around modulo BASE**length, after which codes repeat.
          Callers must still check the code against the backing store
          (see linkshortener.services.code_generator.CodeGenerator).
        - The output is obfuscated, not encrypted.
    """
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt!r}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    modulo_space = BASE**length
    if math.gcd(mult, modulo_space) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({modulo_space}) (given value: mult={mult}).')

    salt_hash = xxhash.xxh64_intdigest(salt) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space

    # Base62 digits, most significant first
    digits = [ALPHABET[(permuted // BASE**i) % BASE] for i in range(length)]
    return ''.join(reversed(digits))
