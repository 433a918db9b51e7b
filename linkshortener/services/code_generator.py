"""Collision-free short code generation

Classes:
    CodeGenerator:
        Draws candidate codes from the backing store's global counter and
        retries until it finds one that no link is using.

Example:
    >>> generator = CodeGenerator(store, salt='my_secret')
    >>> len(generator.generate())
    7
"""

import logging

from linkshortener.constants import Defaults, SHORTCODE_COLLISION
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.exceptions import GenerationExhaustedError
from linkshortener.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)


class CodeGenerator:
    """Generate unique short codes

    Every attempt takes a fresh counter value with `store.count(increment=True)`.
    The counter is incremented atomically by the store, so concurrent callers
    never draw the same candidate. The existence check still guards against
    codes already claimed by a rename or reused after the counter wrapped.

    Args:
        store (LinkBaseDAO):
            Backing store providing the counter and the existence check.
        salt (str):
            Secret shifting the Base62 permutation.
        length (int):
            Length of the generated codes.
        max_attempts (int):
            Number of candidates tried before giving up.
    """

    def __init__(
        self,
        store: LinkBaseDAO,
        salt: str = Defaults.CODE_SALT,
        length: int = Defaults.CODE_LENGTH,
        max_attempts: int = Defaults.MAX_GENERATION_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError(f'max_attempts must be a positive integer (given value: {max_attempts}).')
        self.store = store
        self.salt = salt
        self.length = length
        self.max_attempts = max_attempts

    def generate(self) -> str:
        """Return a short code no stored link is using

        Raises:
            GenerationExhaustedError:
                If every one of `max_attempts` candidates was taken.
            DataStoreError:
                If the backing store is unreachable.
        """
        for attempt in range(1, self.max_attempts + 1):
            counter = self.store.count(increment=True)
            candidate = generate_shortcode(counter, salt=self.salt, length=self.length)
            if not self.store.exists(candidate):
                return candidate

            logger.warning(
                'Short code collision.',
                extra={'shortcode': candidate, 'attempt': attempt, 'event': SHORTCODE_COLLISION},
            )

        raise GenerationExhaustedError(f'Could not generate a unique short code after {self.max_attempts} attempts.')
