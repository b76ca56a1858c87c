"""
Slug generation for article titles.

A slug is the "strict" slugified title followed by a random suffix:
``"Hello, World!"`` -> ``"hello-world-aZ3kP9mQxBr"``.  The suffix makes
collisions improbable, not impossible; ``ArticleService`` checks the
slug against storage and asks for another one on a hit.
"""
import re
import secrets
import unicodedata
from typing import Callable

from conduit.config import settings

# 64 symbols, so ``byte & 63`` indexes it without bias.
SUFFIX_ALPHABET = "useandom-26T198340PX75pxJACKVERYMINDBUSHWOLF_GQZbfghjklqvwyzrict"

SEPARATOR = "-"

# Base used when a title has no letters or digits.
UNTITLED = "untitled"

_SLUG_REMOVE_RE = re.compile(r"[*+~.()'\"!:@]")
_SLUG_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

RandomBytes = Callable[[int], bytes]


def slugify(text: str) -> str:
    """Return a lowercase slug containing only ``[a-z0-9]`` and ``-``."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = _SLUG_REMOVE_RE.sub("", text.lower())
    return _SLUG_NON_ALNUM_RE.sub(SEPARATOR, text).strip(SEPARATOR)


class SlugGenerator:
    """
    Builds ``<slugified title>-<random suffix>`` slugs.

    *random_bytes* is the entropy source (``secrets.token_bytes`` by
    default); tests pass a deterministic one.  Titles with nothing left
    after slugifying use ``UNTITLED`` as the base, so a slug always
    starts with ``[a-z0-9]`` even though the suffix alphabet has ``-``
    and ``_``.
    """

    def __init__(
        self,
        random_bytes: RandomBytes | None = None,
        suffix_length: int | None = None,
    ) -> None:
        if suffix_length is None:
            suffix_length = settings.SLUG_SUFFIX_LENGTH
        if suffix_length < 1:
            raise ValueError(f"suffix_length must be positive, got {suffix_length}")
        self._random_bytes = random_bytes or secrets.token_bytes
        self._suffix_length = suffix_length

    def generate_suffix(self, length: int | None = None) -> str:
        if length is None:
            length = self._suffix_length
        return "".join(SUFFIX_ALPHABET[byte & 63] for byte in self._random_bytes(length))

    def generate(self, title: str) -> str:
        base = slugify(title) or UNTITLED
        return f"{base}{SEPARATOR}{self.generate_suffix()}"
