import secrets
import string

from django.utils import timezone

TOKEN_ALPHABET = string.ascii_lowercase + string.digits


def random_token(length=4):
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


class OrderNumberGenerator:
    """
    Produces human readable order numbers: ``ORD-YYYYMMDD-HHMMSS-xxxx``.

    Numbers are not guaranteed unique; the random suffix makes collisions
    within the same second unlikely. Both the clock and the suffix source
    can be replaced for deterministic tests.
    """

    prefix = "ORD"

    def __init__(self, clock=None, token_factory=None):
        self.clock = clock or timezone.now
        self.token_factory = token_factory or random_token

    def __call__(self, now=None):
        now = now or self.clock()
        stamp = timezone.localtime(now).strftime("%Y%m%d-%H%M%S")
        return f"{self.prefix}-{stamp}-{self.token_factory()}"
