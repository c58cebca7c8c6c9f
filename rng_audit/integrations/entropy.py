import hashlib
import secrets
import threading
from typing import Protocol, runtime_checkable

from rng_audit.core.exceptions import GenerationError


@runtime_checkable
class RandomByteSource(Protocol):
    """Anything that can produce n random bytes or raise GenerationError"""

    thread_safe: bool

    def generate(self, n: int) -> bytes: ...


class SystemRandomSource:
    """The operating system CSPRNG"""

    thread_safe = True

    def generate(self, n: int) -> bytes:
        if n < 0:
            raise GenerationError(f'Cannot generate a negative number of bytes: {n}')
        try:
            return secrets.token_bytes(n)
        except OSError as e:
            raise GenerationError(f'System random source failed: {e}') from e


class Blake2bCounterSource:
    """
    Deterministic source: BLAKE2b over seed || 64-bit big-endian counter

    Each block yields 64 bytes. Used to replay a validation run from a known seed.
    """

    thread_safe = False

    def __init__(self, seed: bytes | str) -> None:
        if isinstance(seed, str):
            seed = seed.encode('utf-8')
        self.seed: bytes = hashlib.blake2b(seed, digest_size=32).digest()
        self.counter: int = 0
        self._buffer = bytearray()
        self._lock = threading.Lock()

    def _next_block(self) -> bytes:
        """Generate the next 64 bytes"""
        data = self.seed + self.counter.to_bytes(8, 'big')
        self.counter += 1
        return hashlib.blake2b(data, digest_size=64).digest()

    def generate(self, n: int) -> bytes:
        """Return the next n bytes of the stream"""
        if n < 0:
            raise GenerationError(f'Cannot generate a negative number of bytes: {n}')
        with self._lock:
            while len(self._buffer) < n:
                if self.counter >= 1 << 64:
                    raise GenerationError('BLAKE2b counter exhausted')
                self._buffer.extend(self._next_block())
            result = bytes(self._buffer[:n])
            del self._buffer[:n]
        return result
