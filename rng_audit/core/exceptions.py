class RngAuditError(Exception):
    """Base class for every error raised by the test engine"""


class GenerationError(RngAuditError):
    """The random byte source failed to produce the requested bytes"""


class PreconditionViolation(RngAuditError, ValueError):
    """Malformed input to a test, the analyzer or the bit codec"""


class UnknownTestError(PreconditionViolation):
    def __init__(self, test_name: str, known: list[str]) -> None:
        super().__init__(f'Unknown test {test_name!r}. Available tests: {", ".join(sorted(known))}')
        self.test_name = test_name
