import argparse
import sys

from rng_audit.core.config import env_config
from rng_audit.core.exceptions import RngAuditError
from rng_audit.integrations.entropy import Blake2bCounterSource, RandomByteSource, SystemRandomSource
from rng_audit.services.fips.service import FipsService, format_fips_report
from rng_audit.services.nist.config import TestConfig, TestMode
from rng_audit.services.nist.report import format_report
from rng_audit.services.nist.service import NistService, available_tests, check_sequence


def _source(seed: str | None) -> RandomByteSource:
    return Blake2bCounterSource(seed) if seed else SystemRandomSource()


def _validate(args: argparse.Namespace) -> bool:
    overrides = {'significance_level': args.alpha}
    if args.sequences is not None:
        overrides['sequence_count'] = args.sequences
    if args.length is not None:
        overrides['sequence_length'] = args.length
    config = TestConfig.for_mode(args.mode, **overrides)

    service = NistService(_source(args.seed), config, max_workers=args.workers)
    reports = service.run_suite(args.tests or None, retry=not args.no_retry)
    for report in reports.values():
        print(format_report(report))
    return all(report.passed for report in reports.values())


def _check(args: argparse.Namespace) -> bool:
    with open(args.file, 'rb') as f:
        data = f.read()

    results = check_sequence(data, args.tests or None, significance_level=args.alpha)
    for test_name, result in results.items():
        if 'error' in result:
            print(f'{test_name:<22} ERROR    {result["error"]}')
        else:
            status = 'SUCCESS' if result['success'] else 'FAILURE'
            print(f'{test_name:<22} {status:<8} p_value = {result["p_value"]:.6f}')
    return all(result['success'] for result in results.values())


def _fips(args: argparse.Namespace) -> bool:
    report = FipsService(_source(args.seed)).evaluate(args.iterations)
    print(format_fips_report(report))
    return report.compliant


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='rng-audit', description='NIST SP 800-22 / FIPS 140-2 randomness checks')
    subparsers = parser.add_subparsers(dest='command', required=True)

    validate = subparsers.add_parser('validate', help='Multi-sequence NIST run against a byte source')
    validate.add_argument('--mode', choices=[mode.value for mode in TestMode], default=env_config.NIST_TEST_MODE)
    validate.add_argument('--tests', nargs='*', choices=available_tests(include_uncalibrated=True))
    validate.add_argument('--sequences', type=int, help='Override the number of sequences')
    validate.add_argument('--length', type=int, help='Override the sequence length in bits')
    validate.add_argument('--alpha', type=float, default=0.01, help='Significance level (default: 0.01)')
    validate.add_argument('--seed', help='Use the deterministic BLAKE2b source with this seed')
    validate.add_argument('--workers', type=int, default=env_config.NIST_MAX_WORKERS)
    validate.add_argument('--no-retry', action='store_true', help='Do not repeat a failed run')
    validate.set_defaults(handler=_validate)

    check = subparsers.add_parser('check', help='Single-sequence NIST battery on a binary file')
    check.add_argument('file', type=str, help='Path to the binary file to test')
    check.add_argument('--tests', nargs='*', choices=available_tests(include_uncalibrated=True))
    check.add_argument('--alpha', type=float, default=0.01, help='Significance level (default: 0.01)')
    check.set_defaults(handler=_check)

    fips = subparsers.add_parser('fips', help='FIPS 140-2 tests against a byte source')
    fips.add_argument('--iterations', type=int, default=5)
    fips.add_argument('--seed', help='Use the deterministic BLAKE2b source with this seed')
    fips.set_defaults(handler=_fips)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        passed = args.handler(args)
    except (RngAuditError, ValueError) as e:
        print(f'error: {e}', file=sys.stderr)
        return 2
    return 0 if passed else 1


if __name__ == '__main__':
    sys.exit(main())
