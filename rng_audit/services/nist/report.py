from rng_audit.services.nist.models import MultiSequenceResult, NistRunReport

HISTOGRAM_WIDTH = 30


def format_result(result: MultiSequenceResult, sequence_length: int | None = None) -> str:
    """Format one multi-sequence analysis as a readable report"""
    lower, upper = result.expected_passing_range
    report = [
        f'\n{result.test_name.upper()}',
        '-' * 45,
        f'(a) Sequences            = {result.sequence_count}',
    ]
    if sequence_length is not None:
        report.append(f'(b) Sequence length      = {sequence_length} bits')
    report.extend(
        [
            f'(c) Passing (p >= {result.significance_level:g})  = {result.proportion_passing}',
            f'(d) Expected range       = [{lower}, {upper}]',
            f'(e) Uniformity Chi^2     = {result.uniformity_chi_squared:.6f}',
            f'(f) Uniformity P-value   = {result.uniformity_p_value:.6f} (threshold {result.uniformity_min_p_value:g})',
            '-' * 45,
            '      P-VALUE HISTOGRAM',
            '-' * 45,
        ]
    )

    bins = len(result.histogram)
    peak = max(result.histogram) or 1
    for index, count in enumerate(result.histogram):
        bar = '#' * round(count / peak * HISTOGRAM_WIDTH)
        report.append(f'  [{index / bins:.1f}, {(index + 1) / bins:.1f})  {count:5d}  {bar}')

    report.extend(
        [
            '-' * 45,
            f'Proportion: {"PASS" if result.proportion_passed else "FAIL"}',
            f'Uniformity: {"PASS" if result.uniformity_passed else "FAIL"}',
            f'{"SUCCESS" if result.passed else "FAILURE"}\n',
        ]
    )
    return '\n'.join(report)


def format_report(run: NistRunReport) -> str:
    """Format a run, listing the first attempt and, when it happened, the retry"""
    sections = [format_result(run.first_attempt, run.sequence_length)]
    if run.retry_attempt is not None:
        sections.append(f'RETRY AFTER FAILED FIRST ATTEMPT{format_result(run.retry_attempt, run.sequence_length)}')
    sections.append(f'VERDICT: {"PASSED" if run.passed else "FAILED"}{" (on retry)" if run.retried and run.passed else ""}\n')
    return '\n'.join(sections)
