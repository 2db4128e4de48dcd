"""
Pattern replacement over the literal text of a segmented document.
"""

import re
from collections.abc import Iterable
from typing import Any

from .errors import InvalidPatternError
from .models.run import Run
from .models.text import Replacement


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a replacement pattern and check that it has no capturing groups.

    Args:
        pattern: Pattern source or compiled pattern, used as given

    Returns:
        The compiled pattern

    Raises:
        InvalidPatternError: If the pattern has capturing groups
    """
    regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
    if regex.groups:
        raise InvalidPatternError(regex.pattern, regex.groups)
    return regex


def replace_in_runs(
    runs: Iterable[Run],
    pattern: str | re.Pattern[str],
    replacement: Replacement,
    **replacement_args: Any,
) -> str:
    """Replace every match of ``pattern`` in the literal text of the runs.

    Matches never cross text node boundaries; merge runs first to widen the
    searchable spans.

    Args:
        runs: Runs in document order
        pattern: Pattern without capturing groups
        replacement: Fixed string, or callable invoked with the keywords
            ``matched``, ``run``, ``xml_before`` and ``replacement_args``
        **replacement_args: Extra keywords forwarded to the callable

    Returns:
        The complete new markup for the runs

    Example:
        >>> def redact(matched, run, xml_before, **kwargs):
        ...     return "X" * len(matched)
        >>> replace_in_runs(doc.runs, r"\\d{4}", redact)
    """
    regex = compile_pattern(pattern)
    return "".join(run.replace(regex, replacement, **replacement_args) for run in runs)
