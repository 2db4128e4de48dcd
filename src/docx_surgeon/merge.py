"""
Run merging: fusion of adjacent runs that carry identical properties.

Documents edited in Word often split text into runs across sentences or even
in the middle of words. Since pattern replacement never crosses text node
boundaries, merging runs beforehand maximizes the chances of a match.
"""

import copy
import logging
from collections.abc import Iterable

from .models.run import Run

logger = logging.getLogger(__name__)


def can_merge(previous: Run, run: Run) -> bool:
    """Check whether ``run`` may be folded into the preceding ``previous`` run.

    Both must be real runs, with no markup in between and byte-identical
    properties.
    """
    return (
        not run.xml_before
        and not run.is_tail
        and not previous.is_tail
        and previous.props == run.props
    )


def merge_runs(
    runs: Iterable[Run], no_caps: bool = False, fuse_texts: bool = False
) -> list[Run]:
    """Merge adjacent runs in a single greedy left-to-right pass.

    The given runs are not modified; the result is built from copies.

    Args:
        runs: Runs in document order
        no_caps: Replace the capitalization property of each run by
            upper-cased text before comparing, which allows more merges
        fuse_texts: After merging, join adjacent text nodes of each run
            when no markup separates them (see ``Run.fuse_texts``), so that
            patterns can match across former run boundaries

    Returns:
        The merged runs
    """
    new_runs: list[Run] = []
    count = 0
    for run in runs:
        run = copy.deepcopy(run)
        if no_caps:
            run.remove_caps_property()

        if new_runs and can_merge(new_runs[-1], run):
            new_runs[-1].merge(run)
        else:
            new_runs.append(run)
        count += 1

    if fuse_texts:
        for run in new_runs:
            run.fuse_texts()

    logger.debug("Merged %d runs into %d", count, len(new_runs))
    return new_runs
