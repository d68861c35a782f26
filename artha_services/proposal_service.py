"""artha_services.proposal_service -- Proposals-page statistics as of the clock's time."""

from __future__ import annotations

from collections.abc import Sequence

from artha_engines.dashboard import ProposalStats, proposal_stats
from artha_kernel.domain.clock import Clock, SystemClock
from artha_kernel.domain.records import ProposalRecord


class ProposalStatsService:
    """Reads "now" from the injected clock and calls ``proposal_stats``."""

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()

    def stats(self, proposals: Sequence[ProposalRecord]) -> ProposalStats:
        return proposal_stats(proposals, self._clock.now())
