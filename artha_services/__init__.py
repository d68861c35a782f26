"""
artha_services -- Package init and public API.

Responsibility:
    Thin façades that read the current time from an injected Clock (and
    the rate table from artha_config) and call the pure engines.  This is
    the only layer that touches the clock.

Architecture position:
    Services -- orchestration over engines + kernel.

    Dependency direction:
        artha_services/ -> artha_engines/  (allowed)
        artha_services/ -> artha_kernel/   (allowed)
        artha_engines/  -> artha_services/ (FORBIDDEN)
        artha_kernel/   -> artha_services/ (FORBIDDEN)
"""

from artha_services.dashboard_service import DashboardService
from artha_services.proposal_service import ProposalStatsService
from artha_services.tax_service import TaxService

__all__ = [
    "DashboardService",
    "ProposalStatsService",
    "TaxService",
]
