"""Distribution bounded context — order intake, returns and delivery tracking.

Orders and return orders are recorded by the order ledger. Every placed order
is handed to the delivery lifecycle, which tracks the consignment from the
warehouse to the shop through a fixed sequence of phases.
"""

from protean.domain import Domain

from distribution.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

distribution = Domain(name="distribution")
