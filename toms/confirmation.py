"""Proposal confirmation: one voucher per selected service line."""
import logging
import random
import string
import time
from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Mapping, Optional

from .models import SERVICE_ORDER, Proposal, ProposalStatus, Voucher, VoucherStatus
from .pricing import line_total

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


class ConfirmationError(Exception):
    """The proposal cannot move to the requested status."""


@dataclass
class ConfirmationResult:
    proposal: Proposal
    vouchers: List[Voucher]


def default_voucher_id() -> str:
    """'V-<epoch millis>-<9 random base36 chars>'."""
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"V-{int(time.time() * 1000)}-{suffix}"


def confirm_proposal(
    proposal: Proposal,
    selected_services: Mapping[str, Iterable[int]],
    id_factory: Optional[Callable[[], str]] = None
) -> ConfirmationResult:
    """Confirm a NEW proposal and derive vouchers for the selected services.

    selected_services maps a collection name ('hotels', 'transportation',
    'flights', 'rentACar', 'additionalServices') to line-item ids.
    """
    if proposal.status != ProposalStatus.NEW:
        raise ConfirmationError(
            f"Proposal {proposal.reference} is {proposal.status.value}; only NEW proposals can be confirmed"
        )

    id_factory = id_factory or default_voucher_id
    vouchers = []

    for service_type in SERVICE_ORDER:
        wanted = selected_services.get(service_type.collection) or []
        items = {str(item.id): item for item in proposal.items_of(service_type)}
        for service_id in wanted:
            item = items.get(str(service_id))
            if item is None:
                logger.warning(
                    f"Proposal {proposal.reference}: no {service_type.value} line with id {service_id}; skipped"
                )
                continue
            vouchers.append(Voucher(
                id=id_factory(),
                proposal_id=proposal.id,
                proposal_reference=proposal.reference,
                service_type=service_type,
                service_id=item.id,
                service_data=replace(item, total_price=line_total(item)),
                status=VoucherStatus.PENDING_PAYMENT,
                source=proposal.source,
                agency_id=proposal.agency_id,
                sales_person_id=proposal.sales_person_id,
            ))

    logger.info(f"Confirmed proposal {proposal.reference}: {len(vouchers)} vouchers created")
    return ConfirmationResult(
        proposal=replace(proposal, status=ProposalStatus.CONFIRMED),
        vouchers=vouchers,
    )


def cancel_proposal(proposal: Proposal) -> Proposal:
    """NEW -> CANCELLED. CANCELLED is terminal."""
    if proposal.status != ProposalStatus.NEW:
        raise ConfirmationError(
            f"Proposal {proposal.reference} is {proposal.status.value}; only NEW proposals can be cancelled"
        )
    return replace(proposal, status=ProposalStatus.CANCELLED)
