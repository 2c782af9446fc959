"""Voucher status transitions.

PENDING_PAYMENT -> PAID -> COMPLETED, and CANCELLED from PENDING_PAYMENT
or PAID. Bulk actions are all-or-nothing: if any selected voucher fails
the precondition, nothing is applied and the offending ids are reported.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence

from .i18n import lookup
from .models import Voucher, VoucherStatus

logger = logging.getLogger(__name__)


class BulkAction(Enum):
    MARK_PAID = "mark_paid"
    MARK_COMPLETED = "mark_completed"
    MARK_CANCELLED = "mark_cancelled"

    @property
    def allowed_from(self) -> FrozenSet[VoucherStatus]:
        return _ALLOWED_FROM[self]

    @property
    def target(self) -> VoucherStatus:
        return _TARGETS[self]


_ALLOWED_FROM = {
    BulkAction.MARK_PAID: frozenset({VoucherStatus.PENDING_PAYMENT}),
    BulkAction.MARK_COMPLETED: frozenset({VoucherStatus.PAID}),
    BulkAction.MARK_CANCELLED: frozenset({VoucherStatus.PENDING_PAYMENT, VoucherStatus.PAID}),
}

_TARGETS = {
    BulkAction.MARK_PAID: VoucherStatus.PAID,
    BulkAction.MARK_COMPLETED: VoucherStatus.COMPLETED,
    BulkAction.MARK_CANCELLED: VoucherStatus.CANCELLED,
}

_ERROR_KEYS = {
    BulkAction.MARK_PAID: "bulk.cannotMarkPaid",
    BulkAction.MARK_COMPLETED: "bulk.cannotComplete",
    BulkAction.MARK_CANCELLED: "bulk.cannotCancel",
}

_SUCCESS_KEYS = {
    BulkAction.MARK_PAID: "bulk.markedPaid",
    BulkAction.MARK_COMPLETED: "bulk.completed",
    BulkAction.MARK_CANCELLED: "bulk.cancelled",
}


class BatchValidationError(Exception):
    """A bulk action was rejected; no voucher was changed."""

    def __init__(self, action: BulkAction, invalid_ids: Sequence[str]):
        self.action = action
        self.invalid_ids = list(invalid_ids)
        super().__init__(self.message())

    def message(self, language: Optional[str] = None) -> str:
        if not self.invalid_ids:
            return lookup("bulk.noneSelected", language)
        return f"{lookup(_ERROR_KEYS[self.action], language)} {', '.join(self.invalid_ids)}"


@dataclass
class BulkActionResult:
    action: BulkAction
    vouchers: List[Voucher]

    @property
    def count(self) -> int:
        return len(self.vouchers)

    def message(self, language: Optional[str] = None) -> str:
        word = lookup("voucherSingular" if self.count == 1 else "voucherPlural", language)
        return f"{lookup(_SUCCESS_KEYS[self.action], language)} {self.count} {word}."


def parse_action(value) -> BulkAction:
    """Resolve 'mark_paid' etc.; raises ValueError for anything else."""
    if isinstance(value, BulkAction):
        return value
    return BulkAction(str(value).strip().lower())


def can_transition(voucher: Voucher, action: BulkAction) -> bool:
    return voucher.status in action.allowed_from


def validate_batch(vouchers: Sequence[Voucher], action: BulkAction) -> List[str]:
    """Ids of vouchers whose current status does not allow the action."""
    return [v.id for v in vouchers if not can_transition(v, action)]


def apply_bulk_action(vouchers: Sequence[Voucher], action: BulkAction) -> BulkActionResult:
    """Apply action to every voucher, or to none of them.

    Returns updated copies; the input vouchers are left untouched.
    Raises BatchValidationError when the selection is empty or any voucher
    fails the precondition.
    """
    action = parse_action(action)
    if not vouchers:
        raise BatchValidationError(action, [])

    invalid = validate_batch(vouchers, action)
    if invalid:
        logger.warning(f"Rejected {action.value} for {len(vouchers)} vouchers; invalid: {invalid}")
        raise BatchValidationError(action, invalid)

    updated = [replace(v, status=action.target) for v in vouchers]
    logger.info(f"Applied {action.value} to {len(updated)} vouchers")
    return BulkActionResult(action=action, vouchers=updated)
