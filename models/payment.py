import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.utils import humanize, parse_datetime, ref_id, to_iso

PAYMENT_METHODS = ("cash", "credit_card", "debit_card", "bank_transfer", "online_payment", "other")
PAYMENT_STATUSES = ("pending", "completed", "failed", "refunded")

FOR_MEMBERSHIP = "membership"
FOR_PERSONAL_TRAINING = "personal_training"
PAYMENT_PURPOSES = (FOR_MEMBERSHIP, FOR_PERSONAL_TRAINING, "merchandise", "other")


def _person_name(ref: Any) -> str:
    if not isinstance(ref, dict):
        return ""
    return f"{ref.get('firstName', '')} {ref.get('lastName', '')}".strip()


@dataclass
class Payment:
    """
    A payment received from a member.
    The invoice number is assigned by the backend on create.
    """
    id: Optional[str]
    member: Optional[str]
    amount: Optional[float]
    payment_method: str = "cash"
    payment_date: Optional[datetime.datetime] = None
    payment_status: str = "completed"
    payment_for: str = FOR_MEMBERSHIP
    membership: Optional[str] = None
    staff: Optional[str] = None
    transaction_id: str = ""
    invoice_number: str = ""
    description: str = ""
    member_name: str = ""
    member_email: str = ""
    membership_name: str = ""
    staff_name: str = ""

    @property
    def purpose_label(self) -> str:
        return humanize(self.payment_for)

    @property
    def method_label(self) -> str:
        return humanize(self.payment_method)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Payment":
        member = data.get("member")
        membership = data.get("membership")
        return cls(
            id=ref_id(data),
            member=ref_id(member),
            amount=data.get("amount"),
            payment_method=data.get("paymentMethod") or "other",
            payment_date=parse_datetime(data.get("paymentDate")),
            payment_status=data.get("paymentStatus") or "completed",
            payment_for=data.get("paymentFor") or FOR_MEMBERSHIP,
            membership=ref_id(membership),
            staff=ref_id(data.get("staff")),
            transaction_id=data.get("transactionId") or "",
            invoice_number=data.get("invoiceNumber") or "",
            description=data.get("description") or "",
            member_name=_person_name(member) or "Unknown Member",
            member_email=member.get("email", "") if isinstance(member, dict) else "",
            membership_name=membership.get("name", "") if isinstance(membership, dict) else "",
            staff_name=_person_name(data.get("staff")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "member": self.member,
            "amount": self.amount,
            "paymentMethod": self.payment_method,
            "paymentDate": to_iso(self.payment_date),
            "paymentStatus": self.payment_status,
            "paymentFor": self.payment_for,
            "membership": self.membership or None,
            # Only personal training payments name a trainer
            "staff": self.staff if self.payment_for == FOR_PERSONAL_TRAINING else None,
            "transactionId": self.transaction_id,
            "description": self.description,
        }
