"""
Offer Lifecycle Engine

Tracks offer deadlines and sends expiration notices. The daily sweep runs
three stages in order:

1. TWO_DAY  - deadline is exactly two days after the sweep date
2. ONE_DAY  - deadline is exactly one day after the sweep date
3. EXPIRED  - deadline is strictly before the sweep date (range match, so a
              missed sweep day still catches up)

Each stage sends one email per recipient (offer creator first, then the
offer's notification addresses, case-insensitively de-duplicated) and then
sets the stage's flag with a conditional update. The flag is set even if
some sends failed: notices are at-most-once. If the flag update itself
fails the offer is picked up again by the next sweep.

Derived state (never stored):
- offer status: ``active`` until the deadline passes, then ``expired``
- archive window: open from the day after the deadline through
  ARCHIVE_WINDOW_DAYS days after it, closed afterwards

The engine depends only on the small protocols below so it can run against
SQLAlchemy in production and in-memory fakes in tests.
"""

import enum
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from typing import Any, Protocol

from hr_portal.core.clock import Clock
from hr_portal.core.email import (
    expiration_warning_subject,
    offer_expired_subject,
    render_expiration_warning,
    render_offer_expired,
)

logger = logging.getLogger(__name__)

ARCHIVE_WINDOW_DAYS = 14
DEFAULT_RECIPIENT_NAME = "Notification Recipient"


class OfferStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class ArchiveWindowStatus(str, enum.Enum):
    ACTIVE = "active"
    OPEN = "archive_window_open"
    CLOSED = "archive_window_closed"


class NotificationStage(str, enum.Enum):
    """Sweep stages, in processing order."""

    TWO_DAY = "two_day"
    ONE_DAY = "one_day"
    EXPIRED = "expired"

    @property
    def flag(self) -> str:
        """Offer column recording that this stage's notice went out."""
        return {
            NotificationStage.TWO_DAY: "two_day_notified",
            NotificationStage.ONE_DAY: "one_day_notified",
            NotificationStage.EXPIRED: "deadline_notified",
        }[self]

    @property
    def days_before(self) -> int | None:
        """Days between sweep date and deadline, or None for the range-matched stage."""
        return {
            NotificationStage.TWO_DAY: 2,
            NotificationStage.ONE_DAY: 1,
            NotificationStage.EXPIRED: None,
        }[self]

    @property
    def notice_label(self) -> str:
        if self is NotificationStage.EXPIRED:
            return "expiration notification"
        return f"{self.days_before}-day expiration warning"

    @property
    def processed_label(self) -> str:
        if self is NotificationStage.EXPIRED:
            return "expired offer"
        return f"{self.days_before}-day warning for offer"


SWEEP_ORDER = (NotificationStage.TWO_DAY, NotificationStage.ONE_DAY, NotificationStage.EXPIRED)


def days_since_expiry(deadline: date, today: date) -> int:
    """Whole days from ``deadline`` to ``today`` (negative while active)."""
    return (today - deadline).days


def get_offer_status(deadline: date, today: date) -> OfferStatus:
    return OfferStatus.EXPIRED if deadline < today else OfferStatus.ACTIVE


def get_archive_window_status(deadline: date, today: date) -> ArchiveWindowStatus:
    """
    Archive window for an offer.

    >>> get_archive_window_status(date(2025, 1, 10), date(2025, 1, 24))
    <ArchiveWindowStatus.OPEN: 'archive_window_open'>
    >>> get_archive_window_status(date(2025, 1, 10), date(2025, 1, 25))
    <ArchiveWindowStatus.CLOSED: 'archive_window_closed'>
    """
    if deadline >= today:
        return ArchiveWindowStatus.ACTIVE
    if days_since_expiry(deadline, today) <= ARCHIVE_WINDOW_DAYS:
        return ArchiveWindowStatus.OPEN
    return ArchiveWindowStatus.CLOSED


def is_due(stage: NotificationStage, deadline: date, as_of: date) -> bool:
    """Whether an offer with ``deadline`` belongs to ``stage`` on ``as_of``."""
    if stage is NotificationStage.EXPIRED:
        return deadline < as_of
    return deadline == as_of + timedelta(days=stage.days_before)


def build_recipient_list(creator_email: str | None, notification_emails: list[str] | None) -> list[str]:
    """
    Creator first, then the notification addresses.

    Duplicates are dropped case-insensitively, keeping the first spelling.
    """
    recipients: list[str] = []
    seen: set[str] = set()

    for email in [creator_email, *(notification_emails or [])]:
        if not email or not isinstance(email, str):
            continue
        email = email.strip()
        key = email.lower()
        if not email or key in seen:
            continue
        seen.add(key)
        recipients.append(email)

    return recipients


@dataclass
class OfferNotice:
    """What the engine needs to know about an offer to notify about it."""

    offer_id: str
    title: str
    deadline: date
    creator_email: str | None
    creator_name: str | None
    notification_emails: list[str] = field(default_factory=list)


class LifecycleStore(Protocol):
    async def find_due_offers(self, stage: NotificationStage, as_of: date) -> list[OfferNotice]: ...

    async def mark_notified(self, offer_id: str, stage: NotificationStage) -> bool:
        """Set the stage flag if still unset. Returns False if it was already set."""
        ...


class Notifier(Protocol):
    async def send(self, to: str, subject: str, html: str) -> bool: ...


class AuditTrail(Protocol):
    async def record(self, message: str) -> None: ...


@dataclass
class StageReport:
    stage: str
    offers_selected: int = 0
    offers_notified: int = 0
    offers_failed: int = 0
    recipients_notified: int = 0
    sends_failed: int = 0
    flag_updates_failed: int = 0
    flag_races_lost: int = 0
    error: str | None = None


@dataclass
class SweepReport:
    as_of: date
    stages: list[StageReport] = field(default_factory=list)

    def stage(self, stage: NotificationStage) -> StageReport | None:
        for report in self.stages:
            if report.stage == stage.value:
                return report
        return None

    @property
    def total_notified(self) -> int:
        return sum(s.offers_notified for s in self.stages)

    @property
    def total_errors(self) -> int:
        return sum(
            s.offers_failed + s.sends_failed + s.flag_updates_failed + (1 if s.error else 0)
            for s in self.stages
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "as_of": self.as_of.isoformat(),
            "stages": [asdict(s) for s in self.stages],
            "total_notified": self.total_notified,
            "total_errors": self.total_errors,
        }


class OfferLifecycleEngine:
    """Runs the expiration sweep against injected collaborators."""

    def __init__(
        self,
        store: LifecycleStore,
        notifier: Notifier,
        audit: AuditTrail,
        clock: Clock,
    ):
        self.store = store
        self.notifier = notifier
        self.audit = audit
        self.clock = clock

    def archive_window_status(self, deadline: date) -> ArchiveWindowStatus:
        return get_archive_window_status(deadline, self.clock.today())

    async def run_expiration_sweep(self, as_of: date | None = None) -> SweepReport:
        """
        Run all three stages for ``as_of`` (defaults to the clock's today).

        A failing stage is recorded in its StageReport and the next stage
        still runs.
        """
        as_of = as_of or self.clock.today()
        report = SweepReport(as_of=as_of)

        logger.info(f"Starting offer expiration sweep for {as_of.isoformat()}")

        for stage in SWEEP_ORDER:
            report.stages.append(await self._run_stage(stage, as_of))

        logger.info(
            f"Offer expiration sweep for {as_of.isoformat()} completed. "
            f"Notified: {report.total_notified}, Errors: {report.total_errors}"
        )
        return report

    async def _run_stage(self, stage: NotificationStage, as_of: date) -> StageReport:
        stage_report = StageReport(stage=stage.value)

        try:
            offers = await self.store.find_due_offers(stage, as_of)
        except Exception as e:
            logger.error(f"Sweep stage {stage.value} failed to select offers: {e}", exc_info=True)
            stage_report.error = str(e)
            return stage_report

        stage_report.offers_selected = len(offers)
        logger.info(f"Found {len(offers)} offer(s) for stage {stage.value}")

        for offer in offers:
            try:
                await self._notify_offer(stage, offer, stage_report)
            except Exception as e:
                logger.error(
                    f"Error processing stage {stage.value} for offer {offer.offer_id}: {e}",
                    exc_info=True,
                )
                stage_report.offers_failed += 1

        return stage_report

    def _compose(self, stage: NotificationStage, offer: OfferNotice, recipient_name: str) -> tuple[str, str]:
        if stage is NotificationStage.EXPIRED:
            return (
                offer_expired_subject(offer.title),
                render_offer_expired(recipient_name, offer.title, offer.deadline),
            )
        return (
            expiration_warning_subject(offer.title, stage.days_before),
            render_expiration_warning(recipient_name, offer.title, offer.deadline, stage.days_before),
        )

    async def _notify_offer(
        self,
        stage: NotificationStage,
        offer: OfferNotice,
        stage_report: StageReport,
    ) -> None:
        recipients = build_recipient_list(offer.creator_email, offer.notification_emails)
        creator_key = (offer.creator_email or "").strip().lower()

        for email in recipients:
            is_creator = email.lower() == creator_key
            recipient_name = (offer.creator_name or DEFAULT_RECIPIENT_NAME) if is_creator else DEFAULT_RECIPIENT_NAME
            subject, html = self._compose(stage, offer, recipient_name)

            try:
                sent = await self.notifier.send(email, subject, html)
            except Exception as e:
                logger.error(f"Exception sending {stage.notice_label} to {email} for offer {offer.offer_id}: {e}")
                sent = False

            if not sent:
                logger.error(f"Failed to send {stage.notice_label} to {email} for offer {offer.offer_id}")
                stage_report.sends_failed += 1
                continue

            stage_report.recipients_notified += 1
            recipient_type = "HR creator" if is_creator else "notification email"
            await self.audit.record(
                f'System sent {stage.notice_label} for offer "{offer.title}" to {email} ({recipient_type})'
            )

        try:
            marked = await self.store.mark_notified(offer.offer_id, stage)
        except Exception as e:
            # Flag stays unset, so the next sweep retries this offer
            logger.error(
                f"Failed to set {stage.flag} for offer {offer.offer_id}: {e}",
                exc_info=True,
            )
            stage_report.flag_updates_failed += 1
            return

        if not marked:
            logger.warning(
                f"{stage.flag} for offer {offer.offer_id} was already set by a concurrent sweep"
            )
            stage_report.flag_races_lost += 1
            return

        stage_report.offers_notified += 1
        await self.audit.record(
            f'System processed {stage.processed_label} "{offer.title}" '
            f"with {len(recipients)} notification emails"
        )
