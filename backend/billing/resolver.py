"""
Subscription status resolver.

Holds one user's billing state as an explicit cache entry
``{value, fetched_at, in_flight}`` driven by a small state machine:

    unknown -> pending -> resolved -> stale -> pending -> ...

Transitions are triggered by a change of user identity, by timer ticks
and by the return from a checkout redirect. Clock and scheduler are
injectable, so staleness and polling are testable without real timers
or network calls.

Guarantees:
- a refresh while another is in flight is a no-op;
- logging out resets synchronously to the free default, no request made;
- a result that arrives after the identity changed is discarded;
- a failed remote call still resolves to a concrete plan (the locally
  known plan when available, else free) and keeps the error text;
- the in-flight flag is cleared however a refresh ends.
"""

import logging
import threading
import time
from dataclasses import asdict, dataclass, replace
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .plans import PlanType, normalize_plan

logger = logging.getLogger(__name__)

CHECKOUT_PARAM = "checkout"
CHECKOUT_SUCCESS = "success"
CHECKOUT_CANCELLED = "cancelled"

DEFAULT_POLL_INTERVAL = 300
DEFAULT_CHECKOUT_REFRESH_DELAY = 2


class ResolverState(str, Enum):
    UNKNOWN = "unknown"
    PENDING = "pending"
    RESOLVED = "resolved"
    STALE = "stale"


@dataclass(frozen=True)
class SubscriptionStatus:
    subscribed: bool = False
    plan_type: str = PlanType.FREE.value
    plan_expiry_date: Optional[str] = None
    is_loading: bool = False
    error: Optional[str] = None

    def as_dict(self):
        return asdict(self)


FREE_STATUS = SubscriptionStatus()


@dataclass
class CacheEntry:
    value: SubscriptionStatus
    fetched_at: Optional[float] = None
    in_flight: bool = False


# -------------------------------------------------------------------
# SCHEDULERS
# -------------------------------------------------------------------


class ThreadingScheduler:
    """Runs callbacks on daemon ``threading.Timer`` threads."""

    def call_later(self, delay, callback):
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class _ScheduledCall:
    def __init__(self, due, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """
    Keeps callbacks until ``run_due()`` is called.

    Request/response code drains it on every read, which turns timer
    ticks into staleness checked on access.
    """

    def __init__(self, clock=time.monotonic):
        self.clock = clock
        self._calls = []
        self._lock = threading.Lock()

    def call_later(self, delay, callback):
        call = _ScheduledCall(self.clock() + delay, callback)
        with self._lock:
            self._calls.append(call)
        return call

    @property
    def pending(self):
        with self._lock:
            return [call for call in self._calls if not call.cancelled]

    def run_due(self):
        """Run every non-cancelled callback whose time has come."""
        now = self.clock()
        with self._lock:
            due = [call for call in self._calls if not call.cancelled and call.due <= now]
            self._calls = [
                call for call in self._calls if not call.cancelled and call.due > now
            ]
        for call in sorted(due, key=lambda item: item.due):
            call.callback()
        return len(due)


# -------------------------------------------------------------------
# CHECKOUT MARKER
# -------------------------------------------------------------------


def strip_checkout_marker(location):
    """
    Remove ``?checkout=...`` from a location.

    Args:
        location (str): URL or path with query string

    Returns:
        tuple[str, str|None]: Clean location and the marker value, if any
    """
    parts = urlsplit(location)
    params = parse_qsl(parts.query, keep_blank_values=True)
    marker = None
    kept = []
    for key, value in params:
        if key == CHECKOUT_PARAM:
            marker = value
        else:
            kept.append((key, value))
    clean = urlunsplit(parts._replace(query=urlencode(kept)))
    return clean, marker


# -------------------------------------------------------------------
# RESOLVER
# -------------------------------------------------------------------


class SubscriptionResolver:
    """
    Resolves and caches the subscription status of the current user.

    Args:
        fetch_status: ``fetch_status(identity) -> {"subscribed", "plan_type",
            "plan_expiry_date"}``; may raise on remote failure
        fallback_plan: ``fallback_plan(identity) -> plan or None``, the locally
            known plan used when the remote call fails
        clock: Monotonic clock in seconds
        scheduler: Object with ``call_later(delay, callback)`` returning a
            handle with ``cancel()``
        poll_interval: Seconds before a resolved value turns stale and the
            polling timer refreshes it
        checkout_refresh_delay: Delay of the extra refresh after a
            successful checkout
    """

    def __init__(
        self,
        fetch_status: Callable[[Any], dict],
        fallback_plan: Optional[Callable[[Any], Optional[str]]] = None,
        clock: Callable[[], float] = time.monotonic,
        scheduler=None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        checkout_refresh_delay: float = DEFAULT_CHECKOUT_REFRESH_DELAY,
    ):
        self._fetch_status = fetch_status
        self._fallback_plan = fallback_plan
        self.clock = clock
        self.scheduler = scheduler or ThreadingScheduler()
        self.poll_interval = poll_interval
        self.checkout_refresh_delay = checkout_refresh_delay

        self._lock = threading.Lock()
        self._identity = None
        self._generation = 0
        self._entry = CacheEntry(FREE_STATUS)
        self._resolved = False
        self._poll_handle = None
        self._checkout_handle = None

    # ---------------------------------------------------------------
    # Read side
    # ---------------------------------------------------------------

    @property
    def identity(self):
        return self._identity

    @property
    def entry(self):
        with self._lock:
            return replace(self._entry)

    @property
    def state(self):
        with self._lock:
            return self._state_locked()

    def _state_locked(self):
        if self._entry.in_flight:
            return ResolverState.PENDING
        if not self._resolved:
            return ResolverState.UNKNOWN
        if self.clock() - self._entry.fetched_at >= self.poll_interval:
            return ResolverState.STALE
        return ResolverState.RESOLVED

    @property
    def resolved(self):
        """True once a refresh completed (or a known value was seeded)."""
        with self._lock:
            return self._resolved

    @property
    def status(self):
        """Current status; ``is_loading`` is true while a refresh is in flight."""
        with self._lock:
            return replace(self._entry.value, is_loading=self._entry.in_flight)

    # ---------------------------------------------------------------
    # Transitions
    # ---------------------------------------------------------------

    def set_user(self, identity, known=None, known_age=0.0):
        """
        Switch to another user identity.

        ``None`` (logged out) resets synchronously to the free default and
        issues no request. Any other identity starts a refresh and the
        polling timer, unless ``known`` already holds a confirmed payload
        for it.

        Args:
            identity: New identity, or None when logged out
            known (dict): Payload fetched elsewhere for this identity
            known_age (float): Seconds since ``known`` was fetched

        Returns:
            bool: True when a refresh was issued
        """
        with self._lock:
            if identity == self._identity:
                return False
            self._identity = identity
            self._generation += 1
            self._cancel_handles_locked()
            self._entry = CacheEntry(FREE_STATUS)
            self._resolved = False
            seeded = identity is not None and known is not None
            if seeded:
                self._entry = CacheEntry(
                    self._status_from(known), fetched_at=self.clock() - known_age
                )
                self._resolved = True

        logger.debug(
            "Subscription identity changed",
            extra={
                "logged_in": identity is not None,
                "seeded": seeded,
                "action": "subscription_identity_changed",
                "component": "SubscriptionResolver",
            },
        )

        if identity is None:
            return False

        if seeded:
            self._schedule_poll(max(0.0, self.poll_interval - known_age))
            return False

        started = self.refresh()
        self._schedule_poll()
        return started

    def refresh(self):
        """
        Fetch the billing state of the current identity.

        Returns:
            bool: False when skipped (no user, or a refresh already in flight)
        """
        with self._lock:
            if self._identity is None or self._entry.in_flight:
                return False
            self._entry.in_flight = True
            identity = self._identity
            generation = self._generation

        value = None
        try:
            try:
                value = self._status_from(self._fetch_status(identity))
            except Exception as e:
                # Remote failures never leave the caller without a plan
                value = self._fallback_status(identity, e)
        finally:
            with self._lock:
                current = generation == self._generation
                if current and value is None:
                    self._entry.in_flight = False
                elif current:
                    self._entry = CacheEntry(value, fetched_at=self.clock(), in_flight=False)
                    self._resolved = True

        if not current:
            logger.debug(
                "Discarding subscription result for a previous identity",
                extra={
                    "action": "subscription_result_discarded",
                    "component": "SubscriptionResolver",
                },
            )
            return True

        logger.info(
            "Subscription status resolved",
            extra={
                "plan_type": value.plan_type,
                "subscribed": value.subscribed,
                "has_error": value.error is not None,
                "action": "subscription_resolved",
                "component": "SubscriptionResolver",
            },
        )
        return True

    @staticmethod
    def _status_from(payload):
        payload = payload or {}
        plan = normalize_plan(payload.get("plan_type"))
        return SubscriptionStatus(
            subscribed=bool(payload.get("subscribed")),
            plan_type=plan.value,
            plan_expiry_date=payload.get("plan_expiry_date"),
        )

    def _fallback_status(self, identity, error):
        fallback = None
        if self._fallback_plan is not None:
            try:
                fallback = self._fallback_plan(identity)
            except Exception as fallback_error:
                logger.error(
                    "Fallback plan lookup failed, using free plan",
                    extra={
                        "error_type": type(fallback_error).__name__,
                        "error_message": str(fallback_error),
                        "action": "subscription_fallback_failed",
                        "component": "SubscriptionResolver",
                        "severity": "high",
                    },
                )

        plan = normalize_plan(fallback)
        logger.warning(
            "Subscription check failed, using fallback plan",
            extra={
                "fallback_plan": plan.value,
                "error_type": type(error).__name__,
                "error_message": str(error),
                "action": "subscription_check_failed",
                "component": "SubscriptionResolver",
            },
        )
        return SubscriptionStatus(
            subscribed=plan == PlanType.PRO,
            plan_type=plan.value,
            error=str(error) or type(error).__name__,
        )

    def tick(self):
        """Timer tick: refresh when a user is present."""
        return self.refresh()

    def handle_checkout_return(self, location):
        """
        Handle navigation back from the payment processor.

        The marker is always stripped. On success one extra refresh is
        scheduled after ``checkout_refresh_delay`` so the billing webhook
        has time to land.

        Args:
            location (str): Location containing ``?checkout=success|cancelled``

        Returns:
            tuple[str, str|None]: Clean location and the marker found
        """
        clean, marker = strip_checkout_marker(location)

        if marker == CHECKOUT_SUCCESS and self._identity is not None:
            with self._lock:
                if self._checkout_handle is not None:
                    self._checkout_handle.cancel()
                self._checkout_handle = self.scheduler.call_later(
                    self.checkout_refresh_delay,
                    partial(self._run_for, self._generation, self.refresh),
                )

        logger.info(
            "Checkout return handled",
            extra={
                "checkout": marker,
                "action": "checkout_return",
                "component": "SubscriptionResolver",
            },
        )
        return clean, marker

    def close(self):
        """Stop timers and drop the identity without a request."""
        self.set_user(None)

    # ---------------------------------------------------------------
    # Timers
    # ---------------------------------------------------------------

    def _schedule_poll(self, delay=None):
        with self._lock:
            if self._identity is None:
                return
            if self._poll_handle is not None:
                self._poll_handle.cancel()
            self._poll_handle = self.scheduler.call_later(
                self.poll_interval if delay is None else delay,
                partial(self._run_for, self._generation, self._poll),
            )

    def _poll(self):
        self.tick()
        self._schedule_poll()

    def _run_for(self, generation, callback):
        # Timers outliving an identity change do nothing
        if generation != self._generation:
            return
        callback()

    def _cancel_handles_locked(self):
        for handle in (self._poll_handle, self._checkout_handle):
            if handle is not None:
                handle.cancel()
        self._poll_handle = None
        self._checkout_handle = None
