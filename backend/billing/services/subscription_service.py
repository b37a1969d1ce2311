"""
Per-user subscription status for the API.

The last confirmed billing payload of each user is kept in the Django cache
for ``SALDUS_SUBSCRIPTION_TTL_SECONDS``, so every worker shares it. Each
process also keeps a bounded, least-recently-used registry of
``SubscriptionResolver`` objects that own the in-flight flag and timers.
A resolver created for a user with a cached payload starts from it
without a remote call.

Resolvers run on a ``ManualScheduler`` drained on every read, so the
polling timer and the delayed post-checkout refresh fire on the first
request after they are due and no background threads are started.
"""

import logging
import threading
import time
from collections import OrderedDict, namedtuple

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils.dateparse import parse_datetime

from ..gateway import StripeGateway
from ..plans import PlanType, normalize_plan
from ..resolver import (
    CHECKOUT_SUCCESS,
    ManualScheduler,
    ResolverState,
    SubscriptionResolver,
    SubscriptionStatus,
)

# Get structured logger for this module
logger = logging.getLogger(__name__)

Identity = namedtuple("Identity", ["id", "email"])

DEFAULT_REGISTRY_SIZE = 1000

_registry = OrderedDict()
_registry_lock = threading.Lock()


def status_cache_key(user_id):
    return f"subscription_status_{user_id}"


def reset_registry():
    """Drop every resolver held by this process."""
    with _registry_lock:
        resolvers = list(_registry.values())
        _registry.clear()
    for resolver in resolvers:
        resolver.close()


class SubscriptionService:
    """
    Service exposing the resolver to views and permissions.

    Args:
        gateway: Payment processor gateway, ``StripeGateway`` by default
        clock: Monotonic clock used by new resolvers
    """

    def __init__(self, gateway=None, clock=time.monotonic):
        self.gateway = gateway or StripeGateway()
        self.clock = clock

    @property
    def ttl(self):
        return getattr(settings, "SALDUS_SUBSCRIPTION_TTL_SECONDS", 300)

    # ---------------------------------------------------------------
    # Shared status cache
    # ---------------------------------------------------------------

    def _fetch_status(self, identity):
        payload = self.gateway.check_subscription(identity.email)
        cache.set(
            status_cache_key(identity.id),
            {"email": identity.email, "payload": payload, "fetched_at": time.time()},
            self.ttl,
        )
        return payload

    @staticmethod
    def _cached_payload(identity):
        """Payload and its age from the shared cache, when it matches the identity."""
        cached = cache.get(status_cache_key(identity.id))
        if not cached or cached.get("email") != identity.email:
            return None, 0.0
        return cached["payload"], max(0.0, time.time() - cached["fetched_at"])

    @staticmethod
    def _fallback_plan(identity):
        return (
            get_user_model()
            .objects.filter(pk=identity.id)
            .values_list("plan_type", flat=True)
            .first()
        )

    # ---------------------------------------------------------------
    # Resolver registry
    # ---------------------------------------------------------------

    def resolver_for(self, user):
        """
        Resolver bound to the user, created on first use.

        A changed e-mail counts as a new identity and triggers a refresh.
        When the registry is full the least recently used resolver is
        dropped.
        """
        identity = Identity(user.id, user.email)
        limit = getattr(settings, "SALDUS_SUBSCRIPTION_REGISTRY_SIZE", DEFAULT_REGISTRY_SIZE)
        evicted = []

        with _registry_lock:
            resolver = _registry.get(user.id)
            if resolver is None:
                resolver = SubscriptionResolver(
                    fetch_status=self._fetch_status,
                    fallback_plan=self._fallback_plan,
                    clock=self.clock,
                    scheduler=ManualScheduler(self.clock),
                    poll_interval=self.ttl,
                    checkout_refresh_delay=getattr(
                        settings, "SALDUS_CHECKOUT_REFRESH_DELAY_SECONDS", 2
                    ),
                )
                _registry[user.id] = resolver
            _registry.move_to_end(user.id)
            while len(_registry) > limit:
                evicted.append(_registry.popitem(last=False)[1])

        for stale in evicted:
            stale.close()
        if evicted:
            logger.debug(
                "Idle subscription resolvers evicted",
                extra={
                    "evicted": len(evicted),
                    "action": "subscription_registry_evicted",
                    "component": "SubscriptionService",
                },
            )

        if resolver.identity != identity:
            known, age = self._cached_payload(identity)
            resolver.set_user(identity, known=known, known_age=age)
        return resolver

    def forget(self, user):
        """Reset the user's resolver to the logged-out state and drop it."""
        cache.delete(status_cache_key(user.id))
        with _registry_lock:
            resolver = _registry.pop(user.id, None)
        if resolver is not None:
            resolver.close()
            logger.info(
                "Subscription state cleared",
                extra={
                    "user_id": user.id,
                    "action": "subscription_forgotten",
                    "component": "SubscriptionService",
                },
            )

    # ---------------------------------------------------------------
    # Status
    # ---------------------------------------------------------------

    def get_status(self, user, refresh=False):
        """
        Current subscription status of a user.

        Due timers run first; an unknown or stale entry is refreshed
        before answering. While the first lookup of a user is still in
        flight the plan stored on the profile is answered.

        Args:
            user: Authenticated user
            refresh (bool): Force a new lookup

        Returns:
            SubscriptionStatus: Resolved status
        """
        resolver = self.resolver_for(user)
        resolver.scheduler.run_due()

        if refresh or resolver.state in (ResolverState.UNKNOWN, ResolverState.STALE):
            resolver.refresh()

        status = resolver.status
        if not resolver.resolved:
            return self._profile_status(user, is_loading=status.is_loading)

        if not status.is_loading and status.error is None:
            self._sync_user(user, status)
        return status

    def plan_for(self, user):
        """Resolved plan of the user as ``PlanType``."""
        return normalize_plan(self.get_status(user).plan_type)

    @staticmethod
    def _profile_status(user, is_loading):
        plan = normalize_plan(user.plan_type)
        expiry = user.plan_expiry_date
        return SubscriptionStatus(
            subscribed=plan == PlanType.PRO,
            plan_type=plan.value,
            plan_expiry_date=expiry.isoformat() if expiry else None,
            is_loading=is_loading,
        )

    @staticmethod
    def _sync_user(user, status):
        """Mirror a confirmed status on the profile so it can serve as fallback."""
        expiry = parse_datetime(status.plan_expiry_date) if status.plan_expiry_date else None
        if user.plan_type == status.plan_type and user.plan_expiry_date == expiry:
            return

        user.plan_type = status.plan_type
        user.plan_expiry_date = expiry
        user.save(update_fields=["plan_type", "plan_expiry_date"])

        logger.info(
            "Profile plan synchronized",
            extra={
                "user_id": user.id,
                "plan_type": status.plan_type,
                "action": "profile_plan_synced",
                "component": "SubscriptionService",
            },
        )

    # ---------------------------------------------------------------
    # Checkout and portal
    # ---------------------------------------------------------------

    @staticmethod
    def resolve_origin(request):
        """
        Base URL for redirects back to the frontend.

        The request ``Origin`` is used only when it is a known frontend.
        """
        frontend = settings.FRONTEND_URL.rstrip("/")
        origin = (request.headers.get("Origin") or "").rstrip("/")
        allowed = {value.rstrip("/") for value in getattr(settings, "CORS_ALLOWED_ORIGINS", [])}
        allowed.add(frontend)
        return origin if origin in allowed else frontend

    def create_checkout(self, user, origin):
        return self.gateway.create_checkout(user, origin)

    def open_customer_portal(self, user, origin):
        return self.gateway.customer_portal(user, origin)

    def handle_checkout_return(self, user, location):
        """
        Strip the checkout marker and schedule the post-payment refresh.

        Returns:
            dict: ``{"location": str, "checkout": str|None}``
        """
        clean, marker = self.resolver_for(user).handle_checkout_return(location)
        if marker == CHECKOUT_SUCCESS:
            # New resolvers must not start from the pre-payment payload
            cache.delete(status_cache_key(user.id))
        return {"location": clean, "checkout": marker}
