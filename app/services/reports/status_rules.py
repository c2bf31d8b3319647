# services/reports/status_rules.py
"""
Effective account status.

The stored ``status`` only records what an admin set. The status reports show
is derived at read time from the stored status, the suspension expiry and the
last login. ``STATUS_RULES`` is the single ordered rule table; it is evaluated
in Python by :func:`derive_actual_status` and compiled into an aggregation
``$switch`` by :func:`actual_status_expression`, so both paths agree.

First matching rule wins:

1. ``BLOCKED``                                  -> BLOCKED
2. ``SUSPENDED`` with ``suspensionUntil`` past  -> ACTIVE (suspension ended)
3. ``SUSPENDED``                                -> SUSPENDED
4. ``lastLoginAt`` older than the window        -> INACTIVE
5. otherwise                                    -> ACTIVE
"""
from collections import namedtuple
from datetime import timedelta

from ...constants.service_code import ACCOUNT_STATUS
from ...utils.helpers import utc_now, to_naive_utc


INACTIVITY_WINDOW_DAYS = 60
SYSTEM_ACTOR = "system"

StatusRule = namedtuple("StatusRule", ["name", "status", "matches", "condition"])


def _present(field):
    return {"$ne": [{"$ifNull": [f"${field}", None]}, None]}


def _is_blocked(user, now, cutoff):
    return user.get("status") == ACCOUNT_STATUS["BLOCKED"]


def _suspension_lapsed(user, now, cutoff):
    until = to_naive_utc(user.get("suspensionUntil"))
    return (
        user.get("status") == ACCOUNT_STATUS["SUSPENDED"]
        and until is not None
        and now > until
    )


def _is_suspended(user, now, cutoff):
    return user.get("status") == ACCOUNT_STATUS["SUSPENDED"]


def _is_dormant(user, now, cutoff):
    last_login = to_naive_utc(user.get("lastLoginAt"))
    return last_login is not None and last_login < cutoff


STATUS_RULES = (
    StatusRule(
        "blocked",
        ACCOUNT_STATUS["BLOCKED"],
        _is_blocked,
        lambda now, cutoff: {"$eq": ["$status", ACCOUNT_STATUS["BLOCKED"]]},
    ),
    StatusRule(
        "suspension_lapsed",
        ACCOUNT_STATUS["ACTIVE"],
        _suspension_lapsed,
        lambda now, cutoff: {"$and": [
            {"$eq": ["$status", ACCOUNT_STATUS["SUSPENDED"]]},
            _present("suspensionUntil"),
            {"$lt": ["$suspensionUntil", now]},
        ]},
    ),
    StatusRule(
        "suspended",
        ACCOUNT_STATUS["SUSPENDED"],
        _is_suspended,
        lambda now, cutoff: {"$eq": ["$status", ACCOUNT_STATUS["SUSPENDED"]]},
    ),
    StatusRule(
        "dormant",
        ACCOUNT_STATUS["INACTIVE"],
        _is_dormant,
        lambda now, cutoff: {"$and": [
            _present("lastLoginAt"),
            {"$lt": ["$lastLoginAt", cutoff]},
        ]},
    ),
)

DEFAULT_STATUS = ACCOUNT_STATUS["ACTIVE"]


def inactivity_cutoff(now, window_days=INACTIVITY_WINDOW_DAYS):
    return now - timedelta(days=window_days)


def match_status_rule(user, now=None, window_days=INACTIVITY_WINDOW_DAYS):
    """Return the first rule matching ``user``, or None for the default."""
    now = to_naive_utc(now) if now is not None else utc_now()
    cutoff = inactivity_cutoff(now, window_days)
    for rule in STATUS_RULES:
        if rule.matches(user, now, cutoff):
            return rule
    return None


def derive_actual_status(user, now=None, window_days=INACTIVITY_WINDOW_DAYS):
    """
    Effective status details for a user-like mapping. Pure: nothing is
    written back to the user document.
    """
    now = to_naive_utc(now) if now is not None else utc_now()
    rule = match_status_rule(user, now, window_days)

    details = {
        "actualStatus": DEFAULT_STATUS,
        "actualStatusReason": user.get("statusReason") or None,
        "actualStatusChangedAt": user.get("statusChangedAt"),
        "actualStatusChangedBy": user.get("statusChangedBy"),
        "actualSuspensionUntil": user.get("suspensionUntil"),
    }

    if rule is None:
        return details

    details["actualStatus"] = rule.status

    if rule.name == "blocked":
        details["actualStatusReason"] = user.get("statusReason") or "Account blocked by admin"
    elif rule.name == "suspension_lapsed":
        details["actualStatusReason"] = "Suspension period ended"
        details["actualStatusChangedAt"] = now
        details["actualStatusChangedBy"] = SYSTEM_ACTOR
    elif rule.name == "suspended":
        details["actualStatusReason"] = user.get("statusReason") or "Account temporarily suspended"
    elif rule.name == "dormant":
        details["actualStatusReason"] = f"No activity for {window_days}+ days"
        details["actualStatusChangedAt"] = user.get("lastLoginAt")
        details["actualStatusChangedBy"] = SYSTEM_ACTOR

    return details


def actual_status_expression(now, window_days=INACTIVITY_WINDOW_DAYS):
    """The same rule table as an aggregation ``$switch`` expression."""
    now = to_naive_utc(now)
    cutoff = inactivity_cutoff(now, window_days)
    return {
        "$switch": {
            "branches": [
                {"case": rule.condition(now, cutoff), "then": rule.status}
                for rule in STATUS_RULES
            ],
            "default": DEFAULT_STATUS,
        }
    }
