"""
Prometheus Metrics

Defines the Prometheus metrics of the authentication app (logins, registrations,
tokens, profiles and vendors). Exposed at /api/auth/metrics/ for Prometheus scraping.
"""

from prometheus_client import Counter, Histogram

# ===== Login Metrics =====

login_total = Counter("auth_login_total", "Total login attempts", ["status"])
"""
Total login attempts counter.
Labels: status (success/failed)

Example:
    login_total.labels(status='success').inc()
"""

login_failed = Counter("auth_login_failed", "Failed login attempts", ["reason"])
"""
Failed login attempts counter.
Labels: reason (user_not_found, wrong_password, account_disabled)
"""

login_duration = Histogram(
    "auth_login_duration_seconds", "Login request duration in seconds", buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0]
)
"""
Login duration histogram.

Example:
    with login_duration.time():
        # Login logic here
        pass
"""


# ===== Registration Metrics =====

registration_total = Counter("auth_registration_total", "Total registration attempts", ["status"])

registration_failed = Counter("auth_registration_failed", "Failed registration attempts", ["reason"])
"""
Failed registrations counter.
Labels: reason (already_exists, invalid_role, internal_error)
"""


# ===== JWT Metrics =====

jwt_generation_total = Counter("auth_jwt_generation_total", "Total JWT tokens generated", ["token_type"])


# ===== Profile and Vendor Metrics =====

profile_updates_total = Counter("auth_profile_updates_total", "Total profile updates")

vendor_searches_total = Counter("auth_vendor_searches_total", "Total vendor discovery searches")

saved_vendors_total = Counter("auth_saved_vendors_total", "Vendors saved or unsaved by buyers", ["action"])

mock_vendors_generated = Counter(
    "auth_mock_vendors_generated_total", "System generated vendors created", ["kind"]
)
"""
Mock vendor generation counter.
Labels: kind (company/regular)
"""


# ===== Helper Functions =====


def record_login_attempt(success: bool, reason: str = None):
    """
    Record login attempt metrics.

    Args:
        success: Whether login was successful
        reason: Failure reason (if failed)
    """
    status = "success" if success else "failed"
    login_total.labels(status=status).inc()

    if not success and reason:
        login_failed.labels(reason=reason).inc()


def record_registration_attempt(success: bool, reason: str = None):
    """
    Record registration attempt metrics.

    Args:
        success: Whether registration was successful
        reason: Failure reason (if failed)
    """
    status = "success" if success else "failed"
    registration_total.labels(status=status).inc()

    if not success and reason:
        registration_failed.labels(reason=reason).inc()
