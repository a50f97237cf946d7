from prometheus_client import Counter, Histogram


# Request and quote metrics
requests_created_total = Counter("marketplace_requests_created_total", "Maintenance requests posted", ["category"])
quotes_submitted_total = Counter("marketplace_quotes_submitted_total", "Quotes submitted", ["status"])
quote_decisions_total = Counter(
    "marketplace_quote_decisions_total", "Buyer decisions on quotes", ["decision"]
)
quote_price = Histogram(
    "marketplace_quote_price",
    "Quoted price distribution (SAR)",
    buckets=[100, 500, 1000, 2500, 5000, 10000, 50000, 100000, float("inf")],
)

# Booking metrics
booking_transitions_total = Counter(
    "marketplace_booking_transitions_total", "Booking status changes", ["status"]
)

# Contract metrics
contracts_created_total = Counter("marketplace_contracts_created_total", "Contracts created", ["flow"])
contract_signatures_total = Counter("marketplace_contract_signatures_total", "Contract signatures", ["party"])
contracts_executed_total = Counter("marketplace_contracts_executed_total", "Contracts executed by both parties")

# Completion metrics
jobs_completed_total = Counter("marketplace_jobs_completed_total", "Jobs completed", ["kind"])
completion_nudges_total = Counter("marketplace_completion_nudges_total", "Warranty nudges sent", ["step"])
jobs_auto_closed_total = Counter("marketplace_jobs_auto_closed_total", "Jobs auto-closed without warranty")

# Review metrics
reviews_created_total = Counter("marketplace_reviews_created_total", "Seller reviews created")
review_rating = Histogram("marketplace_review_rating", "Review rating distribution", buckets=[1, 2, 3, 4, 5])

# Notification metrics
notifications_sent_total = Counter("marketplace_notifications_sent_total", "Notifications created", ["type"])
notifications_deduplicated_total = Counter(
    "marketplace_notifications_deduplicated_total", "Notifications skipped as duplicates", ["type"]
)

# History metrics
history_build_duration = Histogram("marketplace_history_build_seconds", "History reconciliation time", ["role"])
