from prometheus_client import Counter


# Lifecycle Metrics
project_transitions_total = Counter(
    "codemart_project_transitions_total", "Project lifecycle transitions", ["action", "outcome"]
)

# Marketplace Metrics
listing_changes_total = Counter("codemart_listing_changes_total", "Listing create/update/unlist calls", ["action"])
purchases_total = Counter("codemart_purchases_total", "Direct purchase attempts", ["outcome"])
