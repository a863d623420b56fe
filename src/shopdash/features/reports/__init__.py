"""Dashboard reporting for shopdash.

Sales over time (daily, weekly, monthly and yearly), single-day and
current-period drill-downs, and product saleability and performance tiers.
The engine modules (periods, filters, aggregator, classifier) are pure; the
repository is the only part that talks to the database.
"""
