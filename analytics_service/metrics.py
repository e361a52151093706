from prometheus_client import Counter

MESSAGES_CONSUMED = Counter(
    "analytics_messages_consumed_total",
    "Kafka messages consumed by analytics service",
    ["topic", "status"],  # status: stored | dlq
)
