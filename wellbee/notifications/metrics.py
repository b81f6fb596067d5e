from prometheus_client import Counter


notifications_emitted_total = Counter(
    "wellbee_notifications_emitted_total",
    "Notifications created by domain events",
    ["type"],
)

notifications_emit_failed_total = Counter(
    "wellbee_notifications_emit_failed_total",
    "Notification creations that failed and were swallowed",
    ["type"],
)
