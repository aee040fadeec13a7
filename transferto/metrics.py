from prometheus_client import Counter, Histogram

transferto_requests_total = Counter(
    "transferto_requests_total",
    "Requests sent to the TransferTo API",
    ["action", "outcome"],
)
transferto_request_latency_seconds = Histogram(
    "transferto_request_latency_seconds",
    "Round-trip time of TransferTo API requests",
    ["action"],
)
