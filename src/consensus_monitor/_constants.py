"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# Metric kind acceptance ranges  (wire tag → inclusive [min, max])
# ------------------------------------------------------------------

KIND_SLUGS: dict[int, str] = {
    1: "consensus-latency",
    2: "block-propagation",
    3: "tx-validation-time",
    4: "mempool-size",
    5: "node-availability",
    6: "network-throughput",
    7: "staker-participation",
    8: "peer-connectivity",
}

KIND_RANGES: dict[int, tuple[int, int]] = {
    1: (100, 5000),
    2: (500, 10000),
    3: (10, 1000),
    4: (0, 10000),
    5: (0, 100),
    6: (0, 100000),
    7: (0, 100),
    8: (0, 10000),
}

#: Annotations are bounded UTF-8 strings.
ANNOTATION_MAX_LENGTH = 256

# ------------------------------------------------------------------
# Error codes carried by ObservationError subclasses
# ------------------------------------------------------------------

ERR_UNAUTHORIZED = 100
ERR_INVALID_KIND = 101
ERR_INVALID_MEASUREMENT = 102
ERR_RECORD_NOT_FOUND = 103
ERR_FUTURE_TIMESTAMP = 104
