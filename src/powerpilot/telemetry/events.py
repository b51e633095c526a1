"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying and analysis.
"""

# Sampling events
SENSOR_POLL = "sensor_poll"
PROVIDER_POLL_FAILED = "provider_poll_failed"
BATTERY_QUERY_FAILED = "battery_query_failed"
POLL_DELIVERY_SKIPPED = "poll_delivery_skipped"
POLL_RESULT_DISCARDED = "poll_result_discarded"
POLL_CONSUMER_FAILED = "poll_consumer_failed"
SCHEDULER_STARTED = "poll_scheduler_started"
SCHEDULER_STOPPED = "poll_scheduler_stopped"
POLL_INTERVAL_CHANGED = "poll_interval_changed"

# Policy events
MODE_RECOMMENDED = "mode_recommended"
MODE_TRANSITION = "mode_transition"
AUTO_MODE_CHANGED = "auto_mode_changed"
DEBOUNCE_INTERVAL_CHANGED = "debounce_interval_changed"
SCHEME_APPLY_FAILED = "scheme_apply_failed"
SCHEME_BINDING_MISSING = "scheme_binding_missing"
SCHEME_QUERY_FAILED = "scheme_query_failed"

# Side-effect events
BRIGHTNESS_RESTORED = "brightness_restored"
BRIGHTNESS_RESTORE_FAILED = "brightness_restore_failed"
TINT_APPLIED = "tint_applied"
TINT_RESTORED = "tint_restored"
TINT_BACKEND_FAILED = "tint_backend_failed"

# Engine events
ENGINE_STARTED = "engine_started"
ENGINE_STOPPED = "engine_stopped"
READING_LISTENER_FAILED = "reading_listener_failed"
