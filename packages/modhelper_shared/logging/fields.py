"""Canonical logging field names for structured host logs.

Keeping names centralized prevents drift between the lifecycle core, the
scheduler and the command-line entrypoint.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Mod attribution fields.
MOD = "mod"
AUTHOR = "author"
MOD_VERSION = "mod_version"

# Unit-of-work fields.
PATCH_TYPE = "patch_type"
CONTENT = "content"
TASK = "task"
PHASE = "phase"
ERROR_CATEGORY = "error_category"

# Lifecycle and scheduler events.
PATCH_FAILED_EVENT = "patch_failed"
REGISTRATION_FAILED_EVENT = "registration_failed"
TASK_STARTED_EVENT = "load_task_started"
TASK_FINISHED_EVENT = "load_task_finished"
ORDERING_HAZARD_EVENT = "id_prefix_ordering_hazard"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
