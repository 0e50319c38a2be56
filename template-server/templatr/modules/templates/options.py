"""Template flags, lifecycle states and notification names."""

from __future__ import annotations

from enum import Enum, IntFlag

DEFAULT_TEMPLATE_NAME = "template.htm"
DEFAULT_LOCATION_ORIGIN = "http://domain"

# Fired once per request after the scripts ran; listeners receive the PageResponse.
INSTANCE_READY_EVENT = "ready"

# Fired once when every script has loaded and the template can serve requests.
TEMPLATE_PREPARED_EVENT = "initialised"


class TemplateOption(IntFlag):
    NONE = 0
    REMOVE_WHITE_SPACE = 1
    MERGE_SCRIPTS = 2
    VERBOSE = 4


class TemplateState(str, Enum):
    LOADING = "loading"
    READY = "ready"
