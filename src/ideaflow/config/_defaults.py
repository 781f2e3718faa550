"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.

Note: DEFAULT_CONFIG is a plain dict for type compatibility with
deep_merge. The merge functions create copies, so the original is never
mutated.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "storage": {
        "backend": "sqlite",
        "path": "",
        "key_prefix": "wheel99",
    },
    "workflow": {
        "autosave_interval": 30.0,
        "route": "/idea-hub/refinement",
        "initial_step": 0,
    },
    "remote": {
        "base_url": "",
        "api_key": "",
        "timeout": 30.0,
        "max_retries": 3,
    },
    "features": {
        "overrides": {
            "enhanced_idea_generation": True,
        },
        "disabled_contexts": {
            "enhanced_idea_generation": ["standup"],
        },
    },
}
