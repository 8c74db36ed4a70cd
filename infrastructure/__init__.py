"""
SUBISO INFRASTRUCTURE - Support Modules Around the Search

This package contains:
- config: TOML-backed SearchSettings loading and logger levels
- diagnostics: state/graph printers and profiling observers
- deadline: external timeout and cancellation for long searches
"""

from infrastructure.config import (
    load_toml_config,
    load_settings,
    settings_from_dict,
    configure_logging,
)
from infrastructure.diagnostics import (
    format_search_state,
    format_graph,
    StateDumpObserver,
    DepthProfile,
)
from infrastructure.deadline import (
    DeadlineObserver,
    CancelObserver,
    find_subgraph_with_deadline,
    match_subgraph_with_deadline,
)

__all__ = [
    "load_toml_config",
    "load_settings",
    "settings_from_dict",
    "configure_logging",
    "format_search_state",
    "format_graph",
    "StateDumpObserver",
    "DepthProfile",
    "DeadlineObserver",
    "CancelObserver",
    "find_subgraph_with_deadline",
    "match_subgraph_with_deadline",
]
