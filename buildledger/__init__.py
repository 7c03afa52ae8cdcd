"""buildledger: read-only queries over pipeline target metadata.

Answers two questions about a pipeline store:
  - which targets were last built before a point in time (stale targets)
  - which targets failed (or built, were canceled, skipped) on their last run

Both accept an optional name selection: literal names or selector helpers
such as ``starts_with("y_")``.
"""

__version__ = "0.1.0"
__description__ = "Read-only stale-target and progress queries for pipeline stores"

from buildledger.core.queries import (
    find_built,
    find_canceled,
    find_errored,
    find_older_than,
    find_progress,
    find_skipped,
)
from buildledger.core.selection import (
    all_of,
    contains,
    ends_with,
    everything,
    matches,
    starts_with,
)

__all__ = [
    "find_older_than",
    "find_errored",
    "find_progress",
    "find_built",
    "find_canceled",
    "find_skipped",
    "everything",
    "all_of",
    "starts_with",
    "ends_with",
    "contains",
    "matches",
    "__version__",
]
