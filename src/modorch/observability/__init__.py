"""modorch observability package.

Re-exports the diagnostic helpers::

    from modorch.observability import ContextLogger, report_warning
"""

from modorch.observability.context_logger import ContextLogger, report_warning

__all__ = [
    "ContextLogger",
    "report_warning",
]
