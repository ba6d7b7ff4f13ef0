"""Execution subsystem — runnables, redirection, and pipelines.

Re-exports public symbols so callers can write::

    from py_shell.execution import PipelineExecutor, Runnable, find_redirection
"""

from py_shell.execution.pipeline import PIPE, PipelineExecutor, split_pipeline
from py_shell.execution.redirection import (
    RedirectionSpec,
    RedirectMode,
    RedirectStream,
    find_redirection,
    is_redirect_operator,
    redirected,
)
from py_shell.execution.runnable import Runnable, RunnableKind, RunnableState

__all__ = [
    "PIPE",
    "PipelineExecutor",
    "RedirectMode",
    "RedirectStream",
    "RedirectionSpec",
    "Runnable",
    "RunnableKind",
    "RunnableState",
    "find_redirection",
    "is_redirect_operator",
    "redirected",
    "split_pipeline",
]
