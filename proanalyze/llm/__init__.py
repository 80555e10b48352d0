"""Completion service client and invocation policy."""

from .invoker import Completer, ResilientInvoker
from .runner import CompletionClient, CompletionRequest

__all__ = ["Completer", "CompletionClient", "CompletionRequest", "ResilientInvoker"]
