"""Shared type aliases used across frontdoor modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Adapter: receives the Request, returns a response value
Handler: TypeAlias = Callable[..., Any]

# Lifecycle hook or background task: zero-argument callable
Hook: TypeAlias = Callable[[], Any]
