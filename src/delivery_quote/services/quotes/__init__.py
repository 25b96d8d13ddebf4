"""Quote orchestration exports."""

from .fallback import build_fallback_quote
from .service import (
    QuoteDependencies,
    build_quote_dependencies,
    get_quote,
    get_quote_dependencies,
    preview_quote,
)

__all__ = [
    "QuoteDependencies",
    "build_fallback_quote",
    "build_quote_dependencies",
    "get_quote",
    "get_quote_dependencies",
    "preview_quote",
]
