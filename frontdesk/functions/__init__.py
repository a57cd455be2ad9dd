"""Named booking functions with alias-tolerant parameter handling"""

from .registry import FUNCTION_REGISTRY, call_function

__all__ = ["FUNCTION_REGISTRY", "call_function"]
