"""Pattern compiler: Python ``re`` syntax to pattern trees."""

from regex_specificity.syntax.parser import DEFAULT_NEST_LIMIT, SUPPORTED_FLAGS, compile_pattern

__all__ = ["DEFAULT_NEST_LIMIT", "SUPPORTED_FLAGS", "compile_pattern"]
