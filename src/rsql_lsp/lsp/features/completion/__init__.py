from .completion import provide_completions, register_completion

__all__ = ["provide_completions", "register_completion"]
