import functools


def singleton(func):
    """
    Decorator for a zero-state factory function.
    The first return value is cached on the wrapper and returned
    thereafter; ``wrapper.reset()`` drops it (tests only).
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not hasattr(wrapper, "_instance"):
            wrapper._instance = func(*args, **kwargs)
        return wrapper._instance

    def reset():
        if hasattr(wrapper, "_instance"):
            del wrapper._instance

    wrapper.reset = reset
    return wrapper
