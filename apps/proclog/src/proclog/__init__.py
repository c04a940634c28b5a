def __getattr__(name: str):
    if name == "init_logging":
        from proclog.logging.selector import init_logging

        return init_logging
    if name == "summarize_log":
        from proclog.logging.digest import summarize_log

        return summarize_log
    raise AttributeError(f"module 'proclog' has no attribute {name}")


__all__ = ["init_logging", "summarize_log"]
