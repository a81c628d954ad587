from .appender import AppendStatus, FileAppender, ResilientAppender

__all__ = ["AppendStatus", "FileAppender", "ResilientAppender"]
