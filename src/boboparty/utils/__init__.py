from .formatting import FormattingUtils

__all__ = ["FormattingUtils"]
