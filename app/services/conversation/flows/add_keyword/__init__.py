from .add_keyword_flow import AddKeywordFlow

__all__ = ["AddKeywordFlow"]
