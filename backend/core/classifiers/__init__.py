from backend.core.classifiers.keywords import NEGATIVE_KEYWORDS, is_negative_comment

__all__ = ["NEGATIVE_KEYWORDS", "is_negative_comment"]
