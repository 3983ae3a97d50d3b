from assistant.intent.classifier import (
    Intent,
    IntentClassifier,
    KeywordIntentClassifier,
    Mode,
    classify,
)

__all__ = ["Intent", "IntentClassifier", "KeywordIntentClassifier", "Mode", "classify"]
