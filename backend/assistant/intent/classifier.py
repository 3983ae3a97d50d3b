"""
Intent classification for assistant chat messages.

A plain ordered rule table: the first pattern that matches the message
decides the handling mode. Matching is case-insensitive substring search,
so "update the documentation" is an edit. That is accepted.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class Mode(Enum):
    INFRA_CODE = "infra_code"
    EDIT = "edit"
    CODE_SNIPPET = "code_snippet"
    INFO = "info"


@dataclass(frozen=True)
class Intent:
    mode: Mode
    preferred_language: str  # "python" | "typescript"


INFRA_CODE_PATTERN = re.compile(
    r"cdk|infrastructure as code|iac|cloudformation|terraform|generate code"
    r"|code generation|python.*code|implementation|aws sdk",
    re.IGNORECASE,
)
EDIT_PATTERN = re.compile(
    r"update|edit|change|modify|add|remove|delete|connect|disconnect|create|revise",
    re.IGNORECASE,
)
CODE_SNIPPET_PATTERN = re.compile(
    r"code|script|program|function|class|implementation|example|snippet",
    re.IGNORECASE,
)
PYTHON_PATTERN = re.compile(r"python", re.IGNORECASE)

# Order matters: first match wins. A message that also matched the
# infra-code rule never reaches the snippet rule.
INTENT_RULES: List[Tuple[re.Pattern, Mode]] = [
    (INFRA_CODE_PATTERN, Mode.INFRA_CODE),
    (EDIT_PATTERN, Mode.EDIT),
    (CODE_SNIPPET_PATTERN, Mode.CODE_SNIPPET),
]


def detect_language(message: str) -> str:
    return "python" if PYTHON_PATTERN.search(message) else "typescript"


class IntentClassifier(ABC):
    @abstractmethod
    def classify(self, message: str) -> Intent:
        """Decide how a chat message should be handled"""
        pass


class KeywordIntentClassifier(IntentClassifier):
    def __init__(self, rules: List[Tuple[re.Pattern, Mode]] = None, default: Mode = Mode.INFO):
        self.rules = rules if rules is not None else INTENT_RULES
        self.default = default

    def classify(self, message: str) -> Intent:
        text = message or ""
        mode = self.default
        for pattern, rule_mode in self.rules:
            if pattern.search(text):
                mode = rule_mode
                break

        return Intent(mode=mode, preferred_language=detect_language(text))


_default_classifier = KeywordIntentClassifier()


def classify(message: str) -> Intent:
    return _default_classifier.classify(message)
