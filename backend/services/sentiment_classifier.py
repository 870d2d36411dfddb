"""
sentiment_classifier.py - Journal Tone Classifier
Asks the structured-output provider to rate a journal entry's sentiment, tone,
urgency and stressors, then decodes the reply field by field with safe defaults.
"""

import json
from dataclasses import dataclass, field

from providers.base import BaseProvider


LABELS = ("Positive", "Neutral", "Negative")
URGENCY_LEVELS = ("None", "Low", "Medium", "High", "Critical")

SENTIMENT_SCHEMA = {
    "name": "journal_sentiment_enriched",
    "schema": {
        "type": "object",
        "properties": {
            "sentiment": {"type": "number", "minimum": -1, "maximum": 1},
            "label": {"type": "string", "enum": list(LABELS)},
            "tones": {"type": "array", "items": {"type": "string"}},
            "stressors": {"type": "array", "items": {"type": "string"}},
            "urgency": {"type": "string", "enum": list(URGENCY_LEVELS)},
            "summary": {"type": "string"},
        },
        "required": ["sentiment", "label", "tones", "stressors", "urgency", "summary"],
        "additionalProperties": False,
    },
    "strict": True,
}

SYSTEM_PROMPT = (
    "You are a mental health copilot that rates sentiment on a scale of -1 to 1 "
    "and classifies it as Positive, Neutral, or Negative."
)


class ClassifierError(Exception):
    """The provider failed or did not return a JSON object."""


@dataclass
class ClassifierPayload:
    sentiment: float = 0.0
    label: str = "Neutral"
    tones: list[str] = field(default_factory=list)
    stressors: list[str] = field(default_factory=list)
    urgency: str = "Low"
    summary: str = ""

    @property
    def positivity_tag(self) -> str:
        """Label joined with the first tone, or just the label when there are no tones."""
        if self.tones and self.tones[0]:
            return f"{self.label} • {self.tones[0]}"
        return self.label


@dataclass
class JournalAnalysisResult:
    entry_id: int
    sentiment: float
    label: str
    tones: list[str]
    stressors: list[str]
    urgency: str
    summary: str


def _strings(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def decode_payload(raw: dict) -> ClassifierPayload:
    """Coerce every field independently; wrong or missing fields get defaults."""
    sentiment = raw.get("sentiment")
    if isinstance(sentiment, bool) or not isinstance(sentiment, (int, float)):
        sentiment = 0.0
    label = raw.get("label")
    urgency = raw.get("urgency")
    summary = raw.get("summary")

    return ClassifierPayload(
        sentiment=float(sentiment),
        label=label if isinstance(label, str) else "Neutral",
        tones=_strings(raw.get("tones")),
        stressors=_strings(raw.get("stressors")),
        urgency=urgency if isinstance(urgency, str) else "Low",
        summary=summary if isinstance(summary, str) else "",
    )


def build_messages(entry_text: str) -> list[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f'Journal entry: "{entry_text}". Evaluate the tone, urgency, and primary stressors. '
                "Reply in JSON that includes sentiment (-1 to 1), label (Positive|Neutral|Negative), "
                "tones (array of concise emotional descriptors), stressors (array of distinct stress "
                "triggers mentioned), urgency (None|Low|Medium|High|Critical), and a one sentence summary "
                "contextualizing the entry. Always include every field even if arrays are empty or "
                "urgency is None."
            ),
        },
    ]


class SentimentClassifier:
    """Classifier client around a structured-output provider."""

    def __init__(self, provider: BaseProvider, model: str | None = None):
        self.provider = provider
        self.model = model

    async def classify(self, entry_text: str) -> ClassifierPayload:
        result = await self.provider.structured(build_messages(entry_text), SENTIMENT_SCHEMA, self.model)
        if result.get("status") != "success":
            raise ClassifierError(result.get("error") or f"{self.provider.name} returned an error")

        try:
            raw = json.loads(result.get("text") or "{}")
        except json.JSONDecodeError as e:
            raise ClassifierError(f"Unparsable classifier output: {e}") from e
        if not isinstance(raw, dict):
            raise ClassifierError("Classifier output is not a JSON object")

        return decode_payload(raw)
