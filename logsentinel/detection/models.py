"""Detection data models."""

from pydantic import BaseModel, Field


class AnomalyVerdict(BaseModel):
    """Outcome of checking one log line against the baseline.

    Attributes:
        is_anomalous: True when no baseline entry is similar enough.
        score: Cosine similarity to the nearest baseline entry, or 0.0 when
            the baseline is empty.
        log_entry: The checked log line, unchanged.
    """

    is_anomalous: bool = Field(description="Whether the log is anomalous")
    score: float = Field(description="Similarity to the nearest baseline entry")
    log_entry: str = Field(description="Checked log line")
