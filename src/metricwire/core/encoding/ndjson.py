"""NDJSON encoders for sources, metric names and samples."""

import json
from collections.abc import Iterable

from metricwire.core.models import Sample, SourceInfo


def encode_ndjson(objects: Iterable[dict[str, object]]) -> str:
    """Encode dictionaries to newline-delimited JSON.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if there are no objects.
    """
    lines = [json.dumps(obj) for obj in objects]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def encode_sources(sources: Iterable[SourceInfo]) -> str:
    """Encode registered sources, one ``{"name", "kind"}`` object per line."""
    return encode_ndjson({"name": s.name, "kind": s.kind} for s in sources)


def encode_metric_names(source_name: str, names: Iterable[str]) -> str:
    """Encode a source's metric names."""
    return encode_ndjson({"source": source_name, "metric": name} for name in names)


def encode_samples(source_name: str, metric_name: str, samples: Iterable[Sample]) -> str:
    """Encode a metric's samples, preserving their order.

    Args:
        source_name: Owning source.
        metric_name: Metric the samples belong to.
        samples: Samples, oldest first.

    Returns:
        NDJSON string with one sample per line.
    """
    return encode_ndjson(
        {
            "source": source_name,
            "metric": metric_name,
            "timestamp": sample.timestamp,
            "value": sample.value,
        }
        for sample in samples
    )
