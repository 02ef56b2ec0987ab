"""Read collected families back as logical observations.

prometheus_client encodes part of a metric's identity in sample-name
suffixes (``_bucket``, ``_sum``, ``_count``, ``_created``) and in the
``quantile``/``le`` labels. The reader folds the suffixes back into the label
values so every sample is addressed by (category, logical name, labels):

  histogram  foo_bucket{a, le}  -> foo [a, "bucket", le]
             foo_sum{a}         -> foo [a, "sum"]
  summary    foo{a, quantile}   -> foo [a, "quantile", q]
             foo_count{a}       -> foo [a, "count"]
  counter    foo_total{a}       -> foo or foo_total (see NameCodec)
             foo_created{a}     -> ... [a, "created"]
  other      name unchanged, labels unchanged
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from prometheus_client.core import Metric
from prometheus_client.samples import Sample

from .categories import MetricCategory
from .naming import NameCodec


@dataclass(frozen=True)
class Observation:
    category: MetricCategory
    metric_name: str
    value: float
    labels: tuple[str, ...]


class ObservationReader:
    def __init__(self, codec: NameCodec):
        self._codec = codec

    def convert_families(self, category: MetricCategory, families: Iterable[Metric]) -> Iterator[Observation]:
        for family in families:
            for sample in family.samples:
                yield self.convert_sample(category, family, sample)

    def convert_sample(self, category: MetricCategory, family: Metric, sample: Sample) -> Observation:
        if family.type == "histogram":
            return self._histogram(category, family, sample)
        if family.type == "summary":
            return self._summary(category, family, sample)
        if family.type == "counter":
            return self._counter(category, family, sample)
        return Observation(
            category,
            self._codec.from_external_name(category, sample.name),
            sample.value,
            tuple(sample.labels.values()),
        )

    def _counter(self, category: MetricCategory, family: Metric, sample: Sample) -> Observation:
        labels = list(sample.labels.values())
        if sample.name.endswith("_created"):
            labels.append("created")
        return Observation(
            category,
            self._codec.from_external_counter_name(category, family.name),
            sample.value,
            tuple(labels),
        )

    def _histogram(self, category: MetricCategory, family: Metric, sample: Sample) -> Observation:
        labels = list(sample.labels.values())
        if sample.name.endswith("_bucket"):
            labels.insert(len(labels) - 1, "bucket")
        else:
            labels.append(sample.name[sample.name.rfind("_") + 1:])
        return Observation(
            category,
            self._codec.from_external_name(category, family.name),
            sample.value,
            tuple(labels),
        )

    def _summary(self, category: MetricCategory, family: Metric, sample: Sample) -> Observation:
        labels = list(sample.labels.values())
        if sample.name.endswith("_sum"):
            labels.append("sum")
        elif sample.name.endswith("_count"):
            labels.append("count")
        elif sample.name.endswith("_created"):
            labels.append("created")
        else:
            # quantile sample: the quantile value is already the last label
            labels.insert(len(labels) - 1, "quantile")
        return Observation(
            category,
            self._codec.from_external_name(category, family.name),
            sample.value,
            tuple(labels),
        )


__all__ = ["Observation", "ObservationReader"]
