from __future__ import annotations

import pytest

from metricsbridge.metrics import MetricCategory, NameCodec
from metricsbridge.metrics.naming import prefix_for


@pytest.mark.parametrize('category,expected', [
    (MetricCategory('rpc', 'app_'), 'app_rpc_'),
    (MetricCategory('rpc'), 'rpc_'),
    (MetricCategory('python', ''), 'python_'),
])
def test_prefix_includes_application_prefix(category, expected):
    assert prefix_for(category) == expected


@pytest.mark.parametrize('name', ['requests', 'requests_total', 'a_b_c', 'x'])
def test_plain_name_round_trip(name):
    codec = NameCodec()
    cat = MetricCategory('rpc', 'app_')
    external = codec.to_external_name(cat, name)
    assert external == 'app_rpc_' + name
    assert codec.from_external_name(cat, external) == name


def test_foreign_name_passes_through_unchanged():
    codec = NameCodec()
    cat = MetricCategory('rpc', 'app_')
    # built-in collectors emit names the codec never produced
    assert codec.from_external_name(cat, 'process_cpu_seconds') == 'process_cpu_seconds'


def test_counter_total_suffix_is_remembered():
    codec = NameCodec()
    cat = MetricCategory('rpc', 'app_')
    assert codec.to_external_counter_name(cat, 'requests_total') == 'app_rpc_requests_total'
    # prometheus_client reports the family without the suffix
    assert codec.from_external_counter_name(cat, 'app_rpc_requests') == 'requests_total'


def test_counter_without_suffix_round_trips_bare():
    codec = NameCodec()
    cat = MetricCategory('rpc', 'app_')
    codec.to_external_counter_name(cat, 'errors')
    assert codec.from_external_counter_name(cat, 'app_rpc_errors') == 'errors'


def test_clear_forgets_total_suffixed_names():
    codec = NameCodec()
    cat = MetricCategory('rpc', 'app_')
    codec.to_external_counter_name(cat, 'requests_total')
    codec.clear()
    assert codec.from_external_counter_name(cat, 'app_rpc_requests') == 'requests'
