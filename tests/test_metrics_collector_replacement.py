from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from metricsbridge.metrics import MetricCategory
from metricsbridge.metrics.collectors import CurrentValueCollector
from metricsbridge.metrics.registration import CollectorRegistryManager, family_names, overlaps


def test_family_names_and_overlap():
    a = CurrentValueCollector('x_depth', 'd', lambda: 1.0)
    names = family_names(a)
    assert names == frozenset({'x_depth'})
    assert overlaps({'x_depth', 'other'}, names)
    assert not overlaps({'other'}, names)


def test_gauge_reregistration_replaces_previous(metrics_system, app_category):
    metrics_system.create_gauge(app_category, 'queue_depth', 'Depth', lambda: 1.0)
    metrics_system.create_gauge(app_category, 'queue_depth', 'Depth', lambda: 2.0)
    obs = [o for o in metrics_system.stream_observations(app_category) if o.metric_name == 'queue_depth']
    assert [o.value for o in obs] == [2.0]
    assert metrics_system.registry.get_sample_value('app_rpc_queue_depth') == 2.0


def test_supplied_gauge_reregistration_replaces_previous(metrics_system, app_category):
    old = metrics_system.create_labelled_supplied_gauge(app_category, 'peers', 'Peers', 'dir')
    old.labels(lambda: 4.0, 'in')
    new = metrics_system.create_labelled_supplied_gauge(app_category, 'peers', 'Peers', 'dir')
    new.labels(lambda: 7.0, 'out')
    obs = list(metrics_system.stream_observations(app_category))
    assert [(o.metric_name, o.value, o.labels) for o in obs] == [('peers', 7.0, ('out',))]


def test_unrelated_collectors_are_kept():
    reg = CollectorRegistry(auto_describe=True)
    mgr = CollectorRegistryManager(reg)
    cat = MetricCategory('rpc')
    a = CurrentValueCollector('rpc_a', 'a', lambda: 1.0)
    b = CurrentValueCollector('rpc_b', 'b', lambda: 2.0)
    mgr.register_collector(cat, a)
    mgr.register_collector(cat, b)
    assert mgr.collectors_for(cat) == (a, b)


def test_overlapping_several_evicts_all():
    reg = CollectorRegistry(auto_describe=True)
    mgr = CollectorRegistryManager(reg)
    cat = MetricCategory('rpc')

    class _Both:
        def collect(self):
            yield from CurrentValueCollector('rpc_a', 'a', lambda: 10.0).collect()
            yield from CurrentValueCollector('rpc_b', 'b', lambda: 20.0).collect()

    mgr.register_collector(cat, CurrentValueCollector('rpc_a', 'a', lambda: 1.0))
    mgr.register_collector(cat, CurrentValueCollector('rpc_b', 'b', lambda: 2.0))
    both = _Both()
    mgr.register_collector(cat, both)
    assert mgr.collectors_for(cat) == (both,)
    assert reg.get_sample_value('rpc_a') == 10.0
    assert reg.get_sample_value('rpc_b') == 20.0


def test_replacement_is_logged(metrics_system, app_category, caplog):
    with caplog.at_level('INFO', logger='metricsbridge.metrics.registration'):
        metrics_system.create_gauge(app_category, 'g', 'G', lambda: 1.0)
        metrics_system.create_gauge(app_category, 'g', 'G', lambda: 1.0)
    assert any('metrics.collector.replaced' in m for m in caplog.messages)


def test_same_name_in_other_category_is_not_a_conflict(metrics_system, app_category):
    other = MetricCategory('python')  # enabled via StandardMetricCategory.RUNTIME
    metrics_system.create_gauge(app_category, 'uptime', 'Up', lambda: 1.0)
    metrics_system.create_gauge(other, 'uptime', 'Up', lambda: 2.0)
    assert metrics_system.registry.get_sample_value('app_rpc_uptime') == 1.0
    assert metrics_system.registry.get_sample_value('python_uptime') == 2.0


def test_cross_category_clash_restores_evicted():
    reg = CollectorRegistry(auto_describe=True)
    mgr = CollectorRegistryManager(reg)
    rpc, db = MetricCategory('rpc'), MetricCategory('db')
    original = CurrentValueCollector('rpc_a', 'a', lambda: 1.0)
    mgr.register_collector(rpc, original)
    mgr.register_collector(db, CurrentValueCollector('shared_name', 's', lambda: 3.0))

    class _Clashing:
        def collect(self):
            yield from CurrentValueCollector('rpc_a', 'a', lambda: 10.0).collect()
            yield from CurrentValueCollector('shared_name', 's', lambda: 30.0).collect()

    with pytest.raises(ValueError):
        mgr.register_collector(rpc, _Clashing())
    assert mgr.collectors_for(rpc) == (original,)
    assert reg.get_sample_value('rpc_a') == 1.0
    assert reg.get_sample_value('shared_name') == 3.0
