from wallet_score.core.metrics import (
    get_counters,
    get_histograms,
    get_metrics,
    inc_counter,
    measure_time,
    observe_histogram,
    timer,
)


def test_counters_accumulate(clean_metrics):
    inc_counter("tests.counter")
    inc_counter("tests.counter", 2)
    assert get_counters()["tests.counter"] == 3
    assert get_counters(reset=True)["tests.counter"] == 3
    assert get_counters() == {}


def test_timer_records_timing_and_histogram(clean_metrics):
    with timer("tests.timer", buckets=(1000.0,)):
        pass

    assert get_metrics()["tests.timer"]["count"] == 1
    assert get_histograms()["tests.timer"]["1000.0"] == 1


def test_measure_time_decorator(clean_metrics):
    @measure_time("tests.decorated")
    def double(x):
        return x * 2

    assert double(4) == 8
    assert double(5) == 10
    stats = get_metrics()["tests.decorated"]
    assert stats["count"] == 2
    assert stats["max_ms"] >= stats["avg_ms"] >= 0


def test_histogram_overflow_bucket(clean_metrics):
    observe_histogram("tests.hist", 0.5, buckets=(1.0,))
    observe_histogram("tests.hist", 5.0, buckets=(1.0,))
    assert get_histograms()["tests.hist"] == {"1.0": 1.0, "+Inf": 1.0}


def test_request_metrics_are_recorded(client, clean_metrics):
    client.get("/health")
    counters = get_counters()
    assert counters["http.requests.total"] == 1
    assert counters["http.responses.200"] == 1
    assert get_metrics()["http.request.duration"]["count"] == 1
