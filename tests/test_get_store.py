from datetime import datetime

import pytest

from oedoana.get_store import (
    AsAdFrame,
    GetEventStore,
    RunInfo,
    fpn_group,
    parse_run_info,
)


def _frame(samples, hit_patterns=(0, 0, 0, 0), cobo=0, asad=0, event_time=0, offset=0):
    return AsAdFrame(
        cobo_id=cobo,
        asad_id=asad,
        event_time=event_time,
        read_offset=offset,
        hit_patterns=hit_patterns,
        samples=samples,
    )


def _hit(channel):
    return 1 << (67 - channel)


@pytest.mark.parametrize(
    "channel, group",
    [(0, 0), (16, 0), (17, 1), (33, 1), (34, 2), (50, 2), (51, 3), (67, 3)],
)
def test_fpn_group_boundaries(channel, group):
    assert fpn_group(channel) == group


@pytest.mark.parametrize("channel", [-1, 68])
def test_fpn_group_out_of_range(channel):
    with pytest.raises(ValueError):
        fpn_group(channel)


def test_fpn_channels_map_to_own_group():
    for index, channel in enumerate((11, 22, 45, 56)):
        assert fpn_group(channel) == index


@pytest.mark.parametrize("bucket", [(5,), (4, 2), (-1, 3), (0, 512)])
def test_invalid_bucket_rejected(bucket):
    with pytest.raises(ValueError):
        GetEventStore(valid_bucket=bucket)


def test_equal_bucket_means_full_range():
    assert GetEventStore(valid_bucket=(3, 3)).valid_bucket == (0, 512)


def test_hit_bit_selects_channels():
    samples = {(0, 5): [1, 2, 3], (0, 6): [4, 5, 6]}
    frame = _frame(samples, hit_patterns=(_hit(5), 0, 0, 0))
    store = GetEventStore(valid_bucket=(0, 2))
    assert [h.channel for h in store.process_asad(frame)] == [5]
    loose = GetEventStore(valid_bucket=(0, 2), require_hit_bit=False)
    assert [h.channel for h in loose.process_asad(frame)] == [5, 6]


def test_zero_first_sample_is_skipped():
    frame = _frame({(1, 3): [0, 7, 8]})
    store = GetEventStore(valid_bucket=(0, 2), require_hit_bit=False)
    assert store.process_asad(frame) == []


def test_window_ids_and_offset():
    frame = _frame(
        {(2, 40): [9, 1, 2, 3, 4, 5, 6, 7]},
        cobo=1,
        asad=3,
        event_time=123,
        offset=10,
    )
    store = GetEventStore(valid_bucket=(2, 5), require_hit_bit=False)
    (hit,) = store.process_asad(frame)
    assert hit.samples == [2, 3, 4, 5]
    assert hit.geo == 2
    assert hit.channel == 40
    assert hit.unique_id == 2 + 4 * (3 + 4 * 1)
    assert hit.offset == 10 + 2
    assert hit.timestamp == 123
    assert hit.segment == (63, 1, 3, 0)


def test_fpn_subtraction():
    frame = _frame({(0, 11): [5, 6, 7, 8], (0, 0): [10, 20, 30, 40]})
    store = GetEventStore(valid_bucket=(0, 3), require_hit_bit=False, subtract_fpn=True)
    hits = store.process_asad(frame)
    # The FPN channel becomes zero at the reference bucket and is dropped.
    assert [h.channel for h in hits] == [0]
    noise = [v - 5 for v in [5, 6, 7, 8]]
    assert hits[0].samples == [a - n for a, n in zip([10, 20, 30, 40], noise)]


def test_without_fpn_samples_are_raw():
    frame = _frame({(0, 11): [5, 6, 7, 8], (0, 0): [10, 20, 30, 40]})
    store = GetEventStore(valid_bucket=(0, 3), require_hit_bit=False)
    hits = {h.channel: h.samples for h in store.process_asad(frame)}
    assert hits == {0: [10, 20, 30, 40], 11: [5, 6, 7, 8]}


def test_events_respect_max_event_num():
    frames = [_frame({(0, 1): [1, 2]}, event_time=t) for t in range(5)]
    store = GetEventStore(valid_bucket=(0, 1), require_hit_bit=False, max_event_num=2)
    events = list(store.events(frames))
    assert [e.event_number for e in events] == [0, 1, 2]
    assert [e.timestamp for e in events] == [0, 1, 2]


def test_events_skip_start_frames():
    frames = [_frame({(0, 1): [1, 2]}, event_time=t) for t in range(5)]
    store = GetEventStore(
        valid_bucket=(0, 1), require_hit_bit=False, max_event_num=2, start_event_num=1
    )
    assert [e.event_number for e in store.events(frames)] == [1, 2]


def test_full_cobo_event_collects_all_asads():
    cobo = [_frame({(0, 1): [1, 2]}, asad=a, event_time=100 + a) for a in range(4)]
    store = GetEventStore(valid_bucket=(0, 1), require_hit_bit=False)
    (event,) = list(store.events([cobo]))
    assert len(event.hits) == 4
    assert event.timestamp == cobo[-1].event_time
    assert sorted(h.segment[2] for h in event.hits) == [0, 1, 2, 3]


def test_parse_run_info():
    info = parse_run_info("/data/run_0042.dat.21-12-17_00h29m39s.0", 2 * 1024 * 1024)
    assert isinstance(info, RunInfo)
    assert info.run_name == "run"
    assert info.run_number == 42
    assert info.name == "run0042"
    assert info.total_size == pytest.approx(2.0)
    start = datetime.fromtimestamp(info.start_time)
    assert (start.year, start.month, start.day) == (2017, 12, 21)
    assert (start.hour, start.minute, start.second) == (0, 29, 39)


def test_parse_run_info_bad_name():
    with pytest.raises(ValueError):
        parse_run_info("short.dat", 10)