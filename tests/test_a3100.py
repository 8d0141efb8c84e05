import struct

from oedoana.a3100 import (
    A3100Decoder,
    A3100FreeRunTSIDecoder,
    RawSimple,
    TriggeredListHit,
)


def pack(*words):
    return struct.pack(f"<{len(words)}I", *words)


def test_module_ids():
    plain = A3100Decoder()
    free_run = A3100FreeRunTSIDecoder()
    assert plain.ID == 31
    assert free_run.ID == 31
    assert plain.decode(pack(7), segment_id=2) == [
        RawSimple(segment_id=2, geo=0, channel=0, value=7)
    ]


def test_plain_data_word_before_header_has_geo_zero():
    hits = A3100Decoder().decode(pack((3 << 14) | 100), segment_id=7)
    assert hits == [RawSimple(segment_id=7, geo=0, channel=3, value=100)]


def test_plain_header_sets_geo_and_is_skipped():
    buffer = pack(0x60000000, (2 << 14) | 0x1FFF, (15 << 14) | 1)
    hits = A3100Decoder().decode(buffer, segment_id=1)
    assert [(h.geo, h.channel, h.value) for h in hits] == [(1, 2, 0x1FFF), (1, 15, 1)]


def test_plain_value_masked_to_13_bits():
    hits = A3100Decoder().decode(pack(0x2000 | 5), segment_id=0)
    assert hits[0].value == 5


def test_plain_same_channel_gives_separate_hits():
    hits = A3100Decoder().decode(pack((1 << 14) | 10, (1 << 14) | 20), segment_id=0)
    assert [h.value for h in hits] == [10, 20]


def test_plain_trailing_partial_word_ignored():
    hits = A3100Decoder().decode(pack((4 << 14) | 9) + b"\x01\x02", segment_id=0)
    assert len(hits) == 1


def test_empty_buffer():
    assert A3100Decoder().decode(b"", 0) == []
    assert A3100FreeRunTSIDecoder().decode(b"", 0) == []


def test_free_run_full_event():
    first = 0xC0000000 | (5 << 18) | (6 << 14) | 123
    second = 0xE0000000 | 4567
    third = 0x60000000 | 42
    hits = A3100FreeRunTSIDecoder().decode(pack(first, second, third), segment_id=3)
    assert hits == [
        TriggeredListHit(3, 1, 6, 123, 5, 4567, 0),
        TriggeredListHit(3, 1, 6, 123, 5, 4567, 42),
    ]


def test_free_run_first_word_alone_emits_nothing():
    first = 0xC0000000 | (2 << 14) | 7
    assert A3100FreeRunTSIDecoder().decode(pack(first), 0) == []


def test_free_run_unknown_header_skipped():
    hits = A3100FreeRunTSIDecoder().decode(pack(0x00000001, 0x20000000), 0)
    assert hits == []


def test_free_run_tsi_hi_masked():
    first = 0xC0000000 | 0x1FFC0000
    hits = A3100FreeRunTSIDecoder().decode(pack(first, 0xE0000000), 0)
    assert hits[0].tsi_hi == 0x1FFC0000 >> 18
    assert hits[0].channel == 0
    assert hits[0].adc == 0