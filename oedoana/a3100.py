"""Decoders for A3100 ADC module data words (little-endian 32-bit)."""

from __future__ import annotations

import struct
from dataclasses import dataclass

MODULE_ID = 31


def _words(buffer: bytes) -> list[int]:
    usable = len(buffer) - len(buffer) % 4
    return [word for (word,) in struct.iter_unpack("<I", buffer[:usable])]


@dataclass
class RawSimple:
    """A single digitised value with its segment, geometry and channel."""

    segment_id: int
    geo: int
    channel: int
    value: int


@dataclass
class TriggeredListHit:
    """One hit from triggered-list (free-run) mode with time-stamp parts."""

    segment_id: int
    geo: int
    channel: int
    adc: int
    tsi_hi: int
    tsi_lo: int
    event_count: int


class A3100Decoder:
    """Decoder for the plain A3100 readout."""

    ID = MODULE_ID
    HEADER_MASK = 0x60000000
    CHANNEL_MASK = 0x0003C000
    CHANNEL_SHIFT = 14
    VALUE_MASK = 0x1FFF

    def decode(self, buffer: bytes, segment_id: int) -> list[RawSimple]:
        """Decode one event buffer into hits; trailing partial words are ignored."""
        hits = []
        geo = 0
        for word in _words(buffer):
            if word & self.HEADER_MASK == self.HEADER_MASK:
                geo = 1
                continue
            channel = (word & self.CHANNEL_MASK) >> self.CHANNEL_SHIFT
            hits.append(RawSimple(segment_id, geo, channel, word & self.VALUE_MASK))
        return hits


class A3100FreeRunTSIDecoder:
    """Decoder for the A3100 triggered-list mode with time-stamp information."""

    ID = MODULE_ID
    HEADER_MASK = 0xE0000000
    FIRST_WORD = 0xC0000000
    SECOND_WORD = 0xE0000000
    THIRD_WORD = 0x60000000

    ADC_MASK = 0x00001FFF
    CHANNEL_MASK = 0x0003C000
    CHANNEL_SHIFT = 14
    TSI_HI_MASK = 0x1FFC0000
    TSI_HI_SHIFT = 18
    TSI_LO_MASK = 0x1FFFFFFF
    EVENT_COUNT_MASK = 0x0FFFFFFF

    def decode(self, buffer: bytes, segment_id: int) -> list[TriggeredListHit]:
        """Decode one buffer; the second and third words each emit a hit."""
        hits = []
        geo = 1
        channel = adc = tsi_hi = tsi_lo = event_count = 0
        for word in _words(buffer):
            header = word & self.HEADER_MASK
            if header == self.FIRST_WORD:
                adc = word & self.ADC_MASK
                tsi_hi = (word & self.TSI_HI_MASK) >> self.TSI_HI_SHIFT
                channel = (word & self.CHANNEL_MASK) >> self.CHANNEL_SHIFT
                continue
            if header == self.SECOND_WORD:
                tsi_lo = word & self.TSI_LO_MASK
            elif header == self.THIRD_WORD:
                event_count = word & self.EVENT_COUNT_MASK
                geo = 1
            else:
                continue
            hits.append(
                TriggeredListHit(
                    segment_id, geo, channel, adc, tsi_hi, tsi_lo, event_count
                )
            )
        return hits