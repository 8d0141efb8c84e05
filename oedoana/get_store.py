"""Event store for GET (AsAd/AGET) digitiser frames."""

from __future__ import annotations

import os
import time
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

NUM_AGETS = 4
NUM_CHANNELS = 68
NUM_BUCKETS = 512
FPN_CHANNELS = (11, 22, 45, 56)
SEGMENT_DEVICE = 63
_HIT_BITS = 67


@dataclass
class AsAdFrame:
    """One AsAd frame: four AGET chips, each with 68 channels of samples.

    ``hit_patterns[aget]`` is the raw hit bitset of a chip; channel ``ch``
    is hit when bit ``67 - ch`` is set. ``samples`` maps ``(aget, channel)``
    to the sampled ADC values of that channel.
    """

    cobo_id: int
    asad_id: int
    event_time: int = 0
    read_offset: int = 0
    hit_patterns: Sequence[int] = (0, 0, 0, 0)
    samples: Mapping[tuple[int, int], Sequence[int]] = field(default_factory=dict)

    def is_hit(self, aget: int, channel: int) -> bool:
        """Whether the hit bit of ``channel`` on chip ``aget`` is set."""
        return bool((self.hit_patterns[aget] >> (_HIT_BITS - channel)) & 1)

    def sample(self, aget: int, channel: int) -> Sequence[int] | None:
        """Samples of one channel, or ``None`` if the channel was not read out."""
        return self.samples.get((aget, channel))


@dataclass
class RawFadcData:
    """Waveform of one channel within the valid time-bucket window."""

    segment: tuple[int, int, int, int]
    geo: int
    channel: int
    unique_id: int
    timestamp: int
    offset: int
    pattern: int = 0
    samples: list[int] = field(default_factory=list)


@dataclass
class RunInfo:
    """Run information taken from a GET data file name."""

    run_name: str
    run_number: int
    start_time: int
    total_size: float

    @property
    def name(self) -> str:
        return f"{self.run_name}{self.run_number:04d}"


@dataclass
class GetEvent:
    """One decoded event: the frame number it came from and its hits."""

    event_number: int
    timestamp: int
    hits: list[RawFadcData]


def _atoi(text: str) -> int:
    """Parse leading digits (with optional sign) like C ``atoi``; 0 if none."""
    text = text.lstrip()
    sign = 1
    if text[:1] in "+-" and text:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if not char.isdigit():
            break
        digits += char
    return sign * int(digits) if digits else 0


def parse_run_info(filename: str, size: int) -> RunInfo:
    """Build run information from a file name and its size in bytes.

    The base name is laid out as ``RRR_NNNN.xxx.DD-MM-YY_HHhMMmSSs...``;
    the start time is read as local time.
    """
    base = os.path.basename(filename)
    run_name = base[0:3]
    run_number = _atoi(base[4:8])
    day = _atoi(base[13:15])
    month = _atoi(base[16:18])
    year = 2000 + _atoi(base[19:21])
    hour = _atoi(base[22:24])
    minute = _atoi(base[25:27])
    second = _atoi(base[28:30])
    try:
        start = datetime(year, month, day, hour, minute, second)
    except ValueError as exc:
        raise ValueError(f"cannot read start time from file name {base!r}: {exc}") from None
    start_time = int(time.mktime(start.timetuple()))
    return RunInfo(
        run_name=run_name,
        run_number=run_number,
        start_time=start_time,
        total_size=size / 1024.0 / 1024.0,
    )


def fpn_group(channel: int) -> int:
    """Index of the FPN channel whose noise is subtracted from ``channel``."""
    if not 0 <= channel < NUM_CHANNELS:
        raise ValueError(f"channel {channel} out of range [0, {NUM_CHANNELS})")
    if channel < 17:
        return 0
    if channel < 34:
        return 1
    if channel < 51:
        return 2
    return 3


class GetEventStore:
    """Turns GET frames into per-channel waveforms, event by event."""

    def __init__(
        self,
        valid_bucket: Sequence[int] = (0, 0),
        require_hit_bit: bool = True,
        subtract_fpn: bool = False,
        max_event_num: int = 0,
        start_event_num: int = 0,
    ) -> None:
        if len(valid_bucket) < 2:
            raise ValueError(f"ValidBucket has {len(valid_bucket)} size instead of 2")
        start, end = valid_bucket[0], valid_bucket[1]
        if start > end:
            raise ValueError("ValidBucket start is larger than end")
        if start < 0 or end >= NUM_BUCKETS:
            raise ValueError(
                f"ValidBucket [{start},{end}] out of range [0, {NUM_BUCKETS}]"
            )
        if start == end:
            start, end = 0, NUM_BUCKETS
        self.valid_bucket = (start, end)
        self.require_hit_bit = require_hit_bit
        self.subtract_fpn = subtract_fpn
        self.max_event_num = max_event_num
        self.start_event_num = start_event_num

    def _fpn_buffers(self, frame: AsAdFrame, aget: int) -> list[list[int] | None]:
        buffers: list[list[int] | None] = []
        for channel in FPN_CHANNELS:
            raw = frame.sample(aget, channel)
            if raw is None:
                buffers.append(None)
                continue
            ref = raw[self.valid_bucket[0]]
            buffers.append([value - ref for value in raw])
        return buffers

    def process_asad(self, frame: AsAdFrame) -> list[RawFadcData]:
        """Extract the waveforms of all read-out (and hit) channels of a frame."""
        start, end = self.valid_bucket
        window = slice(start, end + 1)
        segment = (SEGMENT_DEVICE, frame.cobo_id, frame.asad_id, 0)
        hits = []
        for aget in range(NUM_AGETS):
            fpn = self._fpn_buffers(frame, aget) if self.subtract_fpn else [None] * 4
            for channel in range(NUM_CHANNELS):
                if self.require_hit_bit and not frame.is_hit(aget, channel):
                    continue
                group = fpn_group(channel)
                is_fpn_channel = FPN_CHANNELS[group] == channel
                if self.subtract_fpn and is_fpn_channel:
                    adc = fpn[group]
                else:
                    adc = frame.sample(aget, channel)
                if not adc or adc[0] == 0:
                    continue
                noise = fpn[group]
                if not is_fpn_channel and self.subtract_fpn and noise is not None:
                    values = [a - n for a, n in zip(adc[window], noise[window])]
                else:
                    values = list(adc[window])
                hits.append(
                    RawFadcData(
                        segment=segment,
                        geo=aget,
                        channel=channel,
                        unique_id=aget + NUM_AGETS * (frame.asad_id + 4 * frame.cobo_id),
                        timestamp=frame.event_time,
                        offset=frame.read_offset + start,
                        samples=values,
                    )
                )
        return hits

    def events(
        self, frames: Iterable[AsAdFrame | Sequence[AsAdFrame]]
    ) -> Iterator[GetEvent]:
        """Yield events from frames, each a single AsAd frame or a CoBo's frames.

        The first ``start_event_num`` frames are skipped; with a positive
        ``max_event_num`` reading stops once the event count exceeds it.
        """
        number = self.start_event_num
        for index, item in enumerate(frames):
            if index < self.start_event_num:
                continue
            if self.max_event_num > 0 and number > self.max_event_num:
                return
            asads = [item] if isinstance(item, AsAdFrame) else list(item)
            hits: list[RawFadcData] = []
            timestamp = 0
            for asad in asads:
                timestamp = asad.event_time
                hits.extend(self.process_asad(asad))
            yield GetEvent(event_number=index, timestamp=timestamp, hits=hits)
            number += 1