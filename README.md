# oedoana

This package holds pure-Python building blocks for analysing event data from OEDO beam-line detectors.
It works on plain Python objects: lists of hits, tracks, raw byte buffers and frame objects. It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Modules

### `oedoana.timing_charge`

This module handles timing/charge hits, such as those from an SR-PPAC.

- `TimingChargeData(id, timing=0.0, charge=0.0, valid=True)` is one hit.
- `tot_to_charge(tot)` converts a time-over-threshold value into a charge. It uses a linear form below 20 and a quadratic form from 20 upwards.
- `convert_tot(hits)` returns copies of the hits. In each copy, the `charge` field is taken to hold a TOT value and is replaced by the converted charge.
- `sort_by_charge(hits, descending=False)` returns the hits ordered by charge.
- `charges(hits)` returns the charges as floats.
- `ids(hits)` returns the ids as floats.
- `TimingChargeColumns(name)` collects hits event by event. `append_event(hits)` adds one event. `finalize()` returns a dict of list-valued columns `<name>_tot`, `<name>_timing` and `<name>_id`, then starts a fresh collection.
  - Values are rounded to float32.
  - An id that does not fit in 32 bits raises `ValueError`.

### `oedoana.validation`

This module selects hits by charge.

- `ChargeValidator(charge_range, output_invalid=False)` keeps copies of the hits whose charge lies in `[min, max]` and marks them valid.
  - When `output_invalid` is set, out-of-range hits are kept as well and marked invalid.
  - The result is sorted by descending charge.
  - A range that is not two values long, or whose minimum is above its maximum, raises `ValueError`.
- `ThresholdValidator(threshold=0.0)` keeps copies of the hits whose charge is not below the threshold. The input order is preserved.
- A hit without a `charge` attribute raises `TypeError` in both validators.

### `oedoana.dali`

This module handles the DALI gamma-ray array.

- `DaliProcessor().process(hits)` places the hit charges on crystal ids `0..255`. It returns a `DaliData` with:
  - the two largest energies and their crystal positions (`energy1`, `pos1`, `energy2`, `pos2`);
  - the add-back sum (`total_e`);
  - `theta`, which is the first entry of `THETA_TABLE`.

  It returns `None` for an empty event.
- `DaliData.clear()` resets every field to `None`.
- `split_fields(text, delimiter)` splits a string and drops a single trailing empty field.

### `oedoana.ion_chamber`

`IonChamberProcessor(num_channels=6, drop_ratio=0.0).process(hits)` averages the channel charges. The average runs from channel 0 up to, but not including, the first channel that falls below `drop_ratio` times channel 0.

- It returns `None` for an empty event.
- It returns NaN when channel 0 itself is cut.

### `oedoana.a3100`

This module decodes A3100 ADC data. Each decoder reads a buffer of little-endian 32-bit words. A trailing partial word is ignored.

- `A3100Decoder().decode(buffer, segment_id)` returns `RawSimple` hits.
- `A3100FreeRunTSIDecoder().decode(buffer, segment_id)` decodes triggered-list mode. It returns `TriggeredListHit` records with ADC value, time-stamp parts and event count.

### `oedoana.brho`

This module reconstructs magnetic rigidity from two tracks.

- `Track(x, a, y=0.0, b=0.0, z=0.0)` is a straight track. Positions are in mm and angles in rad.
- `BrhoReconstructor(brho0=0.0, z=0.0, mode=0, section=35)` uses first-order optics.
  - The sections are F3–F5 (`35`) and F5–F7 (`57`).
  - The modes are 0 (both tracks on focus), 1 (entrance on focus) and 2 (exit on focus).
  - An unknown section or mode raises `ValueError`.
- `BrhoReconstructorS1(brho0=0.0, z=0.0)` uses an iterated higher-order solution for the S0–S1 section.
- `process(track1, track2)` returns Brho, or `None` if either track is missing. This holds for both reconstructors.
- `roots_cubic(coef)` solves `coef[3]*x**3 + ... + coef[0] = 0` and returns a `CubicRoots` tuple.

### `oedoana.efficiency`

This module holds helpers for shift checks.

- `multiplicity_efficiency(bin_contents, entries, excluded_bins=1)` computes an efficiency from a multiplicity histogram.
- `mwdc_efficiency(zero_bin, entries)` computes the efficiency of an MWDC plane from its no-hit bin.
- `srppac_efficiency_report(histograms)` builds the text report for the four SR-PPAC planes. It takes a mapping of histogram name to `(bin_contents, entries)`.
- `missing_ids(present_ids, count)` lists the ids in `range(count)` that never appear.
- `format_mean_table(rows)` formats mean values as a fixed-width table.
- `figure_file_name(prefix, run_name, run_number, counter)` builds a PNG file name with a two-digit counter.

### `oedoana.get_store`

This module is an event store for GET electronics.

- `AsAdFrame` holds one AsAd frame: hit patterns and per-channel samples.
- `GetEventStore(valid_bucket=(0, 0), require_hit_bit=True, subtract_fpn=False, max_event_num=0, start_event_num=0)` has two main methods:
  - `process_asad(frame)` turns a frame into `RawFadcData` waveforms, cut to the valid time-bucket window. FPN subtraction is optional.
  - `events(frames)` yields `GetEvent` objects. Each item of `frames` is either a single frame or a sequence of frames.
  - An equal start and end for `valid_bucket` selects the full window.
  - An invalid window raises `ValueError`.
- `fpn_group(channel)` gives the FPN channel group used for a channel.
- `parse_run_info(filename, size)` reads the run name, run number and local start time from a GET file name. It returns a `RunInfo`.

## Example

```python
from oedoana.timing_charge import TimingChargeData, convert_tot, sort_by_charge, charges
from oedoana.validation import ChargeValidator

hits = [TimingChargeData(id=3, timing=12.5, charge=25.0),
        TimingChargeData(id=4, timing=13.0, charge=10.0)]
hits = sort_by_charge(convert_tot(hits))
print(charges(hits))

validator = ChargeValidator((0.0, 1.0))
print(validator.process(hits))
```

## What this package does not do

- It reads no data files. You pass in hits, byte buffers or `AsAdFrame` objects yourself. There is no reader for event trees or for raw GET files.
- It writes no output files. `TimingChargeColumns.finalize()` returns Python lists, and writing them to Parquet or another format is left to the caller.
- It draws no histograms or figures, and prints or sends nothing to a printer. `figure_file_name` and `format_mean_table` only build strings.
- It has no command-line program and no analysis loop. You call the functions and processors from your own code.