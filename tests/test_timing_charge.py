import pytest

from oedoana.timing_charge import (
    TimingChargeColumns,
    TimingChargeData,
    charges,
    convert_tot,
    ids,
    sort_by_charge,
    tot_to_charge,
)


def _hits():
    return [
        TimingChargeData(id=3, timing=10.0, charge=5.0),
        TimingChargeData(id=1, timing=12.0, charge=30.0),
        TimingChargeData(id=7, timing=11.0, charge=1.0),
    ]


def test_tot_to_charge_offset_at_zero():
    assert tot_to_charge(0.0) == pytest.approx(0.006667)


def test_tot_to_charge_linear_below_threshold():
    step1 = tot_to_charge(10.0) - tot_to_charge(5.0)
    step2 = tot_to_charge(15.0) - tot_to_charge(10.0)
    assert step1 == pytest.approx(step2)
    assert step1 > 0


def test_tot_to_charge_quadratic_above_threshold():
    d1 = tot_to_charge(40.0) - tot_to_charge(30.0)
    d2 = tot_to_charge(50.0) - tot_to_charge(40.0)
    assert d2 > d1


def test_convert_tot_does_not_mutate_input():
    hits = _hits()
    converted = convert_tot(hits)
    assert [h.charge for h in hits] == [5.0, 30.0, 1.0]
    assert [h.charge for h in converted] == [tot_to_charge(5.0), tot_to_charge(30.0), tot_to_charge(1.0)]
    assert [h.id for h in converted] == [3, 1, 7]


def test_sort_ascending_and_descending():
    asc = sort_by_charge(_hits(), descending=False)
    desc = sort_by_charge(_hits(), descending=True)
    assert [h.id for h in asc] == [7, 3, 1]
    assert [h.id for h in desc] == [1, 3, 7]


def test_charges_and_ids():
    hits = _hits()
    assert charges(hits) == [5.0, 30.0, 1.0]
    assert ids(hits) == [3.0, 1.0, 7.0]


def test_empty_inputs():
    assert charges([]) == []
    assert ids([]) == []
    assert sort_by_charge([], descending=True) == []


def test_columns_names_and_rows():
    cols = TimingChargeColumns("sr91x")
    cols.append_event(_hits())
    cols.append_event([])
    assert len(cols) == 2
    result = cols.finalize()
    assert list(result) == ["sr91x_tot", "sr91x_timing", "sr91x_id"]
    assert result["sr91x_tot"] == [[5.0, 30.0, 1.0], []]
    assert result["sr91x_timing"] == [[10.0, 12.0, 11.0], []]
    assert result["sr91x_id"] == [[3, 1, 7], []]


def test_columns_float32_rounding():
    cols = TimingChargeColumns("x")
    cols.append_event([TimingChargeData(id=0, timing=1.5, charge=0.1)])
    result = cols.finalize()
    tot = result["x_tot"][0][0]
    assert tot != 0.1
    assert abs(tot - 0.1) < 1e-7
    assert result["x_timing"][0][0] == 1.5


def test_finalize_resets():
    cols = TimingChargeColumns("d")
    cols.append_event(_hits())
    cols.finalize()
    assert len(cols) == 0
    assert cols.finalize()["d_id"] == []


def test_id_out_of_int32_range():
    cols = TimingChargeColumns("d")
    with pytest.raises(ValueError):
        cols.append_event([TimingChargeData(id=2**31)])