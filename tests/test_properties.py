"""Tests for the grid property facade and record dispatch."""

import pytest

from gridprops.core.errors import (
    ConstructionFinalized,
    InvalidBox,
    RecordError,
    TypeMismatch,
    UnsupportedKeyword,
)
from gridprops.core.grid import GridDims
from gridprops.core.properties import GridProperties
from gridprops.core.records import Record

MILLIDARCY = 9.869233e-16  # m²

MULTNUM_COLUMNS = [1, 1, 2, 2, 2] * 5


def basic_deck():
    return [
        Record("DIMENS", [10, 10, 10]),
        Record("FAULTS", [
            ["F1", 1, 1, 1, 4, 1, 4, "X"],
            ["F2", 5, 5, 1, 4, 1, 4, "X-"],
        ]),
        Record("MULTFLT", [["F1", 0.50], ["F2", 0.50]]),
        Record("MULTFLT", [["F2", 0.25]]),
        Record("SATNUM", [2] * 1000),
    ]


def addreg_int_deck():
    return [
        Record("DIMENS", [5, 5, 1]),
        Record("MULTNUM", MULTNUM_COLUMNS),
        Record("SATNUM", [1] * 25),
        Record("ADDREG", [
            ["satnum", 11, 1, "M"],
            ["SATNUM", 20, 2],
        ]),
    ]


def addreg_permx_deck():
    return [
        Record("DIMENS", [5, 5, 1]),
        Record("MULTNUM", MULTNUM_COLUMNS),
        Record("BOX", [1, 2, 1, 5, 1, 1]),
        Record("PERMZ", [1] * 10),
        Record("ENDBOX"),
        Record("BOX", [3, 5, 1, 5, 1, 1]),
        Record("PERMZ", [2] * 15),
        Record("ENDBOX"),
        Record("PERMX", [1] * 25),
        Record("ADDREG", [
            ["PermX   ", 1, 1],
            ["PErmX", 3, 2],
        ]),
    ]


class TestQueries:
    def test_has_property(self):
        props = GridProperties.from_records(basic_deck())
        assert props.has_int_property("SATNUM")
        assert not props.has_int_property("FluxNUM")

    def test_supports_never_raises(self):
        props = GridProperties(GridDims(2, 2, 1))
        assert props.supports("permy")
        assert not props.supports("NONO")

    def test_unsupported_keyword_raises(self):
        props = GridProperties.from_records(basic_deck())
        for query in (
            props.has_int_property,
            props.has_double_property,
            props.get_int_property,
            props.get_double_property,
            props.regions_of,
        ):
            with pytest.raises(UnsupportedKeyword):
                query("NONO")

    def test_default_region_keyword(self):
        props = GridProperties.from_records(basic_deck())
        assert props.default_region_keyword() == "FLUXNUM"

    def test_int_property_values(self):
        props = GridProperties.from_records(basic_deck())
        values = props.get_int_property("SaTNuM").values()
        assert len(values) == 1000
        assert all(v == 2 for v in values)

    def test_wrong_kind_accessor(self):
        props = GridProperties.from_records(basic_deck())
        with pytest.raises(TypeMismatch):
            props.get_double_property("SATNUM")
        with pytest.raises(TypeMismatch):
            props.get_int_property("PERMX")
        assert not props.has_double_property("SATNUM")

    def test_get_materializes_default(self):
        props = GridProperties(GridDims(2, 2, 1))
        assert not props.has_int_property("PVTNUM")
        pvtnum = props.get_int_property("PVTNUM")
        assert pvtnum.values().tolist() == [1, 1, 1, 1]
        assert props.has_int_property("PVTNUM")

    def test_regions(self):
        props = GridProperties.from_records([
            Record("DIMENS", [2, 2, 1]),
            Record("FIPNUM", [1, 1, 2, 3]),
        ])
        assert props.regions_of("FIPNUM") == [1, 2, 3]
        assert props.regions_of("EQLNUM") == []
        assert not props.has_int_property("EQLNUM")

    def test_regions_of_double_raises(self):
        props = GridProperties(GridDims(2, 2, 1))
        with pytest.raises(TypeMismatch):
            props.regions_of("PERMX")


class TestAssignment:
    def test_idempotent(self):
        props = GridProperties(GridDims(2, 2, 1))
        props.apply(Record("PORO", [0.1, 0.2, 0.3, 0.4]))
        first = props.get_double_property("PORO").values().copy()
        props.apply(Record("PORO", [0.1, 0.2, 0.3, 0.4]))
        assert props.get_double_property("PORO").values().tolist() == first.tolist()

    def test_wrong_value_count(self):
        props = GridProperties(GridDims(2, 2, 1))
        with pytest.raises(RecordError):
            props.apply(Record("PORO", [0.1, 0.2]))

    def test_box_restricts_assignment(self):
        props = GridProperties(GridDims(5, 5, 1))
        props.process([
            Record("BOX", [2, 3, 2, 2, 1, 1]),
            Record("SATNUM", [7, 8]),
            Record("ENDBOX"),
        ])
        satnum = props.get_int_property("SATNUM")
        assert satnum.get(1, 1, 0) == 7
        assert satnum.get(2, 1, 0) == 8
        assert sum(satnum.values()) == 23 + 7 + 8

    def test_endbox_without_box(self):
        props = GridProperties(GridDims(2, 2, 1))
        props.apply(Record("ENDBOX"))
        props.apply(Record("SATNUM", [3] * 4))
        assert props.get_int_property("SATNUM").values().tolist() == [3] * 4

    def test_invalid_box(self):
        props = GridProperties(GridDims(2, 2, 1))
        with pytest.raises(InvalidBox):
            props.apply(Record("BOX", [1, 3, 1, 1, 1, 1]))

    def test_fractional_box_bounds(self):
        props = GridProperties(GridDims(5, 5, 1))
        with pytest.raises(RecordError, match="whole numbers"):
            props.apply(Record("BOX", [1.5, 3, 1, 1, 1, 1]))

    def test_nested_values_rejected(self):
        props = GridProperties(GridDims(2, 2, 1))
        with pytest.raises(RecordError, match="flat list"):
            props.apply(Record("SATNUM", [[1, 1], [1, 1]]))

    def test_unknown_record(self):
        props = GridProperties(GridDims(2, 2, 1))
        with pytest.raises(UnsupportedKeyword):
            props.apply(Record("NONO", [1, 2, 3, 4]))

    def test_permeability_converted(self):
        props = GridProperties.from_records(addreg_permx_deck())
        permz = props.get_double_property("PERMZ")
        for j in range(5):
            for i in range(5):
                expected = 1.0 if i < 2 else 2.0
                assert permz.get(i, j, 0) == pytest.approx(expected * MILLIDARCY, rel=1e-6)

    def test_field_units(self):
        props = GridProperties.from_records(
            [Record("DIMENS", [1, 1, 1]), Record("DZ", [10.0])],
            unit_system="FIELD",
        )
        assert props.get_double_property("DZ").get(0, 0, 0) == pytest.approx(3.048)

    def test_dimens_must_come_first(self):
        with pytest.raises(RecordError):
            GridProperties.from_records([Record("SATNUM", [1])])
        props = GridProperties(GridDims(1, 1, 1))
        with pytest.raises(RecordError):
            props.apply(Record("DIMENS", [1, 1, 1]))


class TestRegionRecords:
    def test_addreg_int(self):
        props = GridProperties.from_records(addreg_int_deck())
        satnum = props.get_int_property("SATNUM")
        for j in range(5):
            for i in range(5):
                assert satnum.get(i, j, 0) == (12 if i < 2 else 21)

    def test_addreg_permx_units(self):
        props = GridProperties.from_records(addreg_permx_deck())
        permx = props.get_double_property("PermX")
        for j in range(5):
            for i in range(5):
                expected = 2 * MILLIDARCY if i < 2 else 4 * MILLIDARCY
                assert permx.get(i, j, 0) == pytest.approx(expected, rel=1e-6)

    def test_multireg(self):
        props = GridProperties.from_records([
            Record("DIMENS", [5, 5, 1]),
            Record("MULTNUM", MULTNUM_COLUMNS),
            Record("SATNUM", [2] * 25),
            Record("MULTIREG", [["SATNUM", 3, 1, "M"]]),
        ])
        satnum = props.get_int_property("SATNUM")
        assert satnum.get(0, 0, 0) == 6
        assert satnum.get(4, 0, 0) == 2

    def test_equalreg_converts(self):
        props = GridProperties.from_records([
            Record("DIMENS", [5, 5, 1]),
            Record("MULTNUM", MULTNUM_COLUMNS),
            Record("EQUALREG", [["PERMX", 100, 2]]),
        ])
        permx = props.get_double_property("PERMX")
        assert permx.get(0, 0, 0) == 0.0
        assert permx.get(3, 0, 0) == pytest.approx(100 * MILLIDARCY, rel=1e-6)

    @pytest.mark.parametrize("operator", ["ADDREG", "MULTIREG"])
    def test_integer_overflow_rejected(self, operator):
        props = GridProperties.from_records([
            Record("DIMENS", [5, 5, 1]),
            Record("MULTNUM", MULTNUM_COLUMNS),
        ])
        with pytest.raises(RecordError, match="64-bit"):
            props.apply(Record(operator, [["SATNUM", 1e19, 1]]))
        assert props.get_int_property("SATNUM").values().tolist() == [1] * 25

    def test_region_edit_ignores_box(self):
        props = GridProperties.from_records([
            Record("DIMENS", [5, 5, 1]),
            Record("MULTNUM", MULTNUM_COLUMNS),
            Record("BOX", [1, 1, 1, 1, 1, 1]),
            Record("ADDREG", [["SATNUM", 4, 2]]),
        ])
        satnum = props.get_int_property("SATNUM")
        assert satnum.get(2, 4, 0) == 5
        assert satnum.get(0, 0, 0) == 1

    def test_region_set_selector(self):
        props = GridProperties.from_records([
            Record("DIMENS", [2, 1, 1]),
            Record("FLUXNUM", [1, 2]),
            Record("ADDREG", [["SATNUM", 1, 2, "F"]]),
        ])
        assert props.get_int_property("SATNUM").values().tolist() == [1, 2]
        assert not props.has_int_property("MULTNUM")

    def test_explicit_driver(self):
        props = GridProperties.from_records([
            Record("DIMENS", [2, 1, 1]),
            Record("FIPNUM", [3, 4]),
            Record("ADDREG", [["SATNUM", 1, 3, None, "FIPNUM"]]),
        ])
        assert props.get_int_property("SATNUM").values().tolist() == [2, 1]

    def test_driver_materialized_with_defaults(self):
        props = GridProperties.from_records([
            Record("DIMENS", [2, 1, 1]),
            Record("ADDREG", [["PORO", 0.1, 1]]),
        ])
        assert props.has_int_property("MULTNUM")
        assert props.get_double_property("PORO").values().tolist() == pytest.approx([0.1, 0.1])

    def test_cumulative(self):
        props = GridProperties.from_records([
            Record("DIMENS", [2, 1, 1]),
            Record("ADDREG", [["SATNUM", 1, 1], ["SATNUM", 1, 1]]),
            Record("MULTIREG", [["SATNUM", 2, 1]]),
        ])
        assert props.get_int_property("SATNUM").values().tolist() == [6, 6]

    def test_bad_row(self):
        props = GridProperties(GridDims(2, 1, 1))
        with pytest.raises(RecordError):
            props.apply(Record("ADDREG", [["SATNUM", 1]]))
        with pytest.raises(RecordError):
            props.apply(Record("ADDREG", [["SATNUM", 1, 1, "Q"]]))

    def test_unsupported_target(self):
        props = GridProperties(GridDims(2, 1, 1))
        with pytest.raises(UnsupportedKeyword):
            props.apply(Record("ADDREG", [["NONO", 1, 1]]))


class TestBoxEdits:
    def test_equals_explicit_box(self):
        props = GridProperties(GridDims(3, 1, 1))
        props.apply(Record("EQUALS", [["PORO", 0.25, 1, 2, 1, 1, 1, 1]]))
        assert props.get_double_property("PORO").values().tolist() == pytest.approx([0.25, 0.25, 0.0])
        assert not props.context.is_clipped

    def test_equals_uses_active_box(self):
        props = GridProperties(GridDims(3, 1, 1))
        props.process([
            Record("BOX", [3, 3, 1, 1, 1, 1]),
            Record("EQUALS", [["NTG", 0.5]]),
        ])
        assert props.get_double_property("NTG").values().tolist() == pytest.approx([1.0, 1.0, 0.5])

    def test_temperature_equals_and_add(self):
        props = GridProperties(GridDims(1, 1, 1))
        props.apply(Record("EQUALS", [["TEMPI", 100]]))
        assert props.get_double_property("TEMPI").get(0, 0, 0) == pytest.approx(373.15)
        props.apply(Record("ADD", [["TEMPI", 10]]))
        assert props.get_double_property("TEMPI").get(0, 0, 0) == pytest.approx(383.15)

    def test_multiply_not_converted(self):
        props = GridProperties(GridDims(2, 1, 1))
        props.process([
            Record("PERMX", [100, 200]),
            Record("MULTIPLY", [["PERMX", 0.5, 2, 2, 1, 1, 1, 1]]),
        ])
        permx = props.get_double_property("PERMX").values()
        assert permx[0] == pytest.approx(100 * MILLIDARCY, rel=1e-6)
        assert permx[1] == pytest.approx(100 * MILLIDARCY, rel=1e-6)

    def test_copy(self):
        props = GridProperties(GridDims(2, 1, 1))
        props.process([
            Record("PERMX", [10, 20]),
            Record("COPY", [["PERMX", "PERMY"]]),
        ])
        assert props.get_double_property("PERMY").values().tolist() == (
            props.get_double_property("PERMX").values().tolist()
        )

    def test_copy_kind_mismatch(self):
        props = GridProperties(GridDims(2, 1, 1))
        with pytest.raises(TypeMismatch):
            props.apply(Record("COPY", [["SATNUM", "PERMX"]]))

    def test_bad_operand_count(self):
        props = GridProperties(GridDims(2, 1, 1))
        with pytest.raises(RecordError):
            props.apply(Record("EQUALS", [["PORO", 0.1, 1, 1]]))


class TestIteration:
    def test_double_properties(self):
        props = GridProperties.from_records(addreg_permx_deck())
        names = [p.get_keyword_name() for p in props.double_properties()]
        assert len(names) == 2
        assert set(names) == {"PERMX", "PERMZ"}

    def test_int_properties(self):
        props = GridProperties.from_records(addreg_permx_deck())
        names = [p.get_keyword_name() for p in props.int_properties()]
        assert names == ["MULTNUM"]

    def test_insertion_order(self):
        props = GridProperties.from_records(addreg_permx_deck())
        assert [p.name for p in props.double_properties()] == ["PERMZ", "PERMX"]

    def test_query_during_iteration(self):
        props = GridProperties.from_records(addreg_permx_deck())
        seen = []
        for prop in props.int_properties():
            seen.append(prop.name)
            props.get_int_property("FIPNUM")
        assert seen == ["MULTNUM"]
        assert [p.name for p in props.int_properties()] == ["MULTNUM", "FIPNUM"]


class TestFinalize:
    def test_rejects_records(self):
        props = GridProperties.from_records(basic_deck(), finalize=True)
        assert props.is_finalized
        with pytest.raises(ConstructionFinalized):
            props.apply(Record("SATNUM", [1] * 1000))

    def test_arrays_frozen(self):
        props = GridProperties.from_records(basic_deck(), finalize=True)
        satnum = props.get_int_property("SATNUM")
        with pytest.raises(ValueError):
            satnum.set(0, 0, 0, 5)

    def test_absent_property_after_finalize(self):
        props = GridProperties.from_records(basic_deck(), finalize=True)
        eqlnum = props.get_int_property("EQLNUM")
        assert eqlnum.values().tolist() == [1] * 1000
        assert not props.has_int_property("EQLNUM")

    def test_faults_in_deck(self):
        props = GridProperties.from_records(basic_deck())
        assert props.faults.names() == ["F1", "F2"]
        assert props.faults.get("F1").multiplier == pytest.approx(0.5)
        assert props.faults.get("F2").multiplier == pytest.approx(0.125)
