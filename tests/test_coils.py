import copy
import io

import pytest

from modbuskit.coils import CoilData


def _example_coils():
    coils = CoilData(35)
    for index in (3, 5, 6, 7, 13, 14, 28, 30, 31, 33):
        coils.set(index, True)
    return coils


def test_size_is_capped_at_2000():
    assert len(CoilData(5000)) == 2000


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        CoilData(-1)


def test_init_value_true_sets_every_coil():
    coils = CoilData(10, True)
    assert coils.coils_on() == 10
    assert coils.coils_off() == 0
    assert all(coils)


def test_default_is_empty():
    coils = CoilData()
    assert len(coils) == 0
    assert not coils
    assert bytes(coils) == b""


def test_from_image_packs_lsb_first():
    assert bytes(CoilData.from_image("1101")) == b"\x0b"


def test_from_image_skip_marker_and_separators():
    coils = CoilData.from_image("1_01 0")
    assert len(coils) == 3
    assert coils.matches("110")


def test_from_image_without_bits_is_empty():
    assert not CoilData.from_image("abc _1")


def test_from_image_too_long_is_empty():
    assert not CoilData.from_image("1" * 2001)


def test_assign_image_invalid_raises_and_empties():
    coils = CoilData(8, True)
    with pytest.raises(ValueError):
        coils.assign_image("")
    assert len(coils) == 0


def test_assign_image_replaces_content():
    coils = CoilData(40)
    coils.assign_image("011010010110")
    assert coils == CoilData.from_image("0110 1001 0110")
    assert len(coils) == 12


def test_getitem_out_of_range_reads_false():
    coils = CoilData(4, True)
    assert coils[3] is True
    assert coils[4] is False
    assert coils[-1] is False


def test_example_format():
    coils = _example_coils()
    assert coils.format("Initial coil state: ") == (
        "Initial coil state: 0001 0111 0000 0110 0000 0000 0000 1011 010\n"
    )


def test_example_slice():
    received = _example_coils().slice(13, 12)
    assert received.format().rstrip() == "1100 0000 0000"


def test_example_write_single_and_block():
    coils = _example_coils()
    coils.set(8, True)
    assert coils.format().rstrip() == "0001 0111 1000 0110 0000 0000 0000 1011 010"
    block = CoilData.from_image("011010010110")
    coils.set_bytes(20, len(block), bytes(block))
    assert coils.format().rstrip() == "0001 0111 1000 0110 0000 0110 1001 0110 010"


def test_slice_defaults_to_whole_set():
    coils = _example_coils()
    assert coils.slice() == coils


def test_slice_illegal_ranges_are_empty():
    coils = CoilData(10)
    assert not coils.slice(11)
    assert not coils.slice(5, 6)
    assert not CoilData().slice(0, 1)


def test_set_out_of_range_raises():
    with pytest.raises(IndexError):
        CoilData(5).set(5, True)


def test_set_then_clear():
    coils = CoilData(9)
    coils.set(8, True)
    assert coils[8]
    coils.set(8, False)
    assert coils.coils_on() == 0


def test_set_bytes_round_trip():
    source = CoilData.from_image("1011 0010 1110 0001 101")
    target = CoilData(len(source))
    target.set_bytes(0, len(source), bytes(source))
    assert target == source


def test_set_bytes_short_data_raises():
    with pytest.raises(ValueError):
        CoilData(16).set_bytes(0, 16, b"\x01")


def test_set_bytes_bad_range_raises():
    coils = CoilData(8)
    with pytest.raises(IndexError):
        coils.set_bytes(4, 5, b"\xff")
    with pytest.raises(IndexError):
        coils.set_bytes(0, 0, b"\xff")


def test_set_coils_stops_at_end_of_target():
    target = CoilData(6)
    target.set_coils(4, CoilData.from_image("1111"))
    assert target.matches("000011")
    assert target.coils_on() == 2


def test_set_coils_errors():
    with pytest.raises(ValueError):
        CoilData(4).set_coils(0, CoilData())
    with pytest.raises(IndexError):
        CoilData(4).set_coils(4, CoilData.from_image("1"))


def test_set_image_partial_overwrite():
    coils = CoilData(8, True)
    coils.set_image(2, "00_10")
    assert coils.matches("11000111")


def test_set_image_out_of_range_raises():
    with pytest.raises(IndexError):
        CoilData().set_image(0, "1")


def test_matches_extra_bits_fail_but_skipped_ones_do_not():
    coils = CoilData.from_image("11")
    assert not coils.matches("111")
    assert coils.matches("11_1")
    assert coils == "11"
    assert coils != "10"


def test_init_resets_all():
    coils = _example_coils()
    coils.init()
    assert coils.coils_on() == 0
    coils.init(True)
    assert coils.coils_off() == 0


def test_format_wraps_and_keeps_all_digits():
    image = "1001" * 25
    coils = CoilData.from_image(image)
    text = coils.format("L: ")
    lines = text.splitlines()
    assert len(lines) > 1
    assert all(line.startswith("   ") for line in lines[1:])
    assert "".join(ch for ch in text[3:] if ch in "01") == image


def test_print_writes_format():
    coils = _example_coils()
    out = io.StringIO()
    coils.print("x ", out)
    assert out.getvalue() == coils.format("x ")


def test_copy_is_independent():
    coils = _example_coils()
    clone = copy.copy(coils)
    clone.set(0, True)
    assert clone != coils
    assert not coils[0]
    assert copy.deepcopy(coils) == coils