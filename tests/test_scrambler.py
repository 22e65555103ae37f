import pytest

from oled_manager.config import Mode
from oled_manager.errors import InvalidBufferSize, InvalidMode
from oled_manager.scrambler import scramble, unscramble

SIZES = {Mode.USB: 1024, Mode.BT: 256, Mode.BT_SCRAMBLED: 256}


def _single_byte(size, position, value=0xFF):
    buf = bytearray(size)
    buf[position] = value
    return bytes(buf)


@pytest.mark.parametrize("mode", list(Mode))
def test_scramble_keeps_length(mode, random_buffer):
    assert len(scramble(random_buffer(SIZES[mode]), mode)) == SIZES[mode]


@pytest.mark.parametrize("mode", list(Mode))
def test_scramble_rejects_wrong_length(mode):
    with pytest.raises(InvalidBufferSize):
        scramble(bytes(SIZES[mode] + 1), mode)
    with pytest.raises(InvalidBufferSize):
        unscramble(bytes(SIZES[mode] - 1), mode)


def test_scramble_rejects_unknown_mode():
    with pytest.raises(InvalidMode):
        scramble(bytes(256), 3)


@pytest.mark.parametrize("mode", list(Mode))
def test_scramble_is_a_bijection(mode):
    size = SIZES[mode]
    outputs = set()
    for position in range(size):
        buf = _single_byte(size, position)
        out = scramble(buf, mode)
        assert unscramble(out, mode) == buf
        outputs.add(out)
    assert len(outputs) == size


@pytest.mark.parametrize("mode", list(Mode))
def test_unscramble_inverts_scramble(mode, random_buffer):
    for seed in range(5):
        buf = random_buffer(SIZES[mode], seed)
        assert unscramble(scramble(buf, mode), mode) == buf
        assert scramble(unscramble(buf, mode), mode) == buf


def test_bt_is_identity(random_buffer):
    buf = random_buffer(256)
    assert scramble(buf, Mode.BT) == buf


def test_usb_zero_buffer_stays_zero():
    assert scramble(bytes(1024), Mode.USB) == bytes(1024)


def test_usb_uniform_buffer_pairs_nibbles():
    assert scramble(b"\x37" * 1024, Mode.USB) == b"\x77\x33" * 512
    assert scramble(b"\x77" * 1024, Mode.USB) == b"\x77" * 1024


@pytest.mark.parametrize("position,value,expected", [
    # byte 31 of a row group feeds the low nibbles of output bytes 0 and 1
    (31, 0xAB, {0: 0x0B, 1: 0x0A}),
    # byte 63 feeds the high nibbles
    (63, 0xCD, {0: 0xD0, 1: 0xC0}),
    (0, 0x12, {62: 0x02, 63: 0x01}),
    (64 + 32, 0x34, {64 + 62: 0x40, 64 + 63: 0x30}),
])
def test_usb_known_vectors(position, value, expected):
    out = scramble(_single_byte(1024, position, value), Mode.USB)
    assert {i: b for i, b in enumerate(out) if b} == expected


@pytest.mark.parametrize("position,value,expected", [
    (7, 0x01, {0: 0x01}),
    (15, 0x80, {1: 0x80}),
    (0, 0xFF, {14: 0x55, 15: 0x55}),
    (8, 0xFF, {14: 0xAA, 15: 0xAA}),
    (200, 0x0F, {206: 0xAA}),
    (71, 0xF0, {65: 0x55}),
])
def test_bt_scrambled_known_vectors(position, value, expected):
    out = scramble(_single_byte(256, position, value), Mode.BT_SCRAMBLED)
    assert {i: b for i, b in enumerate(out) if b} == expected


def test_bt_scrambled_twice_is_not_identity():
    buf = _single_byte(256, 7, 0x01)
    once = scramble(buf, Mode.BT_SCRAMBLED)
    twice = scramble(once, Mode.BT_SCRAMBLED)
    assert twice != buf
    assert {i: b for i, b in enumerate(twice) if b} == {14: 0x01}
