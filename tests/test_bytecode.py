import pytest

from evmcore.bits import B256
from evmcore.bytecode import (
    AnalysedState,
    Bytecode,
    CheckedState,
    JumpMap,
    RawState,
)
from evmcore.utilities import KECCAK_EMPTY, keccak256


def test_new_is_single_stop():
    code = Bytecode.new()
    assert code.bytecode == b"\x00"
    assert code.hash == KECCAK_EMPTY
    assert len(code) == 0
    assert code.is_empty()
    assert code.original_bytes() == b""
    assert isinstance(code.state, AnalysedState)
    assert not code.state.jump_map.is_valid(0)


def test_new_raw_empty_uses_empty_hash():
    code = Bytecode.new_raw(b"")
    assert code.hash == KECCAK_EMPTY
    assert code.is_empty()
    assert code.state == RawState()


def test_new_raw_hashes_code():
    data = bytes([0x60, 0x01, 0x00])
    code = Bytecode.new_raw(data)
    assert code.hash == keccak256(data)
    assert len(code) == len(data)
    assert code.original_bytes() == data
    assert not code.is_empty()


def test_new_raw_with_hash_keeps_hash():
    given = B256.from_int(7)
    code = Bytecode.new_raw_with_hash(b"\x01\x02", given)
    assert code.hash == given
    assert code.state == RawState()


def test_to_checked_pads_and_keeps_original():
    data = bytes([0x60, 0x01])
    raw = Bytecode.new_raw(data)
    checked = raw.to_checked()
    assert checked.state == CheckedState(len(data))
    assert len(checked.bytecode) == len(data) + 33
    assert checked.bytecode[len(data):] == bytes(33)
    assert checked.original_bytes() == data
    assert checked.hash == raw.hash
    assert len(checked) == len(raw)


def test_to_checked_is_idempotent():
    checked = Bytecode.new_raw(b"\x01").to_checked()
    assert checked.to_checked() == checked
    analysed = Bytecode.new()
    assert analysed.to_checked() is analysed


def test_new_checked_hash_choices():
    padded = b"\x01" + bytes(33)
    assert Bytecode.new_checked(bytes(33), 0).hash == KECCAK_EMPTY
    assert Bytecode.new_checked(padded, 1).hash == keccak256(padded)
    given = B256.from_int(1)
    assert Bytecode.new_checked(padded, 1, given).hash == given


def test_jump_map_bits_are_lsb_first():
    jump_map = JumpMap.from_slice(b"\x05")
    assert [jump_map.is_valid(pc) for pc in range(4)] == [True, False, True, False]
    assert not jump_map.is_valid(8)
    assert not jump_map.is_valid(-1)


def test_jump_map_round_trip():
    data = b"\xa5\x3c"
    assert JumpMap.from_slice(data).as_slice() == data


def test_jump_map_rejects_oversized_length():
    with pytest.raises(ValueError):
        JumpMap(b"\x00", 9)