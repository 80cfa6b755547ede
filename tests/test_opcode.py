import pytest

from chip8.opcode import INSTRUCTIONS, decode, disassemble, mnemonic


def test_decode_splits_fields():
    op = decode(0xABCD)
    assert op.a == 0xA
    assert op.x == 0xB
    assert op.y == 0xC
    assert op.n == 0xD
    assert op.nn == 0xCD
    assert op.nnn == 0xBCD


@pytest.mark.parametrize("word", [0x0000, 0xFFFF, 0x1234, 0xD01F])
def test_decode_fields_rebuild_the_word(word):
    op = decode(word)
    assert (op.a << 12) | (op.x << 8) | (op.y << 4) | op.n == word
    assert op.nn == word & 0xFF
    assert op.nnn == word & 0xFFF


@pytest.mark.parametrize("word", [-1, 0x10000])
def test_decode_rejects_words_outside_16_bits(word):
    with pytest.raises(ValueError):
        decode(word)


@pytest.mark.parametrize("word, name", [
    (0x00E0, "CLEAR"),
    (0x00EE, "RETURN"),
    (0x0123, "SYS"),
    (0x1ABC, "JUMP"),
    (0x2ABC, "CALL"),
    (0x5120, "SKIP_REQ"),
    (0x8126, "SHR"),
    (0x812E, "SHL"),
    (0x9120, "SKIP_RNEQ"),
    (0xB123, "JUMP_OFFSET"),
    (0xD125, "DRAW"),
    (0xE59E, "SKIP_PRESSED"),
    (0xE5A1, "SKIP_NOTPRESSED"),
    (0xF50A, "WAIT_KEY"),
    (0xF565, "LOAD_REGS"),
])
def test_mnemonic(word, name):
    assert mnemonic(word) == name


@pytest.mark.parametrize("word", [0x5121, 0x8008, 0x800F, 0x9121, 0xE000, 0xE1FF, 0xF0FF, 0xF100])
def test_mnemonic_unknown(word):
    assert mnemonic(word) is None


def test_every_pattern_matches_itself():
    # the first match for each pattern must be its own entry, i.e. no
    # broader pattern shadows a more specific one
    for mask, pattern, name in INSTRUCTIONS:
        assert mnemonic(pattern) == name


@pytest.mark.parametrize("word, text", [
    (0x00E0, "CLEAR"),
    (0x00EE, "RETURN"),
    (0x6A05, "LOAD_IMM VA, 05"),
    (0x8124, "ADD_REG V1, V2"),
    (0xD125, "DRAW V1, V2, 5"),
    (0xA2F0, "LOAD_INDEX 2F0"),
    (0xB300, "JUMP_OFFSET V0, 300"),
    (0xF00A, "WAIT_KEY V0"),
    (0x5121, "???? 5121"),
])
def test_disassemble(word, text):
    assert disassemble(word) == text
