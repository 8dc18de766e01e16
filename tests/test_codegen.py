# =============================================================================
# test_codegen.py - Code Generator Tests
# =============================================================================
# Tests for instruction encoding and the CodeGenerator output formats.
#
# Test coverage includes:
#   - Address instruction encoding
#   - Compute and jump instruction encoding (a-bit, dest, jump fields)
#   - Unknown mnemonics
#   - Listing and symbol output
# =============================================================================

import logging

import pytest
from hack_asm.assembler.codegen import CodeGenerator, encode
from hack_asm.assembler.lexer import scan
from hack_asm.assembler.opcodes import COMP_TABLE, DEST_TABLE, JUMP_TABLE, WORD_BITS
from hack_asm.assembler.parser import (
    AddressInstruction,
    ComputeInstruction,
    JumpInstruction,
    parse,
)
from hack_asm.assembler.symbols import build_symbol_table
from hack_asm.errors import EncodingError, SourceLocation, StructuralError


# =============================================================================
# Address Instructions
# =============================================================================

class TestAddressEncoding:

    @pytest.mark.parametrize("value,word", [
        (0, "0000000000000000"),
        (1, "0000000000000001"),
        (2, "0000000000000010"),
        (16384, "0100000000000000"),
        (24576, "0110000000000000"),
        (32767, "0111111111111111"),
    ])
    def test_known_values(self, value, word):
        assert encode(AddressInstruction(value)) == word

    @pytest.mark.parametrize("value", [0, 5, 255, 1000, 21845, 32767])
    def test_word_shape(self, value):
        """Sixteen binary digits, leading 0, value in the low 15 bits."""
        word = encode(AddressInstruction(value))
        assert len(word) == WORD_BITS
        assert set(word) <= {"0", "1"}
        assert word[0] == "0"
        assert int(word, 2) == value

    def test_out_of_range(self):
        with pytest.raises(StructuralError, match="15 bits"):
            encode(AddressInstruction(40000))

    def test_negative(self):
        with pytest.raises(StructuralError):
            encode(AddressInstruction(-1))


# =============================================================================
# Compute and Jump Instructions
# =============================================================================

class TestComputeEncoding:

    @pytest.mark.parametrize("dest,comp,word", [
        ("D", "A", "1110110000010000"),
        ("D", "D+A", "1110000010010000"),
        ("M", "D", "1110001100001000"),
        ("D", "M", "1111110000010000"),
        ("D", "D-M", "1111010011010000"),
        ("MD", "M-1", "1111110010011000"),
        ("M", "-1", "1110111010001000"),
        ("A", "M", "1111110000100000"),
        ("AMD", "0", "1110101010111000"),
    ])
    def test_known_words(self, dest, comp, word):
        assert encode(ComputeInstruction(dest, comp)) == word

    def test_no_destination(self):
        assert encode(ComputeInstruction(None, "D+1")) == "1110011111000000"

    @pytest.mark.parametrize("comp", sorted(COMP_TABLE))
    def test_a_bit(self, comp):
        word = encode(ComputeInstruction("D", comp))
        assert word[:3] == "111"
        assert word[3] == ("1" if "M" in comp else "0")
        assert word[4:10] == COMP_TABLE[comp]

    @pytest.mark.parametrize("dest", sorted(DEST_TABLE))
    def test_dest_field(self, dest):
        word = encode(ComputeInstruction(dest, "0"))
        assert word[10:13] == DEST_TABLE[dest]
        assert word[13:] == "000"

    def test_commutative_spelling(self):
        assert (encode(ComputeInstruction("D", "A+D"))
                == encode(ComputeInstruction("D", "D+A")))
        assert (encode(ComputeInstruction("D", "M|D"))
                == encode(ComputeInstruction("D", "D|M")))

    def test_unrecognized_destination_stores_nowhere(self, caplog):
        with caplog.at_level(logging.WARNING):
            word = encode(ComputeInstruction("DM", "D+1"))
        assert word[10:13] == "000"
        assert "unrecognized destination 'DM'" in caplog.text


class TestJumpEncoding:

    @pytest.mark.parametrize("comp,jump,word", [
        ("0", "JMP", "1110101010000111"),
        ("D", "JGT", "1110001100000001"),
        ("D", "JLE", "1110001100000110"),
        ("M", "JEQ", "1111110000000010"),
    ])
    def test_known_words(self, comp, jump, word):
        assert encode(JumpInstruction(comp, jump)) == word

    @pytest.mark.parametrize("jump", sorted(JUMP_TABLE))
    def test_jump_field(self, jump):
        word = encode(JumpInstruction("D", jump))
        assert word[10:13] == "000"
        assert word[13:] == JUMP_TABLE[jump]


# =============================================================================
# Unknown Mnemonics
# =============================================================================

class TestEncodingErrors:

    def test_unknown_computation(self):
        with pytest.raises(EncodingError) as exc_info:
            encode(ComputeInstruction("D", "D*A"))
        error = exc_info.value
        assert error.mnemonic == "D*A"
        assert "unknown computation mnemonic 'D*A'" in str(error)
        assert "D+A" in error.valid_mnemonics

    def test_unknown_computation_in_jump(self):
        with pytest.raises(EncodingError):
            encode(JumpInstruction("D+D", "JMP"))

    def test_unknown_jump(self):
        with pytest.raises(EncodingError) as exc_info:
            encode(JumpInstruction("0", "JXX"))
        assert "unknown jump mnemonic 'JXX'" in str(exc_info.value)
        assert "JMP" in str(exc_info.value)

    def test_error_keeps_location(self):
        location = SourceLocation("prog.asm", 7, 4)
        with pytest.raises(EncodingError) as exc_info:
            encode(ComputeInstruction("D", "A*D", location=location))
        assert exc_info.value.location == location

    def test_not_an_instruction(self):
        with pytest.raises(TypeError):
            encode("D=M")


# =============================================================================
# CodeGenerator
# =============================================================================

def generate(source: str) -> CodeGenerator:
    tokens = scan(source, "prog.asm")
    symbols = build_symbol_table(tokens)
    codegen = CodeGenerator()
    codegen.generate(parse(tokens, symbols, source), symbols, source)
    return codegen


class TestCodeGenerator:

    def test_words_in_program_order(self):
        codegen = generate("@2\nD=A\n@3\nD=D+A")
        assert codegen.get_words() == [
            "0000000000000010",
            "1110110000010000",
            "0000000000000011",
            "1110000010010000",
        ]

    def test_output_has_no_trailing_separator(self):
        codegen = generate("@1\n@2")
        assert codegen.get_output() == "0000000000000001\n0000000000000010"
        assert codegen.get_output("\r\n") == "0000000000000001\r\n0000000000000010"

    def test_empty_program(self):
        codegen = generate("// nothing\n")
        assert codegen.get_words() == []
        assert codegen.get_output() == ""

    def test_generate_resets_state(self):
        codegen = CodeGenerator()
        codegen.generate([AddressInstruction(1), AddressInstruction(2)])
        words = codegen.generate([AddressInstruction(3)])
        assert words == ["0000000000000011"]
        assert codegen.get_words() == words

    def test_error_quotes_source_line(self):
        source = "@1\n  D=D*A"
        tokens = scan(source)
        symbols = build_symbol_table(tokens)
        with pytest.raises(EncodingError) as exc_info:
            CodeGenerator().generate(parse(tokens, symbols, source), symbols, source)
        assert exc_info.value.source_line == "  D=D*A"
        assert exc_info.value.location.line == 2

    def test_range_error_quotes_source_line(self):
        """An address that only overflows at encoding time still names its line."""
        location = SourceLocation("prog.asm", 2, 1)
        with pytest.raises(StructuralError) as exc_info:
            CodeGenerator().generate(
                [AddressInstruction(1), AddressInstruction(40000, location=location)],
                source="@1\n@FAR",
            )
        assert exc_info.value.source_line == "@FAR"
        assert exc_info.value.location == location
        assert "15 bits" in str(exc_info.value)

    def test_listing(self):
        codegen = generate("(LOOP)\n@i\nM=M+1 // bump\n@LOOP\n0;JMP")
        listing = codegen.get_listing()
        assert "Hack Assembler Listing" in listing
        assert "0000000000010000" in listing
        assert "M=M+1 // bump" in listing
        assert "Symbol Table" in listing
        assert "LOOP" in listing
        assert "variable" in listing
        assert "SCREEN" not in listing

    def test_get_symbols_includes_reserved(self):
        symbols = generate("@x").get_symbols()
        assert symbols["x"] == 16
        assert symbols["KBD"] == 24576

    def test_write_symbols(self, tmp_path):
        path = tmp_path / "prog.sym"
        generate("(LOOP)\n@i\n@LOOP").write_symbols(path)
        lines = path.read_text().splitlines()
        assert lines[0].startswith("#")
        assert "LOOP 0 label" in lines
        assert "i 16 variable" in lines
