from __future__ import annotations

import logging

import pytest

from shared.protocol import CipherRequest, CipherResult, Role, UsageError, ValidationError, load_validated_text
from shared.protocol.errors import ExitCode
from shared.protocol.validator import validate_lengths
from shared.utils.cli import UsageParser, parse_length, parse_port


def _write(tmp_path, name: str, content: bytes):
    path = tmp_path / name
    path.write_bytes(content)
    return path


def test_loads_first_line_only(tmp_path):
    path = _write(tmp_path, "plain", b"HELLO WORLD\nIGNORED lower case\n")
    assert load_validated_text(path) == ("HELLO WORLD", 11)


def test_crlf_terminator_is_not_content(tmp_path):
    path = _write(tmp_path, "plain", b"HELLO\r\n")
    assert load_validated_text(path) == ("HELLO", 5)


def test_file_without_newline(tmp_path):
    path = _write(tmp_path, "plain", b"NO NEWLINE")
    assert load_validated_text(path) == ("NO NEWLINE", 10)


@pytest.mark.parametrize("content", [b"HELLo\n", b"HELL0\n", b"HI!\n", b"TAB\tHERE\n", b"\xc3\x89T\xc3\x89\n"])
def test_bad_characters_rejected(tmp_path, content):
    path = _write(tmp_path, "plain", content)
    with pytest.raises(ValidationError, match="bad characters"):
        load_validated_text(path)


@pytest.mark.parametrize("content", [b"", b"\n", b"\nHELLO\n"])
def test_empty_content_rejected(tmp_path, content):
    path = _write(tmp_path, "plain", content)
    with pytest.raises(ValidationError, match="cannot be empty"):
        load_validated_text(path)


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ValidationError, match="opening file"):
        load_validated_text(tmp_path / "missing")


def test_validation_errors_exit_with_usage_status():
    assert ValidationError("x").exit_code is ExitCode.USAGE
    assert UsageError("x").exit_code is ExitCode.USAGE


def test_short_key_rejected():
    validate_lengths(5, 5)
    with pytest.raises(ValidationError, match="too short"):
        validate_lengths(5, 4, "mykey")


def test_cipher_request_checks_alphabet_and_key_length():
    request = CipherRequest.build("HELLO", "XMCKLQ")
    assert request.text_bytes == b"HELLO"
    assert request.key_bytes == b"XMCKLQ"

    with pytest.raises(ValidationError, match="bad character"):
        CipherRequest.build("hello", "XMCKL")
    with pytest.raises(ValidationError, match="too short"):
        CipherRequest.build("HELLO", "XMCK")


def test_cipher_request_from_wire_rejects_non_ascii():
    with pytest.raises(ValidationError, match="not ASCII"):
        CipherRequest.from_wire(b"\xff", b"AB")


def test_cipher_request_apply_runs_role_direction():
    assert CipherRequest.build("AB", "CD").apply(Role.ENCRYPT).text == "DF"
    assert CipherRequest.build("DF", "CD").apply(Role.DECRYPT).text == "AB"


def test_cipher_result_rejects_bad_symbols():
    assert CipherResult.from_wire(b"ZY").text == "ZY"
    with pytest.raises(ValidationError):
        CipherResult.from_wire(b"Zy")


def test_parse_port_bounds():
    assert parse_port("50001") == 50001
    assert parse_port("0") == 0
    assert parse_port("65535") == 65535
    for bad in ("65536", "-1", "http", ""):
        with pytest.raises(UsageError):
            parse_port(bad)


def test_low_port_is_only_advisory(caplog):
    with caplog.at_level(logging.WARNING, logger="shared.utils.cli"):
        assert parse_port("8080") == 8080
    assert "50000" in caplog.text


def test_parse_length():
    assert parse_length("10") == 10
    with pytest.raises(UsageError):
        parse_length("0")
    with pytest.raises(UsageError):
        parse_length("ten")


def test_usage_parser_raises_instead_of_exiting():
    parser = UsageParser(prog="demo")
    parser.add_argument("port", type=parse_port)
    with pytest.raises(UsageError, match="usage: demo"):
        parser.parse_args([])
    with pytest.raises(UsageError):
        parser.parse_args(["1", "2"])
