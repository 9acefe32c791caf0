from __future__ import annotations

import random

import pytest

from bytefmt.core.encoder_base64 import B64, RAW_B64, STD_B64, Base64Encoder
from bytefmt.core.encoder_hex import HEX
from bytefmt.errors import DecodeError, DocumentSyntaxError, EncodeError, MalformedDocumentError

BUILTINS = (HEX, B64, RAW_B64, STD_B64)

# Golden vectors: [0xFF, 0xFE] exercises both 6-bit positions that differ
# between the standard and the URL-safe alphabet.
FFFE = b"\xff\xfe"
FFFE_URLSAFE = "__4="
FFFE_URLSAFE_RAW = "__4"
FFFE_STD = "//4="


@pytest.mark.parametrize("enc", BUILTINS, ids=lambda e: e.encoder_id)
def test_roundtrip_samples(enc) -> None:
    rng = random.Random(1234)
    samples = [b"", b"\x00", b"\xff", b"ab", b"abc", bytes(range(256))]
    samples += [bytes(rng.randrange(256) for _ in range(n)) for n in (5, 31, 64)]
    for b in samples:
        assert enc.decode(enc.encode(b)) == b


@pytest.mark.parametrize("enc", BUILTINS, ids=lambda e: e.encoder_id)
def test_empty_maps_to_empty(enc) -> None:
    assert enc.encode(b"") == ""
    assert enc.decode("") == b""


def test_hex_and_base64_differ() -> None:
    b = b"\x01\x02\x03"
    assert HEX.encode(b) != B64.encode(b)


def test_hex_lowercase_no_prefix() -> None:
    assert HEX.encode(b"\xde\xad\xbe\xef") == "deadbeef"
    assert HEX.encode(bytearray(b"\x0a")) == "0a"
    assert HEX.encode(memoryview(b"\xab")) == "ab"


def test_hex_decode_is_case_insensitive() -> None:
    assert HEX.decode("DEADbeef") == b"\xde\xad\xbe\xef"


@pytest.mark.parametrize("bad", ["xyz", "abc", "zz", "de  ad", "0xdead", "é1"])
def test_hex_decode_rejects(bad: str) -> None:
    with pytest.raises(DecodeError) as ei:
        HEX.decode(bad)
    assert ei.value.value == bad
    assert ei.value.encoder_id == "hex"


def test_hex_decode_odd_length_message() -> None:
    with pytest.raises(DecodeError, match="odd length"):
        HEX.decode("xyz")


def test_base64_golden_vectors() -> None:
    assert B64.encode(FFFE) == FFFE_URLSAFE
    assert RAW_B64.encode(FFFE) == FFFE_URLSAFE_RAW
    assert STD_B64.encode(FFFE) == FFFE_STD

    assert B64.decode(FFFE_URLSAFE) == FFFE
    assert RAW_B64.decode(FFFE_URLSAFE_RAW) == FFFE
    assert STD_B64.decode(FFFE_STD) == FFFE


def test_base64_padding_discipline() -> None:
    assert B64.encode(b"a") == "YQ=="
    assert RAW_B64.encode(b"a") == "YQ"
    # Same text for both when no padding is needed.
    assert B64.encode(b"abc") == RAW_B64.encode(b"abc") == "YWJj"


@pytest.mark.parametrize(
    "enc,bad",
    [
        (B64, "!!!"),
        (B64, FFFE_URLSAFE_RAW),  # raw text under the padded variant
        (B64, FFFE_STD),  # standard alphabet under URL-safe
        (B64, "YQ=="[:3] + "=="),  # too much padding
        (B64, "Y=Q="),  # padding in the middle
        (B64, "YQ== "),
        (RAW_B64, "!!!"),
        (RAW_B64, FFFE_URLSAFE),  # padded text under raw
        (RAW_B64, "YWJjZ"),  # length 1 mod 4
        (STD_B64, FFFE_URLSAFE),
    ],
)
def test_base64_decode_rejects(enc: Base64Encoder, bad: str) -> None:
    with pytest.raises(DecodeError):
        enc.decode(bad)


def test_hex_rejects_base64_text() -> None:
    with pytest.raises(DecodeError):
        HEX.decode(FFFE_URLSAFE)


def test_decode_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        B64.decode("!!!")


@pytest.mark.parametrize("enc", BUILTINS, ids=lambda e: e.encoder_id)
def test_encode_requires_bytes(enc) -> None:
    with pytest.raises(EncodeError):
        enc.encode("not bytes")
    with pytest.raises(TypeError):
        enc.encode([1, 2, 3])


@pytest.mark.parametrize("enc", BUILTINS, ids=lambda e: e.encoder_id)
def test_decode_requires_str(enc) -> None:
    with pytest.raises(DecodeError):
        enc.decode(b"abcd")


def test_encoder_ids() -> None:
    assert [e.encoder_id for e in BUILTINS] == ["hex", "base64", "base64_raw", "base64_std"]


def test_base64_variants_are_values() -> None:
    assert Base64Encoder(padded=True) == B64
    assert Base64Encoder(padded=False) != B64
    with pytest.raises(AttributeError):
        B64.padded = False  # type: ignore[misc]


def test_marshal_quotes_as_json_string() -> None:
    assert HEX.marshal(b"\xde\xad") == '"dead"'
    assert B64.marshal(FFFE) == '"__4="'


def test_unmarshal_accepts_text_or_bytes() -> None:
    assert HEX.unmarshal('"dead"') == b"\xde\xad"
    assert HEX.unmarshal(b'"dead"') == b"\xde\xad"
    assert B64.unmarshal(' "__4=" ') == FFFE


@pytest.mark.parametrize("fragment", ["42", "null", "true", "[]", "{}"])
def test_unmarshal_rejects_non_string(fragment: str) -> None:
    with pytest.raises(MalformedDocumentError, match="parse string: expected a JSON string"):
        HEX.unmarshal(fragment)


def test_unmarshal_wraps_json_errors() -> None:
    with pytest.raises(MalformedDocumentError, match="parse string: invalid JSON") as ei:
        HEX.unmarshal('"dead')
    assert ei.value.stage == "parse string"
    assert isinstance(ei.value.__cause__, ValueError)


def test_unmarshal_bad_content_is_decode_error() -> None:
    with pytest.raises(DecodeError):
        HEX.unmarshal('"xyz"')


@pytest.mark.parametrize("fragment", ['"dead', "dead", b'"\xff"'])
def test_unmarshal_broken_json_is_also_decode_error(fragment) -> None:
    with pytest.raises(DecodeError) as ei:
        HEX.unmarshal(fragment)
    err = ei.value
    assert isinstance(err, DocumentSyntaxError)
    assert isinstance(err, MalformedDocumentError)
    assert err.stage == "parse string"
    assert err.value == fragment
    assert err.encoder_id == "hex"


def test_well_formed_non_string_is_not_decode_error() -> None:
    with pytest.raises(MalformedDocumentError) as ei:
        B64.unmarshal("42")
    assert not isinstance(ei.value, DecodeError)
