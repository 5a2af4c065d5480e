import base64

import bech32
import pytest

from byte_codecs import (
    CODECS,
    DEFAULT_HRP,
    INVALID_HRP,
    TOO_LARGE,
    AsciiCodec,
    Base64Codec,
    Bech32Codec,
    BinaryCodec,
    ChecksumInvalid,
    DecimalCodec,
    HexCodec,
    MalformedInput,
    Overflow,
)
from conversion import SideParams

SAMPLES = [b"", b"\x00", b"\xff", b"\xaa\xbb", b"hello world", bytes(range(64))]


def cosmos_address(payload: bytes, hrp: str = "cosmos") -> str:
    return bech32.bech32_encode(hrp, bech32.convertbits(payload, 8, 5))


def test_registration_order():
    ids = [c.codec_id for c in CODECS]
    assert ids == ["ascii", "binary", "decimal", "hex", "base64", "bech32"]
    assert len(set(ids)) == len(ids)


@pytest.mark.parametrize("codec", [BinaryCodec(), HexCodec(), Base64Codec(), Bech32Codec()])
@pytest.mark.parametrize("data", SAMPLES)
def test_round_trip(codec, data):
    # ascii only round-trips UTF-8 and bech32 stops at 1023 characters; see the tests below
    params = SideParams()
    assert codec.decode(codec.encode(data, params), params) == data


def test_ascii_round_trip_for_utf8_text():
    codec = AsciiCodec()
    for data in [b"", b"hello", "héllo".encode("utf-8")]:
        assert codec.decode(codec.encode(data)) == data


def test_ascii_encode_replaces_invalid_utf8():
    assert AsciiCodec().encode(b"\xaa\xbb") == "\ufffd\ufffd"


def test_decimal_strips_leading_zero_bytes():
    codec = DecimalCodec()
    assert codec.encode(b"\x00\x01") == "1"
    assert codec.decode(codec.encode(b"\x00\x01")) == b"\x01"
    assert codec.decode(codec.encode(b"\x01\x00")) == b"\x01\x00"


def test_hex_decode():
    codec = HexCodec()
    assert codec.decode("0xAABB") == b"\xaa\xbb"
    assert codec.decode("aa bb cc") == b"\xaa\xbb\xcc"
    assert codec.decode("") == b""
    assert codec.encode(b"\xaa\xbb") == "aabb"


@pytest.mark.parametrize("text", ["abc", "zz", "0x1", "éé"])
def test_hex_decode_malformed(text):
    with pytest.raises(MalformedInput) as exc:
        HexCodec().decode(text)
    assert exc.value.codec_id == "hex"


def test_binary_decode_pads_to_byte():
    codec = BinaryCodec()
    assert codec.decode("11111111") == b"\xff"
    assert codec.decode("1") == b"\x01"
    assert codec.decode("1 00000000") == b"\x01\x00"
    assert codec.encode(b"\x01\x80") == "0000000110000000"


def test_binary_decode_malformed():
    with pytest.raises(MalformedInput):
        BinaryCodec().decode("10102010")


def test_decimal_decode():
    codec = DecimalCodec()
    assert codec.decode("0") == b""
    assert codec.decode("255") == b"\xff"
    assert codec.decode("256") == b"\x01\x00"
    assert codec.decode(str(2 ** 64 - 1)) == b"\xff" * 8


@pytest.mark.parametrize("text", ["-1", "+1", "1.5", " 1", "1_000", "abc"])
def test_decimal_decode_malformed(text):
    with pytest.raises(MalformedInput):
        DecimalCodec().decode(text)


def test_decimal_decode_overflow():
    with pytest.raises(Overflow):
        DecimalCodec().decode(str(2 ** 64))


def test_decimal_encode():
    codec = DecimalCodec()
    assert codec.encode(b"\xff") == "255"
    assert codec.encode(b"\xff" * 8) == str(2 ** 64 - 1)
    assert codec.encode(b"\x01" * 9) == TOO_LARGE


def test_base64():
    codec = Base64Codec()
    assert codec.encode(b"\xaa\xbb") == base64.b64encode(b"\xaa\xbb").decode() == "qrs="
    assert codec.decode("qrs=") == b"\xaa\xbb"


@pytest.mark.parametrize("text", ["qrs", "qr$=", "q"])
def test_base64_malformed(text):
    with pytest.raises(MalformedInput):
        Base64Codec().decode(text)


def test_bech32_decode_infers_hrp():
    payload = bytes(range(20))
    params = SideParams()
    codec = Bech32Codec()
    assert codec.decode(cosmos_address(payload), params) == payload
    assert params["hrp"] == "cosmos"
    assert codec.encode(payload, params) == cosmos_address(payload)


def test_bech32_decode_keeps_supplied_hrp():
    payload = b"\x01\x02\x03"
    params = SideParams({"hrp": "osmo"})
    codec = Bech32Codec()
    codec.decode(cosmos_address(payload), params)
    assert params["hrp"] == "osmo"
    assert codec.encode(payload, params).startswith("osmo1")


def test_bech32_encode_default_hrp():
    assert Bech32Codec().encode(b"\x01", SideParams()).startswith(DEFAULT_HRP + "1")
    assert Bech32Codec().encode(b"\x01").startswith(DEFAULT_HRP + "1")


def test_bech32_encode_invalid_hrp():
    assert Bech32Codec().encode(b"\x01", SideParams({"hrp": "a b"})) == INVALID_HRP


def test_bech32_uppercase_accepted():
    payload = b"\xde\xad"
    assert Bech32Codec().decode(cosmos_address(payload).upper(), SideParams()) == payload


def test_bech32_checksum_invalid():
    address = cosmos_address(bytes(range(20)))
    last = "q" if address[-1] != "q" else "p"
    with pytest.raises(ChecksumInvalid):
        Bech32Codec().decode(address[:-1] + last, SideParams())


@pytest.mark.parametrize("text", ["cosmos", "1qqqqqqqq", "cosmos1qqb", "Cosmos1qqqqqqqq", "cosmos1qqqqqqqb", "x" * 1024])
def test_bech32_malformed(text):
    with pytest.raises(MalformedInput):
        Bech32Codec().decode(text, SideParams())


def test_bech32_long_payload_round_trip():
    payload = bytes(range(256))
    params = SideParams()
    codec = Bech32Codec()
    assert codec.decode(codec.encode(payload, params), params) == payload


@pytest.mark.parametrize("codec", CODECS)
def test_empty_bytes_render_empty(codec):
    assert codec.encode(b"", SideParams()) == ""
    assert codec.decode("", SideParams()) == b""


def test_decimal_decode_many_digits():
    codec = DecimalCodec()
    with pytest.raises(Overflow):
        codec.decode("9" * 5000)
    assert codec.decode("0" * 5000 + "1") == b"\x01"
    assert codec.decode("0" * 5000) == b""


def test_ascii_round_trip_loses_invalid_utf8():
    codec = AsciiCodec()
    assert codec.decode(codec.encode(b"\xaa\xbb")) != b"\xaa\xbb"


def test_bech32_round_trip_limited_by_length():
    codec = Bech32Codec()
    params = SideParams()
    text = codec.encode(bytes(700), params)
    assert len(text) > 1023
    with pytest.raises(MalformedInput):
        codec.decode(text, params)
