import base64
import binascii

import bech32

DEFAULT_HRP = "bytez"
MAX_BECH32_LENGTH = 1023
MAX_HRP_LENGTH = 83
UINT64_MAX = 2 ** 64 - 1
TOO_LARGE = "# too large"
INVALID_HRP = "# invalid hrp"


class ConversionError(ValueError):
    def __init__(self, message, codec_id=None):
        super().__init__(message)
        self.codec_id = codec_id


class MalformedInput(ConversionError):
    pass


class Overflow(ConversionError):
    pass


class ChecksumInvalid(ConversionError):
    pass


class UnknownCodec(ConversionError):
    pass


class AsciiCodec:
    codec_id = "ascii"
    label = "ASCII"
    placeholder = "hello"

    def decode(self, text: str, params=None) -> bytes:
        return text.encode("utf-8")

    def encode(self, data: bytes, params=None) -> str:
        # lossy for bytes that are not valid UTF-8
        return data.decode("utf-8", errors="replace")


class BinaryCodec:
    codec_id = "binary"
    label = "Binary"
    placeholder = "110011"

    def decode(self, text: str, params=None) -> bytes:
        bits = text.replace(" ", "")
        if len(bits) % 8:
            bits = "0" * (8 - len(bits) % 8) + bits
        out = bytearray()
        for i in range(0, len(bits), 8):
            group = bits[i:i + 8]
            if set(group) - {"0", "1"}:
                raise MalformedInput(f"Invalid binary group '{group}'.", self.codec_id)
            out.append(int(group, 2))
        return bytes(out)

    def encode(self, data: bytes, params=None) -> str:
        return "".join(f"{b:08b}" for b in data)


class DecimalCodec:
    codec_id = "decimal"
    label = "Decimal"
    placeholder = "1234"

    def decode(self, text: str, params=None) -> bytes:
        if not text:
            return b""
        for char in text:
            if char not in "0123456789":
                raise MalformedInput(f"Invalid character '{char}' for base 10.", self.codec_id)
        digits = text.lstrip("0")
        if len(digits) > len(str(UINT64_MAX)):
            raise Overflow(f"{len(digits)}-digit value does not fit in 64 bits.", self.codec_id)
        value = int(digits or "0")
        if value > UINT64_MAX:
            raise Overflow(f"{digits} does not fit in 64 bits.", self.codec_id)
        # minimal big-endian form, so 0 becomes b""
        return value.to_bytes(8, "big").lstrip(b"\x00")

    def encode(self, data: bytes, params=None) -> str:
        if not data:
            return ""
        if len(data) > 8:
            return TOO_LARGE
        return str(int.from_bytes(data, "big"))


class HexCodec:
    codec_id = "hex"
    label = "Hexadecimal"
    placeholder = "aabbccddeeff"

    def decode(self, text: str, params=None) -> bytes:
        if text.startswith("0x"):
            text = text[2:]
        text = text.replace(" ", "")
        try:
            return binascii.unhexlify(text)
        except (binascii.Error, ValueError) as e:
            raise MalformedInput(f"Could not parse hex: {e}", self.codec_id) from e

    def encode(self, data: bytes, params=None) -> str:
        return data.hex()


class Base64Codec:
    codec_id = "base64"
    label = "Base64"
    placeholder = "qrvM"

    def decode(self, text: str, params=None) -> bytes:
        try:
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedInput(f"Could not parse base64: {e}", self.codec_id) from e

    def encode(self, data: bytes, params=None) -> str:
        return base64.b64encode(data).decode("ascii")


class Bech32Codec:
    """Bech32 with a human-readable prefix carried in the ``hrp`` side parameter.

    Decoding stores the prefix it found under ``hrp`` unless the caller
    already supplied one, so the re-render uses the prefix of the input.
    """

    codec_id = "bech32"
    label = "Bech32"
    placeholder = "cosmos1..."
    param_key = "hrp"

    def hrp(self, params) -> str:
        if params is None:
            return DEFAULT_HRP
        return params.get(self.param_key) or DEFAULT_HRP

    def decode(self, text: str, params=None) -> bytes:
        if not text:
            return b""
        hrp, words = self._split(text)
        if not bech32.bech32_verify_checksum(hrp, words):
            raise ChecksumInvalid(f"Checksum mismatch for prefix '{hrp}'.", self.codec_id)
        decoded = bech32.convertbits(words[:-6], 5, 8, False)
        if decoded is None:
            raise MalformedInput("Invalid padding in data part.", self.codec_id)
        if params is not None and not params.get(self.param_key):
            params[self.param_key] = hrp
        return bytes(decoded)

    def _split(self, text: str):
        if len(text) > MAX_BECH32_LENGTH:
            raise MalformedInput(f"Input is too long (max {MAX_BECH32_LENGTH} characters).", self.codec_id)
        if any(ord(c) < 33 or ord(c) > 126 for c in text):
            raise MalformedInput("Invalid character in bech32 string.", self.codec_id)
        if text.lower() != text and text.upper() != text:
            raise MalformedInput("Mixed case bech32 string.", self.codec_id)
        text = text.lower()
        pos = text.rfind("1")
        if pos < 1 or pos + 7 > len(text):
            raise MalformedInput("Missing separator or checksum.", self.codec_id)
        for char in text[pos + 1:]:
            if char not in bech32.CHARSET:
                raise MalformedInput(f"Invalid character '{char}' in data part.", self.codec_id)
        return text[:pos], [bech32.CHARSET.find(c) for c in text[pos + 1:]]

    def encode(self, data: bytes, params=None) -> str:
        if not data:
            return ""
        hrp = self.hrp(params).lower()
        if len(hrp) > MAX_HRP_LENGTH or any(ord(c) < 33 or ord(c) > 126 for c in hrp):
            return INVALID_HRP
        # payloads over ~630 bytes exceed MAX_BECH32_LENGTH and will not decode back
        return bech32.bech32_encode(hrp, bech32.convertbits(data, 8, 5))


# registration and display order
CODECS = (
    AsciiCodec(),
    BinaryCodec(),
    DecimalCodec(),
    HexCodec(),
    Base64Codec(),
    Bech32Codec(),
)
