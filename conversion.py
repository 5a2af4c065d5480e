import logging
from typing import List, NamedTuple, Optional, Tuple

from werkzeug.datastructures import MultiDict

from byte_codecs import CODECS, ConversionError, UnknownCodec
from protobuf_view import VIEWS

IDLE = "idle"
DECODED = "decoded"
DECODE_FAILED = "decode_failed"

# parameters read by the submission framings, never passed through
FRAMING_KEYS = ("w", "codec", "input")
INPUT_PREFIX = "input-"


class SideParams(MultiDict):
    """Request-scoped parameters travelling alongside the canonical bytes.

    Seeded from the query string. A codec may fill in its own key while
    decoding (Bech32 writes ``hrp``); the page re-embeds the map in the
    next form so that state survives the round trip.
    """

    @classmethod
    def from_args(cls, args) -> "SideParams":
        return cls(args)

    def value(self, key: str) -> str:
        return self.get(key) or ""

    def passthrough(self, owned=()) -> List[Tuple[str, str]]:
        pairs = []
        for key, value in self.items(multi=True):
            if key in FRAMING_KEYS or key.startswith(INPUT_PREFIX) or key in owned:
                continue
            pairs.append((key, value))
        return pairs


class Conversion(NamedTuple):
    state: str
    codec_id: Optional[str]
    data: bytes
    error: Optional[ConversionError]
    renders: List[Tuple[str, str]]
    params: SideParams


def read_submission(params) -> Tuple[Optional[str], str]:
    """Return ``(codec_id, text)`` for the submitted value, or ``(None, "")``.

    The page sends ``w`` from both the clicked button and a hidden
    fallback field, so the first non-empty ``w`` wins and its text is read
    from ``input-<w>``. Clients without the page may send ``codec`` and
    ``input`` instead.
    """
    for codec_id in params.getlist("w"):
        if codec_id:
            return codec_id, params.get(INPUT_PREFIX + codec_id, "")
    codec_id = params.get("codec", "")
    if codec_id:
        return codec_id, params.get("input", "")
    return None, ""


def find_codec(codec_id: str, codecs=CODECS):
    for codec in codecs:
        if codec.codec_id == codec_id:
            return codec
    raise UnknownCodec(f"No codec registered for '{codec_id}'.", codec_id)


def render_all(data: bytes, params, codecs=CODECS, views=VIEWS) -> List[Tuple[str, str]]:
    return [(widget.codec_id, widget.encode(data, params)) for widget in (*codecs, *views)]


def convert(params, codecs=CODECS, views=VIEWS) -> Conversion:
    """Decode the submitted value once and re-render it through every codec.

    Raises UnknownCodec when the submission names no registered codec; any
    other decode error is logged and renders the page against empty bytes.
    """
    codec_id, text = read_submission(params)
    data = b""
    error = None
    state = IDLE
    if codec_id is not None:
        codec = find_codec(codec_id, codecs)
        try:
            data = codec.decode(text, params)
            state = DECODED
        except ConversionError as e:
            logging.warning(f"codec={codec_id} err: {e}")
            error = e
            state = DECODE_FAILED
    return Conversion(
        state=state,
        codec_id=codec_id,
        data=data,
        error=error,
        renders=render_all(data, params, codecs, views),
        params=params,
    )
