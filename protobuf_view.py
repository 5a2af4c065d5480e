import logging

import blackboxprotobuf


class ProtobufView:
    """Schema-less protobuf wire-format dump of arbitrary bytes.

    Read only: there is no decode, and bytes that are not a valid message
    render as the decoder's own diagnostic.
    """

    codec_id = "protobuf"
    label = "Protobuf"

    def encode(self, data: bytes, params=None) -> str:
        if not data:
            return ""
        try:
            rendered, _ = blackboxprotobuf.protobuf_to_json(bytes(data))
        except Exception as e:
            logging.debug(f"protobuf view could not decode {len(data)} bytes: {e}")
            return f"# {e}"
        return rendered


VIEWS = (ProtobufView(),)
