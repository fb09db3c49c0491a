import msgpack
import pytest

from duel.messaging.encoder import MAX_BUFFER_LEN, DecodeError, decode, encode


class TestEncoder:
    def test_encode_produces_msgpack_map(self):
        data = {"type": "turn_change", "playerId_turn": 1}
        assert msgpack.unpackb(encode(data), raw=False) == data

    def test_decode_reads_back(self):
        assert decode(encode({"type": "shot", "angle": 12.5})) == {"type": "shot", "angle": 12.5}

    def test_invalid_bytes(self):
        with pytest.raises(DecodeError, match="failed to decode"):
            decode(b"\xc1")

    def test_non_dict_rejected(self):
        with pytest.raises(DecodeError, match="expected dict, got list"):
            decode(msgpack.packb([1, 2, 3]))

    def test_oversized_payload_rejected(self):
        with pytest.raises(DecodeError, match="payload too large"):
            decode(b"\x00" * (MAX_BUFFER_LEN + 1))
