import pytest

from courier.networking.serializers import (
    BytesSerializer,
    JsonSerializer,
    TextSerializer,
)


def test_bytes_serializer_passes_bytes_through():
    serializer = BytesSerializer()

    assert serializer.serialize(b"\x00raw") == b"\x00raw"
    assert serializer.serialize(bytearray(b"ba")) == b"ba"
    assert serializer.deserialize(b"\xffraw") == b"\xffraw"


def test_bytes_serializer_rejects_text():
    with pytest.raises(TypeError):
        BytesSerializer().serialize("text")  # type: ignore[arg-type]


def test_text_serializer_honours_encoding():
    serializer = TextSerializer(encoding="latin-1")

    assert serializer.serialize("é") == b"\xe9"
    assert serializer.deserialize(b"\xe9") == "é"


def test_text_serializer_raises_on_undecodable_payload():
    with pytest.raises(UnicodeDecodeError):
        TextSerializer().deserialize(b"\xff\xfe\xfa")


def test_json_serializer_forwards_dumps_options():
    serializer = JsonSerializer(sort_keys=True, separators=(",", ":"))

    assert serializer.serialize({"b": 1, "a": [1, 2]}) == b'{"a":[1,2],"b":1}'


def test_json_serializer_decodes_payload():
    assert JsonSerializer().deserialize(b'{"ok": true}') == {"ok": True}


def test_json_serializer_empty_payload_is_none():
    assert JsonSerializer().deserialize(b"") is None


def test_json_serializer_raises_on_invalid_payload():
    with pytest.raises(ValueError):
        JsonSerializer().deserialize(b"{nope")
