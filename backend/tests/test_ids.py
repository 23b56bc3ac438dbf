"""ID 코덱 테스트"""

import pytest
from bson import ObjectId

from app.core.errors import InvalidIdentifier
from app.core.ids import is_valid_id, replace_id, to_object_id


@pytest.mark.parametrize("hex_id", ["0" * 24, "5c8a1d5b0190b214360dc031", "abcdef0123456789abcdef01"])
def test_round_trip(hex_id):
    assert str(to_object_id(hex_id)) == hex_id


@pytest.mark.parametrize("bad", ["not-an-id", "", "5c8a1d5b0190b214360dc03", "5C8A1D5B0190B214360DC031", "a" * 24 + "\n", None])
def test_invalid_identifier(bad):
    assert is_valid_id(bad) is False
    with pytest.raises(InvalidIdentifier) as exc:
        to_object_id(bad)
    assert "24 hexadecimal characters" in exc.value.message


def test_replace_id_exposes_string_id_and_drops_internal_key():
    oid, owner = ObjectId(), ObjectId()
    doc = {"_id": oid, "userId": owner, "recipes_id": [owner], "name": "x"}

    out = replace_id(doc)

    assert out == {"id": str(oid), "userId": str(owner), "recipes_id": [str(owner)], "name": "x"}
    assert "_id" in doc  # 입력 문서는 그대로
