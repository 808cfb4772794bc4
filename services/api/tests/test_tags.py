from blog.models.tags import TagArray, decode_tags, encode_tags
from sqlalchemy.dialects import postgresql


def test_encode_empty_tags_is_null():
    assert encode_tags([]) is None
    assert encode_tags(None) is None


def test_encode_preserves_order():
    assert encode_tags(["go", "db"]) == ["go", "db"]
    assert encode_tags(("db", "go")) == ["db", "go"]


def test_decode_null_and_empty_are_empty_list():
    assert decode_tags(None) == []
    assert decode_tags([]) == []


def test_decode_preserves_order():
    assert decode_tags(["b", "a", "c"]) == ["b", "a", "c"]


def test_round_trip():
    assert decode_tags(encode_tags([])) == []
    assert decode_tags(encode_tags(["go", "db"])) == ["go", "db"]


def test_tag_array_uses_encode_and_decode():
    column_type = TagArray()
    dialect = postgresql.dialect()
    assert column_type.process_bind_param([], dialect) is None
    assert column_type.process_bind_param(["x"], dialect) == ["x"]
    assert column_type.process_result_value(None, dialect) == []
    assert column_type.process_result_value(["x", "y"], dialect) == ["x", "y"]
