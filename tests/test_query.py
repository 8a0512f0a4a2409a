import pytest

from treebase.query import (
    Condition,
    Timestamp,
    decode_string,
    encode_string,
    is_integer,
    parse_integer,
    parse_timestamp,
    split_condition,
    tokenize,
)


# -- timestamps -------------------------------------------------------------


@pytest.mark.parametrize("text", ["2020/2/9", "1999/12/31", "2021/10/1", "2000/2/29"])
def test_timestamp_str_round_trip(text):
    assert str(parse_timestamp(text)) == text


def test_timestamp_two_digit_month_parses():
    stamp = parse_timestamp("2021/07/15")
    assert (stamp.year, stamp.month, stamp.day) == (2021, 7, 15)


def test_timestamp_key_round_trip():
    stamp = parse_timestamp("2021/07/15")
    assert Timestamp.from_key(stamp.key()) == stamp


def test_timestamp_key_order_follows_dates():
    dates = ["2021/1/31", "2020/12/31", "2021/2/1", "2020/2/29"]
    stamps = [parse_timestamp(d) for d in dates]
    assert sorted(stamps, key=Timestamp.key) == sorted(stamps)


def test_timestamp_key_packs_fields():
    stamp = Timestamp(2020, 2, 29)
    assert stamp.key() == 20200229


@pytest.mark.parametrize(
    "text",
    [
        "2019/2/29",
        "1900/2/29",
        "2020/13/1",
        "2020/0/1",
        "2020/4/31",
        "0000/1/1",
        "20a0/1/1",
        "2020-1/1",
        "2020/1x1",
        "2020/1/",
        "2020/12/",
        "2020/1/1a",
        "20/1/1",
        "2020/10/100",
    ],
)
def test_invalid_timestamps_raise(text):
    with pytest.raises(ValueError):
        parse_timestamp(text)


def test_leap_century_accepted():
    assert parse_timestamp("2000/2/29").day == 29


# -- integers ---------------------------------------------------------------


def test_is_integer():
    assert is_integer("12345")
    assert is_integer("")
    assert not is_integer("12a")
    assert not is_integer("-1")


def test_parse_integer():
    assert parse_integer("0042") == 42
    assert parse_integer("") == 0


def test_parse_integer_rejects_non_digits():
    with pytest.raises(ValueError):
        parse_integer("4x")


# -- string encoding --------------------------------------------------------


@pytest.mark.parametrize("text", ["ali", "z", "abc123", "9", "hello0world"])
def test_string_round_trip(text):
    assert decode_string(encode_string(text)) == text


def test_encode_single_letter():
    assert encode_string("a") == 1


def test_encode_empty_is_zero():
    assert encode_string("") == 0
    assert decode_string(0) == ""


def test_encode_rejects_other_characters():
    with pytest.raises(ValueError):
        encode_string("Ali")


def test_decode_rejects_negative():
    with pytest.raises(ValueError):
        decode_string(-1)


def test_encoding_orders_same_length_strings():
    ali = encode_string("ali")
    amy = encode_string("amy")
    bob = encode_string("bob")
    zed = encode_string("zed")
    assert ali < amy < bob < zed


# -- tokenizing -------------------------------------------------------------


def test_tokenize_create():
    result = tokenize("CREATE TABLE t (name string, age int)")
    assert result.tokens == ["CREATE", "TABLE", "t", "name", "string", "age", "int"]
    assert result.size == 2


def test_tokenize_insert():
    result = tokenize('INSERT INTO t VALUES ("ali", 20)')
    assert result.tokens == ["INSERT", "INTO", "t", "VALUES", '"ali"', "20"]


def test_tokenize_joins_single_condition():
    result = tokenize("SELECT * FROM t WHERE age = 5")
    assert result.tokens == ["SELECT", "*", "FROM", "t", "WHERE", "age=5"]


def test_tokenize_keeps_compact_condition():
    result = tokenize("DELETE FROM t WHERE age==5")
    assert result.tokens == ["DELETE", "FROM", "t", "WHERE", "age==5"]


def test_tokenize_two_compact_conditions_untouched():
    result = tokenize("DELETE FROM t WHERE a==1 | b<2")
    assert result.tokens == ["DELETE", "FROM", "t", "WHERE", "a==1", "|", "b<2"]


def test_tokenize_joins_two_conditions():
    result = tokenize("DELETE FROM t WHERE a == 1 & b < 2")
    assert result.tokens == ["DELETE", "FROM", "t", "WHERE", "a==1", "&", "b<2"]


def test_tokenize_pads_for_leading_space():
    result = tokenize(" SELECT")
    assert result.tokens == ["SELECT", ""]


# -- conditions -------------------------------------------------------------


def test_split_condition_compact():
    assert split_condition("age==5") == Condition("age", "==", "5")


@pytest.mark.parametrize("op", ["<", ">", "=="])
def test_split_condition_operators(op):
    assert split_condition(f"age{op}7").operator == op


def test_split_condition_without_operator():
    assert split_condition("age") == ("age", "", "")


def test_split_condition_round_trip():
    parts = split_condition("birth<2020/1/1")
    assert "".join(parts) == "birth<2020/1/1"