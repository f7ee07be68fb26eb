from toolsreg.hashing import canonical_json, hash_payload


def test_canonical_json_sorts_keys_and_is_compact():
    assert canonical_json({"b": 1, "a": [1, {"d": 2, "c": 3}]}) == '{"a":[1,{"c":3,"d":2}],"b":1}'


def test_hash_payload_ignores_key_order():
    assert hash_payload({"a": 1, "b": "é"}) == hash_payload({"b": "é", "a": 1})


def test_hash_payload_deterministic():
    assert hash_payload({}) == "44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a"
