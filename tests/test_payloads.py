import json

import pytest

from scripts.normalize_outfit_payloads import normalize_outfit
from tripfit.models.models import Outfit
from tripfit.services.payloads import coerce_object


def test_coerce_object_accepts_both_forms():
    assert coerce_object({"a": 1}) == {"a": 1}
    assert coerce_object('{"a": 1}') == {"a": 1}
    assert coerce_object(json.dumps(json.dumps({"a": 1}))) == {"a": 1}
    assert coerce_object(None) is None


def test_coerce_object_lenient_and_strict():
    assert coerce_object("") == {}
    assert coerce_object("{oops") == {}
    assert coerce_object("[1]") == {}
    with pytest.raises(ValueError):
        coerce_object("{oops", strict=True)
    with pytest.raises(ValueError):
        coerce_object(42, strict=True)


def test_normalize_outfit_rewrites_string_rows():
    row = Outfit(destination="Hanoi", weather='{"temperature": 31}', outfit={"top": "Tee"})
    assert normalize_outfit(row) is True
    assert row.weather == {"temperature": 31}
    assert row.outfit == {"top": "Tee"}
    assert normalize_outfit(row) is False
