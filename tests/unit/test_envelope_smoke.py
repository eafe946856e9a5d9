import json

from stepscript.core.envelope import dumps, ok, err


def test_ok_envelope_shape():
    out = ok(command="x", data={"a": 1})
    assert out["ok"] is True
    assert out["command"] == "x"
    assert out["data"] == {"a": 1}


def test_err_envelope_shape():
    out = err(command="x", error_type="NOT_FOUND", message="m")
    assert out["ok"] is False
    assert out["error"]["type"] == "NOT_FOUND"
    assert out["error"]["details"] == {}


def test_dumps_is_sorted_and_newline_terminated():
    text = dumps({"b": 1, "a": "文"})
    assert text.endswith("\n")
    assert text.index('"a"') < text.index('"b"')
    assert json.loads(text) == {"a": "文", "b": 1}
