from stepscript.core import ids


def test_run_id_shape():
    value = ids.run_id()
    assert value.startswith("run_")
    assert ids.is_run_id(value)


def test_run_ids_are_unique():
    assert ids.run_id() != ids.run_id()


def test_is_run_id_rejects_other_shapes():
    assert not ids.is_run_id("run_123")
    assert not ids.is_run_id("ev_01ARZ3NDEKTSV4RRFFQ69G5FAV")
