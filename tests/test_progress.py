from progress import fires_once


def test_fires_only_on_false_to_true_edge():
    assert fires_once(False, True) is True
    assert fires_once(False, False) is False
    assert fires_once(True, True) is False
    assert fires_once(True, False) is False
