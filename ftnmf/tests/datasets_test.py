import numpy as np

from ftnmf.datasets import load_toy_templates


def test_load_toy_templates():
    W, labels = load_toy_templates()

    assert W.shape == (3, 5)
    assert W.dtype == np.float64
    assert labels == ["t0", "t1", "t2", "t3", "t4"]
    np.testing.assert_array_equal(W[:, 1], [2.0, 3.0, 1.0])
    np.testing.assert_array_equal(W[:, 3], [30.0, 30.0, 30.0])
    assert np.min(W) >= 0
