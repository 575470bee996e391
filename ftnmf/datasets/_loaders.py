import os

import numpy as np


def load_toy_templates():
    """
    Loads a small library of 5 templates over 3 feature bins.

    The library contains templates of very different scale, e.g. ``t3`` is flat
    with a magnitude of 30 while ``t4`` is close to flat with a magnitude below 2.
    It is useful to check how activations respond to shape versus scale.

    Returns
    -------
    W : np.ndarray of shape (3, 5)
        The templates, one per column.
    labels : list of str
        The name of each template.

    """
    DATA_DIR_PATH = os.path.join(os.path.dirname(__file__))

    fpath = os.path.join(DATA_DIR_PATH, "toy_templates.csv")
    data = np.genfromtxt(fpath, delimiter=",", skip_header=1)

    labels = np.genfromtxt(fpath, delimiter=",", max_rows=1, dtype=str)[1:].tolist()
    W = data[:, 1:].astype(dtype=np.float64)

    return W, labels
