import numpy as np
import numpy.typing as npt
from numba import njit


def template_part(
    W: npt.NDArray[np.floating], v: npt.NDArray[np.floating]
) -> npt.NDArray[np.floating]:
    """
    Compute the part of the multiplicative update numerator that only depends on
    the templates and a single frame of input.

    For a frame :math:`v` of shape ``(F, 1)`` this is

    .. math::
        (W \\odot (v \\, e^T))^T

    where :math:`e` is a vector of ones of length ``K``. The product :math:`v e^T`
    repeats the frame across the ``K`` template columns, so that

    .. math::
        (W \\odot (v e^T))^T \\, (WH)^{\\beta - 2} = W^T (v \\odot (WH)^{\\beta - 2})

    and the elementwise product with the input does not have to be redone on every
    update.

    Parameters
    ----------
    W : ndarray of shape (F, K)
        Template matrix.
    v : ndarray of shape (F, 1) or (F,)
        A single frame of input.

    Returns
    -------
    ndarray of shape (K, F)
    """
    ones_row = np.ones((1, W.shape[1]), dtype=W.dtype)
    # (F, 1) @ (1, K) -> (F, K), every column equal to the frame
    v_e_t = v.reshape(-1, 1) @ ones_row

    return (W * v_e_t).T


@njit(error_model="numpy")
def _beta_divergence_sum(
    X: npt.NDArray[np.float64], Y: npt.NDArray[np.float64], beta: float
) -> float:
    """Sum of elementwise beta-divergences between two flat arrays."""
    total = 0.0
    if beta == 0.0:
        for i in range(X.size):
            ratio = X[i] / Y[i]
            total += ratio - np.log(ratio) - 1.0
    elif beta == 1.0:
        for i in range(X.size):
            if X[i] == 0.0:
                total += Y[i]
            else:
                total += X[i] * np.log(X[i] / Y[i]) - X[i] + Y[i]
    elif beta == 2.0:
        for i in range(X.size):
            total += 0.5 * (X[i] - Y[i]) ** 2
    else:
        scale = beta * (beta - 1.0)
        for i in range(X.size):
            total += (
                X[i] ** beta
                + (beta - 1.0) * Y[i] ** beta
                - beta * X[i] * Y[i] ** (beta - 1.0)
            ) / scale

    return total


def beta_divergence(
    X: npt.NDArray[np.floating], Y: npt.NDArray[np.floating], beta: float
) -> float:
    """
    Compute the beta-divergence :math:`D_\\beta(X | Y)` summed over all entries.

    .. math::
        d_\\beta(x | y) = \\dfrac{x^\\beta + (\\beta - 1) y^\\beta
        - \\beta x y^{\\beta - 1}}{\\beta (\\beta - 1)}

    with the usual limits

    * ``beta = 0``: Itakura-Saito, :math:`x/y - \\log(x/y) - 1`
    * ``beta = 1``: generalized Kullback-Leibler, :math:`x \\log(x/y) - x + y`
    * ``beta = 2``: half squared Euclidean distance, :math:`(x - y)^2 / 2`

    Parameters
    ----------
    X : ndarray
        Observed non-negative array, e.g. the input :math:`V`.
    Y : ndarray of same shape as `X`
        Model array, e.g. the reconstruction :math:`WH`. Entries are expected to be
        strictly positive; zeros give ``inf`` or ``nan``.
    beta : float
        Parameter of the divergence.

    Returns
    -------
    float
        The divergence summed over all entries.
    """
    X = np.asarray(X)
    Y = np.asarray(Y)
    if X.shape != Y.shape:
        raise ValueError(
            f"Shape mismatch: shape of `X`: {X.shape} not equal to shape of `Y`: "
            f"{Y.shape}"
        )
    X = np.ascontiguousarray(X, dtype=np.float64).ravel()
    Y = np.ascontiguousarray(Y, dtype=np.float64).ravel()

    return float(_beta_divergence_sum(X, Y, float(beta)))
