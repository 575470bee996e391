import warnings

import numpy as np
from numpy.typing import NDArray

from ._utils import beta_divergence, template_part
from .exceptions import DegenerateInputError, ShapeMismatchError

_SUPPORTED_DTYPES = (np.float32, np.float64)


class FixedTemplateNMF:
    """
    Beta-divergence Non-negative Matrix Factorization with fixed templates.

    Given an input :math:`V` and a fixed template matrix :math:`W`, the activations
    :math:`H` are refined with the multiplicative update

    .. math::
        H \\leftarrow H \\odot {W^T (V \\odot (WH)^{\\beta - 2}) \\over
        W^T (WH)^{\\beta - 1}}

    which decreases :math:`D_\\beta(V | WH)` while keeping :math:`H` non-negative.
    :math:`W` is never updated. This is useful for finding which templates of a
    known library are active in an input, for example which notes are played in a
    frame of a magnitude spectrogram.

    For a single frame input, the product of :math:`W` with the input (see
    :func:`ftnmf._utils.template_part`) does not change between updates, so it is
    computed once at construction. For inputs with more than one frame the
    numerator is computed directly as :math:`W^T (V \\odot (WH)^{\\beta - 2})`,
    which needs the same number of operations without storing a copy of the input
    per template.

    Parameters
    ----------
    W : ndarray of shape (n_features, n_templates)
        Template matrix. Each column is one template. Must be non-negative.
    H : ndarray of shape (n_templates, n_frames) or (n_templates,)
        Initial activations. Must be non-negative. A 1-D array is treated as a
        single column and :attr:`H` is returned as 1-D as well.
    V : ndarray of shape (n_features, n_frames) or (n_features,)
        Input matrix, e.g. a magnitude spectrogram. Must be non-negative.
    beta : float, default=0.5
        Parameter of the beta-divergence.

            * ``0``: Itakura-Saito divergence.
            * ``1``: Kullback-Leibler divergence.
            * ``2``: Squared Euclidean distance.

        The divergence is guaranteed to be non-increasing only for
        :math:`0 \\leq \\beta \\leq 2`.
    strict : bool, default=False
        If ``False``, ``nan`` and ``inf`` arising from zeros in :math:`WH` or in the
        denominator of the update propagate into :math:`H`. If ``True``,
        :meth:`step` raises :class:`~ftnmf.exceptions.DegenerateInputError`
        instead and leaves :math:`H` unchanged.

    Raises
    ------
    TypeError
        If an array is not a numpy array of dtype float32 or float64, or if
        ``beta`` or ``strict`` have the wrong type.
    ValueError
        If an array has the wrong number of dimensions, negative or non-finite
        elements, or if ``beta`` is not finite.
    ShapeMismatchError
        If the shapes of ``W``, ``H`` and ``V`` are not consistent.

    Warns
    -----
    UserWarning
        If ``beta`` is outside :math:`[0, 2]`, or if :math:`WH` contains zeros.

    Notes
    -----
    Inputs with exact zeros in :math:`WH` are outside the domain of the update for
    :math:`\\beta < 2`, since :math:`0^{\\beta - 2}` is infinite. They are not
    special-cased.

    References
    ----------
    .. [1] Févotte, C., and Idier, J. "Algorithms for nonnegative matrix
           factorization with the β-divergence." Neural computation 23.9 (2011):
           2421-2456.
    .. [2] Dessein, A., Cont, A., and Lemaitre, G. "Real-time polyphonic music
           transcription with non-negative matrix factorization and
           beta-divergence." ISMIR (2010).

    Examples
    --------
    >>> import numpy as np
    >>> from ftnmf import FixedTemplateNMF
    >>> from ftnmf.datasets import load_toy_templates
    >>>
    >>> W, labels = load_toy_templates()
    >>> V = np.array([2.1, 3.2, 0.9])
    >>> model = FixedTemplateNMF(W, np.ones(W.shape[1]), V, beta=0.5)
    >>> for _ in range(4):
    ...     H = model.step()
    >>> int(np.argmax(H))
    1
    """

    def __init__(
        self,
        W: NDArray[np.floating],
        H: NDArray[np.floating],
        V: NDArray[np.floating],
        beta: float = 0.5,
        strict: bool = False,
    ):
        W, H_init, V = self._validate_args(W, H, V)

        if not isinstance(beta, (int, float, np.integer, np.floating)) or isinstance(
            beta, bool
        ):
            raise TypeError(
                f"`beta` must be a real number, current type is {type(beta)}"
            )
        if not np.isfinite(beta):
            raise ValueError("`beta` must be finite")
        if not isinstance(strict, bool):
            raise TypeError(
                f"`strict` must be of type {bool}, current type is {type(strict)}"
            )

        if not (0 <= beta <= 2):
            warnings.warn(
                f"`beta`={beta} is outside [0, 2], the beta-divergence is not "
                "guaranteed to decrease with each update."
            )
        if np.any(W @ H_init == 0):
            warnings.warn(
                "`W @ H` contains zeros, updates will produce nan or inf values."
            )

        self.beta_ = float(beta)
        self.strict_ = strict

        self._W = W
        self._V = V
        self._H = H_init
        self._is_vector = H.ndim == 1
        if V.shape[1] == 1:
            self._template_part = template_part(W, V)
        else:
            self._template_part = None
        self._n_steps = 0

    @property
    def H(self):
        """
        The current activation coefficients :math:`H`.

        Returns
        -------
        ndarray of shape (n_templates, n_frames) or (n_templates,)
            Read-only view of the activations. It is 1-D if the initial activations
            were passed as a 1-D array.
        """
        if self._is_vector:
            return _read_only(self._H[:, 0])
        return _read_only(self._H)

    @property
    def W(self):
        """Read-only view of the template matrix of shape (n_features, n_templates)."""
        return _read_only(self._W)

    @property
    def V(self):
        """Read-only view of the input matrix of shape (n_features, n_frames)."""
        return _read_only(self._V)

    @property
    def template_part(self):
        """
        The cached product of the templates and a single frame input.

        Returns
        -------
        ndarray of shape (n_templates, n_features)
            :math:`(W \\odot (V e^T))^T`. Only available when the input has a single
            frame.
        """
        if self._template_part is None:
            raise AttributeError(
                "`template_part` is not available. It is only cached for inputs with "
                "a single frame."
            )
        return _read_only(self._template_part)

    @property
    def beta(self):
        """Parameter of the beta-divergence."""
        return self.beta_

    @property
    def strict(self):
        """Whether non-finite activations raise instead of propagating."""
        return self.strict_

    @property
    def n_steps(self):
        """Number of updates applied since construction."""
        return self._n_steps

    def step(self):
        """
        Apply one multiplicative update to the activations.

        Returns
        -------
        ndarray of shape (n_templates, n_frames) or (n_templates,)
            Read-only view of the updated activations, same as :attr:`H`.

        Raises
        ------
        DegenerateInputError
            Only if ``strict=True``, when the update yields ``nan`` or ``inf``.
        """
        if self.strict_:
            with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
                H_new = self._updated_H()
            if not np.all(np.isfinite(H_new)):
                raise DegenerateInputError(
                    f"Update {self._n_steps + 1} produced non-finite activations. "
                    "Check for templates that the input cannot reach or zeros in "
                    "`W @ H`."
                )
        else:
            H_new = self._updated_H()

        self._H = H_new
        self._n_steps += 1

        return self.H

    def reconstruction(self):
        """
        Return the current approximation :math:`WH` of the input.

        Returns
        -------
        ndarray of shape (n_features, n_frames)
        """
        return self._W @ self._H

    def divergence(self):
        """
        Return the beta-divergence :math:`D_\\beta(V | WH)` for the current
        activations, summed over all entries.

        Returns
        -------
        float
        """
        return beta_divergence(self._V, self._W @ self._H, self.beta_)

    def _updated_H(self):
        """Compute the next activations without modifying the current ones."""
        WH = self._W @ self._H
        WH_beta_1 = WH ** (self.beta_ - 1)
        WH_beta_2 = WH ** (self.beta_ - 2)

        if self._template_part is not None:
            numerator = self._template_part @ WH_beta_2
        else:
            numerator = self._W.T @ (self._V * WH_beta_2)
        denominator = self._W.T @ WH_beta_1

        return self._H * (numerator / denominator)

    def _validate_args(self, W, H, V):
        """
        Validate the input arrays and return C-contiguous 2-D copies of them.

        Parameters
        ----------
        W : ndarray
            Template matrix.
        H : ndarray
            Initial activations.
        V : ndarray
            Input matrix.

        Returns
        -------
        W, H, V : ndarray
            Copies with a common floating dtype. 1-D ``H`` and ``V`` are returned
            as single column 2-D arrays.
        """
        # check type
        if not isinstance(W, np.ndarray):
            raise TypeError("`W` must be a numpy array.")
        if not isinstance(H, np.ndarray):
            raise TypeError("`H` must be a numpy array.")
        if not isinstance(V, np.ndarray):
            raise TypeError("`V` must be a numpy array.")

        # check dtype
        for name, arr in (("W", W), ("H", H), ("V", V)):
            if arr.dtype not in _SUPPORTED_DTYPES:
                raise TypeError(
                    f"The dtype of `{name}` elements should be {np.float32} or "
                    f"{np.float64}, current dtype is {arr.dtype}"
                )

        # check dimensions
        if W.ndim != 2:
            raise ValueError(f"`W` must be a 2-D array, got {W.ndim}-D.")
        if H.ndim not in (1, 2):
            raise ValueError(f"`H` must be a 1-D or 2-D array, got {H.ndim}-D.")
        if V.ndim not in (1, 2):
            raise ValueError(f"`V` must be a 1-D or 2-D array, got {V.ndim}-D.")
        H = H.reshape(-1, 1) if H.ndim == 1 else H
        V = V.reshape(-1, 1) if V.ndim == 1 else V

        # check shape matches
        if W.shape[1] != H.shape[0]:
            raise ShapeMismatchError(
                f"Shape mismatch: columns of `W`: {W.shape[1]} not equal to rows of "
                f"`H`: {H.shape[0]}"
            )
        if W.shape[0] != V.shape[0]:
            raise ShapeMismatchError(
                f"Shape mismatch: rows of `W`: {W.shape[0]} not equal to rows of "
                f"`V`: {V.shape[0]}"
            )
        if H.shape[1] != V.shape[1]:
            raise ShapeMismatchError(
                f"Shape mismatch: columns of `H`: {H.shape[1]} not equal to columns "
                f"of `V`: {V.shape[1]}"
            )

        # check if finite, nan would pass the non-negativity checks
        for name, arr in (("W", W), ("H", H), ("V", V)):
            if not np.all(np.isfinite(arr)):
                raise ValueError(f"All elements of `{name}` must be finite")

        # check if non-negative
        if W.min() < 0:
            raise ValueError("All elements of `W` must be >= 0")
        if H.min() < 0:
            raise ValueError("All elements of `H` must be >= 0")
        if V.min() < 0:
            raise ValueError("All elements of `V` must be >= 0")

        dtype = np.result_type(W, H, V)
        W = np.ascontiguousarray(W.copy(), dtype=dtype)
        H = np.ascontiguousarray(H.copy(), dtype=dtype)
        V = np.ascontiguousarray(V.copy(), dtype=dtype)

        return W, H, V


def solve(
    W: NDArray[np.floating],
    H: NDArray[np.floating],
    V: NDArray[np.floating],
    beta: float = 0.5,
    iter_max: int = 5,
    strict: bool = False,
) -> NDArray[np.floating]:
    """
    Compute the activations of fixed templates for an input.

    Convenience wrapper around :class:`FixedTemplateNMF`. ``H`` counts as the
    first iterate, so ``iter_max - 1`` updates are applied. There is no
    convergence check; pass a larger ``iter_max`` for a better approximation.

    Parameters
    ----------
    W : ndarray of shape (n_features, n_templates)
        Template matrix.
    H : ndarray of shape (n_templates,) or (n_templates, n_frames)
        Initial activations.
    V : ndarray of shape (n_features,) or (n_features, n_frames)
        Input matrix.
    beta : float, default=0.5
        Parameter of the beta-divergence.
    iter_max : int, default=5
        Total number of iterates including the initial one. Must be >= 1.
    strict : bool, default=False
        See :class:`FixedTemplateNMF`.

    Returns
    -------
    H : ndarray of same shape as `H`
        The activations after ``iter_max - 1`` updates.

    Examples
    --------
    >>> import numpy as np
    >>> from ftnmf import solve
    >>> from ftnmf.datasets import load_toy_templates
    >>>
    >>> W, labels = load_toy_templates()
    >>> H = solve(W, np.ones(W.shape[1]), np.array([1.0, 0.1, 5.1]), beta=0.5)
    >>> labels[int(np.argmax(H))]
    't0'
    """
    if not isinstance(iter_max, (int, np.integer)) or isinstance(iter_max, bool):
        raise TypeError(
            f"`iter_max` must be of type {int}, current type is {type(iter_max)}"
        )
    if iter_max < 1:
        raise ValueError("`iter_max` must be >= 1")

    model = FixedTemplateNMF(W, H, V, beta=beta, strict=strict)
    for _ in range(iter_max - 1):
        model.step()

    return np.array(model.H)


def _read_only(arr: NDArray) -> NDArray:
    """Return a view of `arr` that cannot be written to."""
    view = arr.view()
    view.flags.writeable = False
    return view
