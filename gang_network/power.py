"""
Power of a node as the fixed point of reciprocal-weighted propagation.

A person is powerful when tied to many weak persons: the score solves
x = (1/x) A, where (1/x) is the elementwise reciprocal of x and A the
non-negative tie matrix. The iteration

    x_{k+1} = (1/x_k) A

alternates between two sequences, so convergence is checked against the
iterate two steps back. At the limit alpha * x = (1/x) A holds for a scalar
alpha, and sqrt(alpha) * x is the fixed point itself.
"""
import numpy as np

from gang_network.config import POWER_PRECISION, POWER_MAX_ITER, POWER_DAMPING


def power_iteration(A, t=POWER_PRECISION, max_iter=POWER_MAX_ITER):
    """
    Iterate x <- (1/x) A from the all-ones vector.

    Args:
        A: non-negative square matrix, every column with a positive entry.
            Entry j of (1/x) A sums column j, so positive column sums are what
            keep the iterates positive; for a symmetric tie matrix these are
            the same as positive row sums.
        t: precision, stop when the L1 change over two steps is below 10^-t
        max_iter: cap on the number of iterations

    Returns:
        dict with 'vector', 'iterations' and 'converged'. When the cap is hit
        'converged' is False and 'vector' is the last (unscaled) iterate.
    """
    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Power iteration needs a square matrix, got shape {A.shape}")
    if (A < 0).any():
        raise ValueError("Power iteration needs a non-negative matrix")
    if not (A.sum(axis=0) > 0).all():
        raise ValueError("Every column of the matrix needs a positive entry")

    n = A.shape[0]
    eps = 10.0 ** (-t)
    x0 = np.zeros(n)
    x1 = np.ones(n)
    x2 = np.ones(n)
    diff = np.inf
    iterations = 0

    while diff > eps:
        if iterations >= max_iter:
            return {'vector': x2, 'iterations': iterations, 'converged': False}
        x0 = x1
        x1 = x2
        x2 = (1 / x2) @ A
        diff = np.sum(np.abs(x2 - x0))
        iterations += 1

    alpha = ((1 / x2) @ A[:, 0]) / x2[0]
    x2 = np.sqrt(alpha) * x2

    return {'vector': x2, 'iterations': iterations, 'converged': True}


def power_scores(weights, damping=POWER_DAMPING, t=POWER_PRECISION, max_iter=POWER_MAX_ITER):
    """ Power iteration on the tie matrix with damping added to the diagonal"""
    weights = np.asarray(weights, dtype=float)
    A = weights + damping * np.eye(weights.shape[0])
    return power_iteration(A, t=t, max_iter=max_iter)
