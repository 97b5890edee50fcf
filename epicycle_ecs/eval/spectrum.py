"""Spectrum analysis helpers.

Reference implementations and diagnostics used to check a decomposition:
the O(N^2) DFT, the coefficient ranking shared with the selector, and the
reconstruction error for every truncation K.
"""

from __future__ import annotations

from typing import Literal

import numpy as np


def direct_dft(signal: np.ndarray) -> np.ndarray:
    """DFT by the defining sum X[k] = sum_n s[n] * exp(-2*pi*i*k*n/N)."""
    s = np.asarray(signal, dtype=np.complex128)
    n = len(s)
    idx = np.arange(n)
    # Reduce k*n modulo N before scaling to keep the exponent small
    kn = np.outer(idx, idx) % n
    basis = np.exp(-2j * np.pi * kn / n)
    return basis @ s


def signed_frequencies(
    n: int,
    convention: Literal["symmetric", "zero_based"] = "symmetric",
) -> np.ndarray:
    """Frequency of each DFT bin as an int64 array.

    'symmetric' follows numpy.fft.fftfreq: 0..ceil(N/2)-1, then -floor(N/2)..-1.
    'zero_based' returns 0..N-1.
    """
    if n < 1:
        raise ValueError(f"Signal length must be positive, got {n}")
    k = np.arange(n, dtype=np.int64)
    if convention == "zero_based":
        return k
    if convention == "symmetric":
        return np.where(k < (n + 1) // 2, k, k - n)
    raise ValueError(f"Unknown frequency convention {convention!r}")


def rank_coefficients(coeffs: np.ndarray, frequencies: np.ndarray) -> np.ndarray:
    """Indices of coefficients, most significant first.

    Ordered by magnitude descending, then by |frequency| ascending, then by
    frequency ascending so +k and -k of equal magnitude rank deterministically.
    """
    magnitudes = np.abs(coeffs)
    return np.lexsort((frequencies, np.abs(frequencies), -magnitudes))


def reconstruct_samples(
    coeffs: np.ndarray,
    frequencies: np.ndarray,
    n: int,
) -> np.ndarray:
    """Inverse transform of the given terms at the N sample times, as x + iy."""
    idx = np.arange(n)
    phase = 2j * np.pi * np.outer(idx, np.mod(frequencies, n)) / n
    return np.exp(phase) @ np.asarray(coeffs, dtype=np.complex128) / n


def truncation_errors(
    points: np.ndarray,
    coeffs: np.ndarray,
    frequencies: np.ndarray,
) -> np.ndarray:
    """Reconstruction MSE at the sample times for every K from 1 to N.

    Terms are added in selector order; the error for K is the per-coordinate
    mean squared difference between the path and the K-term reconstruction.

    Returns:
        (N,) float64 array, entry K-1 is the error with K terms
    """
    target = points[:, 0] + 1j * points[:, 1]
    n = len(target)
    ranked = rank_coefficients(coeffs, frequencies)
    idx = np.arange(n)

    recon = np.zeros(n, dtype=np.complex128)
    errors = np.empty(n, dtype=np.float64)
    for k_terms, j in enumerate(ranked, start=1):
        recon += coeffs[j] * np.exp(2j * np.pi * idx * (int(frequencies[j]) % n) / n) / n
        errors[k_terms - 1] = np.mean(np.abs(target - recon) ** 2) / 2.0
    return errors


def energy_fraction(coeffs: np.ndarray, k: int) -> float:
    """Share of total spectral energy held by the k largest coefficients."""
    energy = np.sort(np.abs(coeffs) ** 2)[::-1]
    total = float(energy.sum())
    if total == 0.0:
        return 1.0
    return float(energy[:k].sum() / total)
