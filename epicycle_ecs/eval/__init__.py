from epicycle_ecs.eval.spectrum import (
    direct_dft,
    energy_fraction,
    rank_coefficients,
    reconstruct_samples,
    signed_frequencies,
    truncation_errors,
)

__all__ = [
    "direct_dft",
    "energy_fraction",
    "rank_coefficients",
    "reconstruct_samples",
    "signed_frequencies",
    "truncation_errors",
]
