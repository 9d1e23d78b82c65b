"""
Likelihoods of observing two records under the same-haplotype hypothesis
(match likelihood) and under the independent-origin hypothesis (null
likelihood).
"""
from math import log
from typing import Mapping, Sequence

from haploedge.records import BASES, Observation

# Offset subtracted from the quality value before converting it to an error
# probability
QUALITY_OFFSET = 33

# Agreement probability for positions missing from the diversity table
DEFAULT_DIVERSITY = 0.25


def error_probability(quality: int) -> float:
    return 10 ** ((-quality - QUALITY_OFFSET) / 10)


def base_call_probability(observation: Observation, base: str) -> float:
    """
    Return the probability of the observation given that the true base is base.
    """
    error = error_probability(observation.quality)
    if observation.base == base:
        return 1.0 - error
    return error / 3.0


def position_match_probability(obs1: Observation, obs2: Observation) -> float:
    return sum(base_call_probability(obs1, b) * base_call_probability(obs2, b) for b in BASES)


def match_likelihood(
    shared: Sequence[int], cov1: Mapping[int, Observation], cov2: Mapping[int, Observation]
) -> float:
    """
    Probability of observing the base calls of both records on the shared
    positions if both come from one haplotype
    """
    result = 1.0
    for pos in shared:
        result *= position_match_probability(cov1[pos], cov2[pos])
    return result


def null_likelihood(tail: Sequence[int], diversity: Mapping[int, float]) -> float:
    result = 1.0
    for pos in tail:
        result *= diversity.get(pos, DEFAULT_DIVERSITY)
    return result


def _log(x: float) -> float:
    return log(x) if x > 0 else -float("inf")


def log_match_likelihood(
    shared: Sequence[int], cov1: Mapping[int, Observation], cov2: Mapping[int, Observation]
) -> float:
    """Natural logarithm of match_likelihood(), summed term by term"""
    return sum(_log(position_match_probability(cov1[pos], cov2[pos])) for pos in shared)


def log_null_likelihood(tail: Sequence[int], diversity: Mapping[int, float]) -> float:
    """Natural logarithm of null_likelihood(), summed term by term"""
    return sum(_log(diversity.get(pos, DEFAULT_DIVERSITY)) for pos in tail)
