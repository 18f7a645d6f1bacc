"""LetterMarkingEngine: compact letter display for multi-group comparisons.

Groups are joined in a "not significantly different" graph when their
pairwise Welch p-value exceeds alpha. Every maximal clique of that graph
gets one letter; two groups share a letter exactly when some maximal set of
mutually indistinguishable groups contains both. The relation is not
transitive: A~B and B~C does not put A and C under the same letter.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence

from relquant.constants import LETTERS, AnalysisConstants
from relquant.models import GroupStatResult
from relquant.statistics import PairwiseTest, welch_t_test


@dataclass(frozen=True)
class PairwiseComparison:
    """One edge candidate of the significance graph.

    ``used_fallback`` is set when the Welch test could not be run (NaN
    p-value); such pairs are treated as p = 1 and stay connected.
    """

    group_a: str
    group_b: str
    test: PairwiseTest
    effective_p: float
    used_fallback: bool

    @property
    def connected(self) -> bool:
        return self.effective_p > AnalysisConstants.SIGNIFICANCE_ALPHA


@dataclass(frozen=True)
class SignificanceGraph:
    order: List[str]  # group ids, highest mean first
    adjacency: List[int]  # bitmask of neighbours per node, no self loops
    comparisons: List[PairwiseComparison]

    def connected(self, i: int, j: int) -> bool:
        return bool(self.adjacency[i] >> j & 1)


def compare_pair(a: GroupStatResult, b: GroupStatResult) -> PairwiseComparison:
    test = welch_t_test(a.values, b.values)
    if test.is_valid:
        return PairwiseComparison(a.group_id, b.group_id, test, test.p_value, used_fallback=False)
    return PairwiseComparison(a.group_id, b.group_id, test, 1.0, used_fallback=True)


def build_nonsignificance_graph(group_stats: Sequence[GroupStatResult]) -> SignificanceGraph:
    """Sort groups by descending mean and connect non-significant pairs."""
    # sorted() is stable, so tied means keep their input order
    ordered = sorted(group_stats, key=lambda g: -g.mean)
    n = len(ordered)
    adjacency = [0] * n
    comparisons = []
    for i in range(n):
        for j in range(i + 1, n):
            comparison = compare_pair(ordered[i], ordered[j])
            comparisons.append(comparison)
            if comparison.connected:
                adjacency[i] |= 1 << j
                adjacency[j] |= 1 << i
    return SignificanceGraph(
        order=[g.group_id for g in ordered], adjacency=adjacency, comparisons=comparisons
    )


def _bits(mask: int) -> Iterator[int]:
    index = 0
    while mask:
        if mask & 1:
            yield index
        mask >>= 1
        index += 1


def _lowest_bit(mask: int) -> int:
    return (mask & -mask).bit_length() - 1


def find_maximal_cliques(adjacency: Sequence[int]) -> List[int]:
    """All maximal cliques (as bitmasks) via Bron–Kerbosch without pivoting.

    Candidate and excluded sets are plain ints passed down the recursion, so
    no branch ever sees another branch's state. Cliques come out in
    ascending order of the vertices that start them.
    """
    cliques = []

    def expand(clique: int, candidates: int, excluded: int) -> None:
        if candidates == 0 and excluded == 0:
            if clique:
                cliques.append(clique)
            return
        for v in _bits(candidates):
            bit = 1 << v
            if not candidates & bit:
                continue
            neighbours = adjacency[v]
            expand(clique | bit, candidates & neighbours, excluded & neighbours)
            candidates &= ~bit
            excluded |= bit

    expand(0, (1 << len(adjacency)) - 1, 0)
    return cliques


def assign_letters(order: Sequence[str], cliques: Sequence[int]) -> Dict[str, str]:
    """Letter per clique, ordered by each clique's best-ranked member.

    Letters wrap back to ``a`` after ``z``.
    """
    ranked = sorted(cliques, key=_lowest_bit)
    letters: Dict[str, List[str]] = {group_id: [] for group_id in order}
    for idx, clique in enumerate(ranked):
        char = LETTERS[idx % len(LETTERS)]
        for node in _bits(clique):
            letters[order[node]].append(char)
    return {group_id: "".join(sorted(chars)) for group_id, chars in letters.items()}


def generate_letter_markings(group_stats: Sequence[GroupStatResult]) -> Dict[str, str]:
    """Compact letter display for one target gene, keyed by group id."""
    if not group_stats:
        return {}
    graph = build_nonsignificance_graph(group_stats)
    return assign_letters(graph.order, find_maximal_cliques(graph.adjacency))
