"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

from collections import defaultdict


class Knowledge():
    """Background knowledge of forbidden and required edges.

    Knowledge is stored by variable name and is only queried, never checked
    for consistency. A pair may be neither forbidden nor required, and a
    directed edge may be both forbidden and required.

    Additionally, variables can be arranged in tiers, where a lower tier
    number means earlier. Edges from a later tier into an earlier tier are
    forbidden. If a tier is marked as forbidden within, edges between two of
    its members are forbidden in both directions.

    Parameters
    ----------
    forbidden : list of tuples, optional (default: None)
        Directed edges of the form [('A', 'B'), ...] meaning A --> B is
        forbidden.
    required : list of tuples, optional (default: None)
        Directed edges of the form [('A', 'B'), ...] meaning A --> B is
        required.
    tiers : dict, optional (default: None)
        Dictionary of form {0: ['A', 'B'], 1: ['C'], ...}.
    """

    def __init__(self, forbidden=None, required=None, tiers=None):
        self.forbidden = set()
        self.required = set()
        self.tiers = defaultdict(set)
        self.forbidden_within = set()

        if forbidden is not None:
            for (a, b) in forbidden:
                self.set_forbidden(a, b)
        if required is not None:
            for (a, b) in required:
                self.set_required(a, b)
        if tiers is not None:
            for tier, names in tiers.items():
                for name in names:
                    self.add_to_tier(tier, name)

    def set_forbidden(self, a, b):
        """Forbids the edge a --> b."""
        self.forbidden.add((str(a), str(b)))

    def remove_forbidden(self, a, b):
        self.forbidden.discard((str(a), str(b)))

    def set_required(self, a, b):
        """Requires the edge a --> b."""
        self.required.add((str(a), str(b)))

    def remove_required(self, a, b):
        self.required.discard((str(a), str(b)))

    def add_to_tier(self, tier, name):
        """Puts variable name into tier, removing it from any other tier."""
        if not isinstance(tier, int) or tier < 0:
            raise ValueError("tier must be a non-negative int, got %s" % tier)
        name = str(name)
        for members in self.tiers.values():
            members.discard(name)
        self.tiers[tier].add(name)

    def set_tier_forbidden_within(self, tier, forbidden=True):
        """Marks whether edges among the members of tier are forbidden."""
        if forbidden:
            self.forbidden_within.add(tier)
        else:
            self.forbidden_within.discard(tier)

    def get_tier(self, name):
        """Returns the tier of variable name or None."""
        for tier, members in self.tiers.items():
            if name in members:
                return tier
        return None

    def is_forbidden(self, a, b):
        """Returns whether the edge a --> b is forbidden."""
        a = str(a)
        b = str(b)
        if (a, b) in self.forbidden:
            return True
        tier_a = self.get_tier(a)
        tier_b = self.get_tier(b)
        if tier_a is None or tier_b is None:
            return False
        if tier_a > tier_b:
            return True
        return tier_a == tier_b and tier_a in self.forbidden_within

    def is_required(self, a, b):
        """Returns whether the edge a --> b is required."""
        return (str(a), str(b)) in self.required

    def is_empty(self):
        return (len(self.forbidden) == 0 and len(self.required) == 0
                and len(self.tiers) == 0)

    def __repr__(self):
        return ("Knowledge(forbidden=%s, required=%s, tiers=%s)"
                % (sorted(self.forbidden), sorted(self.required),
                   {t: sorted(m) for t, m in sorted(self.tiers.items())}))


def knowledge_orients(knowledge, left, right):
    """Returns whether knowledge forces the edge left --> right.

    This is the case if right --> left is forbidden or left --> right is
    required.
    """
    return (knowledge.is_forbidden(right, left)
            or knowledge.is_required(left, right))


def knowledge_requires_adjacency(knowledge, a, b):
    """Returns whether knowledge requires an edge in either direction."""
    return knowledge.is_required(a, b) or knowledge.is_required(b, a)


def knowledge_forbids_adjacency(knowledge, a, b):
    """Returns whether both directions between a and b are forbidden and
    neither is required."""
    if knowledge_requires_adjacency(knowledge, a, b):
        return False
    return knowledge.is_forbidden(a, b) and knowledge.is_forbidden(b, a)


def get_knowledge_orientation(knowledge, a, b):
    """Returns the link between a and b that knowledge implies.

    Required edges take precedence over forbidden ones. Otherwise a --> b is
    forced if knowledge_orients(knowledge, a, b) holds, which is checked
    before the reverse direction. A pair forbidden in both directions is
    therefore oriented a --> b.

    Returns
    -------
    link : str or None
        '-->' or '<--' if knowledge forces a single direction, '<=>' if both
        directions are required and None if knowledge is silent about the
        pair.
    """
    req_ab = knowledge.is_required(a, b)
    req_ba = knowledge.is_required(b, a)
    if req_ab and req_ba:
        return '<=>'
    elif req_ab:
        return '-->'
    elif req_ba:
        return '<--'
    elif knowledge_orients(knowledge, a, b):
        return '-->'
    elif knowledge_orients(knowledge, b, a):
        return '<--'
    return None
