"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

import numpy as np


class Edge():
    r"""Edge between two nodes.

    Parameters
    ----------
    node1, node2 : str
        Names of the endpoints.
    link : {'-->', 'o-o'}
        Link type from node1 to node2. '-->' is the directed edge
        node1 --> node2, 'o-o' is an undirected edge.
    line_color : str, optional (default: None)
        Display annotation without algorithmic meaning, for example to mark
        detected two-cycles.
    """

    def __init__(self, node1, node2, link, line_color=None):
        if link not in ['-->', 'o-o']:
            raise ValueError("link must be '-->' or 'o-o', got %s" % link)
        if node1 == node2:
            raise ValueError("Self-loops are not allowed: %s" % node1)
        self.node1 = node1
        self.node2 = node2
        self.link = link
        self.line_color = line_color

    def is_directed(self):
        return self.link == '-->'

    def key(self):
        """Returns an identifier that ignores the order of undirected
        endpoints."""
        if self.link == 'o-o':
            return ('o-o', tuple(sorted([self.node1, self.node2])))
        return ('-->', (self.node1, self.node2))

    def __eq__(self, other):
        if not isinstance(other, Edge):
            return NotImplemented
        return (self.key() == other.key()
                and self.line_color == other.line_color)

    def __hash__(self):
        return hash((self.key(), self.line_color))

    def __repr__(self):
        string = "%s %s %s" % (self.node1, self.link, self.node2)
        if self.line_color is not None:
            string += " [%s]" % self.line_color
        return string


class Graph():
    r"""Edge list graph over named nodes.

    The graph may contain directed and undirected edges. A two-cycle is
    represented by the two directed edges A --> B and B --> A. Besides a
    two-cycle there is at most one edge per pair of nodes.

    Parameters
    ----------
    nodes : list of str
        Node names. The order defines the index order of get_graph_array().
    """

    def __init__(self, nodes):
        self.nodes = list(nodes)
        if len(set(self.nodes)) != len(self.nodes):
            raise ValueError("Node names must be unique.")
        self.edges = []

    def _check_nodes(self, *nodes):
        for node in nodes:
            if node not in self.nodes:
                raise ValueError("Node %s not in graph." % node)

    def add_edge(self, edge):
        """Adds edge to the graph.

        Raises ValueError if the edge clashes with an existing edge between
        the same nodes. The only allowed combination is a pair of directed
        edges in opposite directions.
        """
        self._check_nodes(edge.node1, edge.node2)
        for existing in self.get_edges(edge.node1, edge.node2):
            if (existing.is_directed() and edge.is_directed()
                    and existing.node1 == edge.node2):
                continue
            raise ValueError("Cannot add %s, graph already contains %s."
                             % (edge, existing))
        self.edges.append(edge)

    def add_directed_edge(self, node1, node2, line_color=None):
        self.add_edge(Edge(node1, node2, '-->', line_color=line_color))

    def add_undirected_edge(self, node1, node2, line_color=None):
        self.add_edge(Edge(node1, node2, 'o-o', line_color=line_color))

    def add_two_cycle(self, node1, node2, line_color=None):
        """Adds the directed edges node1 --> node2 and node2 --> node1."""
        self.add_directed_edge(node1, node2, line_color=line_color)
        self.add_directed_edge(node2, node1, line_color=line_color)

    def remove_edge(self, edge):
        self.edges.remove(edge)

    def remove_edges(self, node1, node2):
        """Removes all edges between node1 and node2."""
        for edge in self.get_edges(node1, node2):
            self.edges.remove(edge)

    def get_edges(self, node1, node2):
        """Returns all edges between node1 and node2."""
        return [edge for edge in self.edges
                if (edge.node1, edge.node2) in [(node1, node2),
                                                (node2, node1)]]

    def is_adjacent_to(self, node1, node2):
        return len(self.get_edges(node1, node2)) > 0

    def get_adjacent_nodes(self, node):
        """Returns the adjacent nodes of node in the order of self.nodes."""
        adjacent = set()
        for edge in self.edges:
            if edge.node1 == node:
                adjacent.add(edge.node2)
            elif edge.node2 == node:
                adjacent.add(edge.node1)
        return [other for other in self.nodes if other in adjacent]

    def is_directed_from_to(self, node1, node2):
        """Returns whether the edge node1 --> node2 exists."""
        return any(edge.is_directed() and edge.node1 == node1
                   for edge in self.get_edges(node1, node2))

    def is_undirected(self, node1, node2):
        return any(not edge.is_directed()
                   for edge in self.get_edges(node1, node2))

    def is_two_cycle(self, node1, node2):
        return (self.is_directed_from_to(node1, node2)
                and self.is_directed_from_to(node2, node1))

    def get_num_edges(self):
        """Returns the number of adjacencies, counting a two-cycle once."""
        return len(set(tuple(sorted([edge.node1, edge.node2]))
                       for edge in self.edges))

    def get_link(self, node1, node2):
        """Returns the link type between node1 and node2.

        Returns
        -------
        link : str
            '-->' for node1 --> node2, '<--' for node2 --> node1, 'o-o' for
            an undirected edge, '<=>' for a two-cycle and '' for no edge.
        """
        if self.is_two_cycle(node1, node2):
            return '<=>'
        elif self.is_directed_from_to(node1, node2):
            return '-->'
        elif self.is_directed_from_to(node2, node1):
            return '<--'
        elif self.is_undirected(node1, node2):
            return 'o-o'
        return ''

    def get_graph_array(self):
        """Returns string array of shape (N, N) with the link types.

        graph[i, j] is the link type from self.nodes[i] to self.nodes[j] as
        returned by get_link, such that graph[i, j] = '-->' implies
        graph[j, i] = '<--'.
        """
        N = len(self.nodes)
        graph = np.zeros((N, N), dtype='<U3')
        for i, node1 in enumerate(self.nodes):
            for j, node2 in enumerate(self.nodes):
                if i != j:
                    graph[i, j] = self.get_link(node1, node2)
        return graph

    def copy(self):
        graph = Graph(self.nodes)
        for edge in self.edges:
            graph.edges.append(Edge(edge.node1, edge.node2, edge.link,
                                    line_color=edge.line_color))
        return graph

    def __eq__(self, other):
        if not isinstance(other, Graph):
            return NotImplemented
        return (set(self.nodes) == set(other.nodes)
                and sorted(self.edges, key=_edge_sort_key)
                == sorted(other.edges, key=_edge_sort_key))

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        string = "Graph nodes: %s\nGraph edges:" % ", ".join(self.nodes)
        for index, edge in enumerate(self.edges):
            string += "\n%d. %s" % (index + 1, edge)
        return string


def _edge_sort_key(edge):
    return (edge.key(), str(edge.line_color))
