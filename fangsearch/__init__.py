"""Fangsearch causal discovery for i.i.d. data."""

from .data_processing import DataFrame
from .knowledge import Knowledge
from .graphs import Edge, Graph
from .fas import FAS
from .fang import Fang

__version__ = "0.1.0"
