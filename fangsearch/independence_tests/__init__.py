from .independence_tests_base import CondIndTest
from .sem_bic_score import SemBicScore
from .score_test import ScoreIndTest
