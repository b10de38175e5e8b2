"""Models module for CFB size analysis."""

from .anova import PositionAnova
from .binomial import BinomialFit, fit_binomial
from .scenario import ScenarioResult, evaluate_scenario

__all__ = ['PositionAnova', 'BinomialFit', 'fit_binomial', 'ScenarioResult', 'evaluate_scenario']
