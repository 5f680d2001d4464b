# import the calculator and the stats engine
from .stats import StatsCalculator, StatsConfig, build_chart_geometry
from . import stats

__all__ = ['StatsCalculator', 'StatsConfig', 'build_chart_geometry', 'stats']
