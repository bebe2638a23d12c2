"""
Core aggregation and report generation for procmem.
"""

from .aggregator import MappingList, load_maps, order_before
from .generator import ReportGenerator, generate_report

__all__ = ['MappingList', 'load_maps', 'order_before', 'ReportGenerator', 'generate_report']
