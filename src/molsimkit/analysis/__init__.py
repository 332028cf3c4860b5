"""
Analysis module for molsimkit.

This module provides frame reweighting and secondary structure maps.
"""

from .reweight import reweight, ReweightResults
from .secondary_structure import ss_map, ss_mean, dssp_run

__all__ = ['reweight', 'ReweightResults', 'ss_map', 'ss_mean', 'dssp_run']
