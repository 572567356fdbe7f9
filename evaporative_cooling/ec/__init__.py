"""
The Evaporative Cooling loop: free energy fusion, elimination and orchestration.
"""

from .free_energy import compute_free_energy
from .attribute_eliminator import eliminate_worst
from .ec_controller import ECController

__all__ = ['compute_free_energy', 'eliminate_worst', 'ECController']
