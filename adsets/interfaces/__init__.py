"""
Interfaces package for adsets.

This package contains abstract base classes that define the core interfaces
for the adsets library. These interfaces establish contracts that concrete
implementations must follow.
"""

from adsets.interfaces.processing_step import DatasetStep

__all__ = ['DatasetStep']
