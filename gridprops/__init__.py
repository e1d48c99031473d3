"""GridProps: grid property management for structured reservoir grids."""

__app_name__ = "gridprops"
__version__ = "0.1.0"
