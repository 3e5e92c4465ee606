"""Convert images into MechAssault MGIc texture containers."""

__version__ = "0.1.0"
