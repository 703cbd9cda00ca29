"""VC Intelligence Hub - multi-source market signal aggregation and momentum scoring."""

__version__ = "0.1.0"
