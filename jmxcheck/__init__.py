"""Nagios-style health probe for MBean operations exposed through Jolokia."""

__version__ = "1.0.0"
