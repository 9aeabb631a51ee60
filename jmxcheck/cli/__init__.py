"""
CLI Entry Point.

Process entry for the probe. Parses the command line, configures logging,
runs the probe and exits with the configured numeric status code.

Usage:
    check_jmx_health -U http://localhost:8778/jolokia \
        -O com.example:type=Health -o health
    python cli.py -h
"""
