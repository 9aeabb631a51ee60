"""
Probe Components.

    arguments    - command line -> ProbeConfig
    object_name  - MBean object name parsing and pattern detection
    client       - Jolokia HTTP client
    invoker      - connect, resolve, invoke, disconnect
    interpreter  - raw value -> ExitStatus and display text
    runner       - one probe run end to end
"""
