"""
Interface package: line transport for the uzi codec.

Modules:
    uci    — UCI session loop. Reads GUI commands from stdin, writes engine
             responses to stdout. Run with: python -m interface.uci
    config — Session settings (engine identity, declared options, strictness).
"""
