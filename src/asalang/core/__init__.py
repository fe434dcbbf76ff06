"""
Core Asa machinery: IR, errors, configuration, and the language pipeline.
"""
