"""Core domain package for actgate.

Core contains level encoding, pattern matching, threshold resolution and the
suppression decisions without any host-client specifics, keeping the policy
logic testable without a running chat client.
"""
