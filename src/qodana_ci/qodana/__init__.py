"""Qodana CLI invocation: argument construction and process execution."""
