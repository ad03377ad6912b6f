"""
Algorithms package for the Banker's Resource Allocator.
Contains the safety check (Banker's Algorithm) and the banker facade built on it.
"""
