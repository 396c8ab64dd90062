"""
Tests Package

Test suite for the postage quote service.
"""
