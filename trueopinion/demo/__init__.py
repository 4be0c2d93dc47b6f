"""
Demo application for the True Opinion client.
"""
