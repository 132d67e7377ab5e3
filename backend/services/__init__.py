"""
Side-effect services that react to simulation results.
"""
