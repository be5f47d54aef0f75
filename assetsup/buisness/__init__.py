"""
Business layer: write-side contexts and the Stellar registration bridge
"""
